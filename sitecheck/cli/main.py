"""
Main CLI entry point for the Company Website Tracker.
"""

import click

from sitecheck import __version__
from sitecheck.cli.commands import (
    fetch_companies, import_csv, add_company, list_companies, check_companies, check_one,
    reset_companies, clear_companies, show_stats, config_commands
)


@click.group()
@click.version_option(version=__version__, message='Company Website Tracker v%(version)s')
@click.option('--config', '-c', 'config_path', default='config/config.yaml', show_default=True,
              help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Company Website Tracker - Find directory companies that have no website."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['verbose'] = verbose


# Add commands
main.add_command(fetch_companies)
main.add_command(import_csv)
main.add_command(add_company)
main.add_command(list_companies)
main.add_command(check_companies)
main.add_command(check_one)
main.add_command(reset_companies)
main.add_command(clear_companies)
main.add_command(show_stats)
main.add_command(config_commands)


if __name__ == '__main__':
    main()
