"""
CLI commands for the Company Website Tracker.
"""

import signal
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional

import click
import yaml
from tqdm import tqdm

from sitecheck.core.config import Config
from sitecheck.core.exceptions import SitecheckError
from sitecheck.core.models import CallBudget, MatchOutcome, RunSummary
from sitecheck.csv_processor.reader import CSVReader
from sitecheck.csv_processor.writer import CSVWriter
from sitecheck.directory.client import BolagsfaktaClient
from sitecheck.pipeline.orchestrator import SearchOrchestrator, DEFAULT_QUERY_SUFFIX
from sitecheck.pipeline.reconciliation import ReconciliationPipeline
from sitecheck.search.client import LangSearchClient
from sitecheck.storage.database import CompanyStore
from sitecheck.utils.logging_config import setup_logging


DEFAULT_MAX_API_CALLS = 20
DEFAULT_MIN_DELAY_MS = 300

EXAMPLE_CONFIG = {
    'search': {
        'provider': 'langsearch',
        'api_key': '${LANGSEARCH_API_KEY:-}',
        'api_url': 'https://api.langsearch.com/v1/web-search',
        'freshness': 'noLimit',
        'summary': True,
        'count': 10,
        'timeout': 30,
        'query_suffix': DEFAULT_QUERY_SUFFIX
    },
    'directory': {
        'base_url': 'https://www.bolagsfakta.se/api/search',
        'max_pages': 1,
        'page_delay_ms': 1000,
        'timeout': 30
    },
    'pipeline': {
        'max_api_calls': DEFAULT_MAX_API_CALLS,
        'min_delay_ms': DEFAULT_MIN_DELAY_MS
    },
    'storage': {
        'database': 'companies.db'
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': 'logs/sitecheck.log'
    }
}


def _fail(message: str) -> None:
    click.echo(f"❌ Error: {message}", err=True)
    sys.exit(1)


def load_config(ctx: click.Context, require_search: bool = False) -> Config:
    """Load configuration and set up logging for a command.

    Args:
        ctx: Click context carrying the global options
        require_search: Validate the full configuration, including the API key

    Returns:
        Loaded configuration
    """
    try:
        config = Config(ctx.obj['config_path'])
        if require_search:
            config.validate()
    except SitecheckError as e:
        _fail(str(e))

    setup_logging(config.logging_config, level_override='DEBUG' if ctx.obj.get('verbose') else None)
    return config


def open_store(config: Config) -> CompanyStore:
    try:
        return CompanyStore(config.get('storage.database', 'companies.db'))
    except SitecheckError as e:
        _fail(str(e))


@contextmanager
def cancellation_flag() -> Iterator[List[bool]]:
    """Turn Ctrl-C into a stop request honoured between companies."""
    flag = [False]

    def _request_stop(signum, frame):
        if not flag[0]:
            click.echo("\nStopping after the current company (press Ctrl-C again to abort)...", err=True)
            flag[0] = True
        else:
            raise KeyboardInterrupt

    previous = signal.signal(signal.SIGINT, _request_stop)
    try:
        yield flag
    finally:
        signal.signal(signal.SIGINT, previous)


def print_summary(summary: RunSummary) -> None:
    """Print a run summary with the companies in each bucket."""
    click.echo("\n" + "=" * 60)
    click.echo("SUMMARY")
    click.echo("=" * 60)

    click.echo(f"\nTotal checked: {summary.processed}")
    click.echo(f"With website: {summary.with_website}")
    click.echo(f"Without website: {summary.without_website}")
    click.echo(f"Errors: {summary.errors}")
    click.echo(f"API calls used: {summary.calls_used}")

    if summary.skipped:
        reason = "search call limit reached" if summary.budget_exhausted else "run cancelled"
        click.echo(click.style(f"Skipped: {summary.skipped} ({reason})", fg="yellow"))

    if summary.websites_missing:
        click.echo("\n--- Companies WITHOUT a website ---")
        for outcome in summary.websites_missing:
            click.echo(f"- {outcome.company.name}")
            if outcome.company.employees is not None:
                click.echo(f"  Employees: {outcome.company.employees:.0f}")
            for url in outcome.candidate_urls[:3]:
                click.echo(f"    searched: {url}")

    if summary.websites_found:
        click.echo("\n--- Companies WITH a website ---")
        for outcome in summary.websites_found:
            click.echo(f"- {outcome.company.name} -> {outcome.matched_url}")

    if summary.failed:
        click.echo("\n--- Companies that could not be checked ---")
        for outcome in summary.failed:
            click.echo(f"- {outcome.company.name}: {outcome.error}")


def build_pipeline(config: Config) -> ReconciliationPipeline:
    search_config = config.search_config
    try:
        provider = LangSearchClient.from_config(search_config)
    except SitecheckError as e:
        _fail(str(e))
    orchestrator = SearchOrchestrator(
        provider,
        query_suffix=search_config.get('query_suffix', DEFAULT_QUERY_SUFFIX)
    )
    return ReconciliationPipeline(orchestrator)


@click.command('fetch')
@click.argument('business_type')
@click.option('--pages', default=None, type=click.IntRange(1, 5),
              help='Number of directory pages to fetch (1-5)')
@click.option('--max-employees', default=None, type=float,
              help='Only store companies with at most this many employees')
@click.pass_context
def fetch_companies(ctx: click.Context, business_type: str, pages: Optional[int],
                    max_employees: Optional[float]):
    """Fetch companies of a business type from the directory into the store."""
    config = load_config(ctx)
    directory_config = config.directory_config
    client = BolagsfaktaClient.from_config(directory_config)

    try:
        companies = client.search(
            business_type,
            max_pages=pages or int(directory_config.get('max_pages', 1)),
            delay_ms=int(directory_config.get('page_delay_ms', 1000)),
            max_employees=max_employees
        )
    except SitecheckError as e:
        _fail(str(e))

    with open_store(config) as store:
        added = store.add_companies(companies)

    click.echo(f"Fetched {len(companies)} companies, {added} new")


@click.command('import-csv')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_csv(ctx: click.Context, path: str):
    """Import companies from a CSV file with a name column."""
    config = load_config(ctx)

    try:
        companies = list(CSVReader(path).read_companies())
    except SitecheckError as e:
        _fail(str(e))

    with open_store(config) as store:
        added = store.add_companies(companies)

    click.echo(f"Read {len(companies)} companies, {added} new")


@click.command('add')
@click.argument('name')
@click.option('--employees', default=None, type=click.FloatRange(min=0),
              help='Number of employees')
@click.pass_context
def add_company(ctx: click.Context, name: str, employees: Optional[float]):
    """Add a single company to the store."""
    config = load_config(ctx)
    name = name.strip()
    if not name:
        _fail("Company name cannot be empty")

    with open_store(config) as store:
        added = store.add_company(name, employees)

    if added:
        click.echo(f"Added {name}")
    else:
        click.echo(f"{name} is already in the store")


@click.command('list')
@click.option('--unchecked', is_flag=True, help='Only list companies not yet checked')
@click.pass_context
def list_companies(ctx: click.Context, unchecked: bool):
    """List stored companies."""
    config = load_config(ctx)

    with open_store(config) as store:
        companies = store.get_unchecked_companies() if unchecked else store.get_all_companies()

    if not companies:
        click.echo("No companies in storage yet.")
        return

    click.echo(f"{'ID':<5} {'Name':<40} {'Checked':<8} {'Website?':<9} URL")
    click.echo("-" * 100)
    for company in companies:
        click.echo(
            f"{company.id:<5} {company.name[:40]:<40} "
            f"{'Yes' if company.is_checked else 'No':<8} "
            f"{'Yes' if company.has_website else 'No':<9} "
            f"{company.website or 'N/A'}"
        )

    click.echo(f"\nTotal companies: {len(companies)}")


@click.command('check')
@click.option('--limit', default=None, type=click.IntRange(min=1),
              help='Maximum number of unchecked companies to load')
@click.option('--max-calls', default=None, type=click.IntRange(min=1),
              help='Search call budget for this run')
@click.option('--delay-ms', default=None, type=click.IntRange(min=0),
              help='Pause between searches in milliseconds')
@click.option('--export', 'export_path', default=None, type=click.Path(dir_okay=False),
              help='Also write the outcomes to this CSV file')
@click.pass_context
def check_companies(ctx: click.Context, limit: Optional[int], max_calls: Optional[int],
                    delay_ms: Optional[int], export_path: Optional[str]):
    """Check unchecked companies for a website."""
    config = load_config(ctx, require_search=True)
    pipeline_config = config.pipeline_config
    budget = CallBudget(limit=max_calls or int(pipeline_config.get('max_api_calls', DEFAULT_MAX_API_CALLS)))
    min_delay_ms = delay_ms if delay_ms is not None else int(
        pipeline_config.get('min_delay_ms', DEFAULT_MIN_DELAY_MS))

    pipeline = build_pipeline(config)

    with open_store(config) as store:
        companies = [c.to_record() for c in store.get_unchecked_companies(limit=limit)]
        if not companies:
            click.echo("No companies to check.")
            return

        click.echo(f"Checking {min(len(companies), budget.limit)} of {len(companies)} unchecked companies...")

        progress_bar = tqdm(total=min(len(companies), budget.limit), desc="Checking", unit="company",
                            disable=not ctx.obj.get('verbose'))

        def _record(outcome: MatchOutcome) -> None:
            store.record_outcome(outcome)
            progress_bar.set_description(f"Checked {outcome.company.name[:30]}")
            progress_bar.update(1)

        with cancellation_flag() as stop:
            summary = pipeline.run(companies, budget, min_delay_ms,
                                   should_stop=lambda: stop[0], on_outcome=_record)
        progress_bar.close()

    print_summary(summary)

    if export_path:
        CSVWriter(export_path).write_outcomes(summary.outcomes)
        click.echo(f"\nOutcomes written to {export_path}")


@click.command('check-one')
@click.argument('name')
@click.pass_context
def check_one(ctx: click.Context, name: str):
    """Check a single company for a website, adding it to the store if needed."""
    config = load_config(ctx, require_search=True)
    pipeline = build_pipeline(config)

    with open_store(config) as store:
        stored = store.get_company_by_name(name)
        if stored is None:
            store.add_company(name)
            stored = store.get_company_by_name(name)

        click.echo("Searching for website...")
        summary = pipeline.run([stored.to_record()], CallBudget(limit=1), 0)
        store.record_outcomes(summary.outcomes)
        outcome = summary.outcomes[0]

    if outcome.is_error:
        _fail(f"Search failed: {outcome.error}")
    elif outcome.has_website:
        click.echo(click.style(f"✓ Website found: {outcome.matched_url}", fg="green"))
    else:
        click.echo("✗ No website found for this company.")
        for url in outcome.candidate_urls[:3]:
            click.echo(f"    searched: {url}")


@click.command('reset')
@click.pass_context
def reset_companies(ctx: click.Context):
    """Mark all companies as unchecked and clear website data."""
    config = load_config(ctx)
    with open_store(config) as store:
        store.reset_all_companies()
    click.echo("All companies reset to unchecked")


@click.command('clear')
@click.confirmation_option(prompt='Delete all companies from the store?')
@click.pass_context
def clear_companies(ctx: click.Context):
    """Delete all companies from the store."""
    config = load_config(ctx)
    with open_store(config) as store:
        store.delete_all_companies()
    click.echo("All companies deleted")


@click.command('stats')
@click.pass_context
def show_stats(ctx: click.Context):
    """Show store statistics."""
    config = load_config(ctx)
    with open_store(config) as store:
        stats = store.get_stats()

    click.echo(f"Total companies: {stats['total']}")
    click.echo(f"Checked: {stats['checked']}")
    click.echo(f"Unchecked: {stats['unchecked']}")
    click.echo(f"With website: {stats['with_website']}")
    click.echo(f"Without website: {stats['without_website']}")


@click.group('config')
def config_commands():
    """Configuration management commands."""
    pass


@config_commands.command('show')
@click.pass_context
def config_show(ctx: click.Context):
    """Show current configuration."""
    config = load_config(ctx)
    config_dict = config.get_all()
    api_key = config_dict.get('search', {}).get('api_key')
    if api_key:
        config_dict['search'] = dict(config_dict['search'], api_key='*' * 8)

    click.echo("Current Configuration:")
    click.echo(yaml.dump(config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True))


@config_commands.command('validate')
@click.pass_context
def config_validate(ctx: click.Context):
    """Validate configuration file."""
    try:
        Config(ctx.obj['config_path']).validate()
    except SitecheckError as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)
    click.echo("✅ Configuration is valid")


@config_commands.command('example')
def config_example():
    """Show example configuration."""
    click.echo("Example Configuration:")
    click.echo(yaml.dump(EXAMPLE_CONFIG, default_flow_style=False, sort_keys=False))
    click.echo("\nTo use this configuration:")
    click.echo("1. Save to config/config.yaml")
    click.echo("2. Set LANGSEARCH_API_KEY environment variable (or put it in .env)")
    click.echo("3. Adjust parameters as needed")
