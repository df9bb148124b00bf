"""Tests for CLI commands."""

import logging
import os
import pytest
import yaml
from click.testing import CliRunner
from unittest.mock import Mock, patch

from sitecheck.cli.main import main
from sitecheck.storage.database import CompanyStore

API_KEY = "test_key_1234567"


def _search_response(urls):
    response = Mock()
    response.status_code = 200
    response.json.return_value = {"data": {"webPages": {"value": [{"url": url} for url in urls]}}}
    return response


class TestCLICommands:
    """Test CLI command functionality."""

    @pytest.fixture(autouse=True)
    def workspace(self, tmp_path, monkeypatch):
        """Temporary config and database for each test."""
        monkeypatch.setenv('LANGSEARCH_API_KEY', API_KEY)
        self.db_path = str(tmp_path / "companies.db")
        self.config_path = str(tmp_path / "config.yaml")
        self.config = {
            'search': {'api_key': '${LANGSEARCH_API_KEY}', 'query_suffix': ' company website'},
            'directory': {'max_pages': 1, 'page_delay_ms': 0},
            'pipeline': {'max_api_calls': 20, 'min_delay_ms': 0},
            'storage': {'database': self.db_path},
            'logging': {'level': 'WARNING', 'file': ''}
        }
        self._write_config()
        self.runner = CliRunner()
        self.tmp_path = tmp_path

        yield

        logger = logging.getLogger('sitecheck')
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

    def _write_config(self):
        with open(self.config_path, 'w') as f:
            yaml.dump(self.config, f)

    def _invoke(self, *args, **kwargs):
        return self.runner.invoke(main, ['--config', self.config_path, *args], **kwargs)

    def _seed(self, *names):
        with CompanyStore(self.db_path) as store:
            for name in names:
                store.add_company(name)

    def test_main_help(self):
        """Test main command help."""
        result = self.runner.invoke(main, ['--help'])
        assert result.exit_code == 0
        assert "Company Website Tracker" in result.output
        for command in ['fetch', 'import-csv', 'add', 'list', 'check', 'check-one', 'stats', 'config']:
            assert command in result.output

    def test_version(self):
        result = self.runner.invoke(main, ['--version'])
        assert result.exit_code == 0
        assert "Company Website Tracker v0.1.0" in result.output

    def test_missing_config_file(self):
        result = self.runner.invoke(main, ['--config', 'missing.yaml', 'list'])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_list_empty(self):
        result = self._invoke('list')
        assert result.exit_code == 0
        assert "No companies in storage yet." in result.output

    def test_add_company_with_employees(self):
        """Test adding a single company by hand."""
        result = self._invoke('add', 'K Frisör AB', '--employees', '3')
        assert result.exit_code == 0
        assert "Added K Frisör AB" in result.output

        result = self._invoke('add', 'K Frisör AB')
        assert result.exit_code == 0
        assert "K Frisör AB is already in the store" in result.output

        with CompanyStore(self.db_path) as store:
            company = store.get_company_by_name("K Frisör AB")
            assert company.employees == 3
            assert company.is_checked is False

    def test_add_rejects_negative_employees(self):
        result = self._invoke('add', 'K Frisör AB', '--employees', '-1')
        assert result.exit_code == 2

    def test_verbose_enables_debug_output(self):
        """Test that --verbose lowers the logger and its handlers to DEBUG."""
        result = self._invoke('-v', 'stats')
        assert result.exit_code == 0

        logger = logging.getLogger('sitecheck')
        assert logger.level == logging.DEBUG
        assert logger.handlers
        assert all(handler.level == logging.DEBUG for handler in logger.handlers)

    def test_configured_level_without_verbose(self):
        self._invoke('stats')
        logger = logging.getLogger('sitecheck')
        assert logger.handlers
        assert all(handler.level == logging.WARNING for handler in logger.handlers)

    def test_import_csv_and_list(self):
        """Test importing a CSV file into the store."""
        csv_path = self.tmp_path / "companies.csv"
        csv_path.write_text("name,employees\nK Frisör AB,1\nSalong Nova HB,\nK Frisör AB,1\n", encoding='utf-8')

        result = self._invoke('import-csv', str(csv_path))
        assert result.exit_code == 0
        assert "Read 3 companies, 2 new" in result.output

        result = self._invoke('list')
        assert result.exit_code == 0
        assert "K Frisör AB" in result.output
        assert "Total companies: 2" in result.output

    @patch('sitecheck.directory.client.requests.get')
    def test_fetch(self, mock_get):
        """Test fetching companies from the directory."""
        response = Mock()
        response.status_code = 200
        response.text = '{"searchResultItems": []}'
        response.json.return_value = {"searchResultItems": [
            {"companyName": "K Frisör AB", "antalAnstallda": 1},
            {"companyName": "Stora Salongen AB", "antalAnstallda": 25},
        ]}
        mock_get.return_value = response

        result = self._invoke('fetch', 'Frisör', '--max-employees', '5')

        assert result.exit_code == 0
        assert "Fetched 1 companies, 1 new" in result.output
        with CompanyStore(self.db_path) as store:
            assert [c.name for c in store.get_all_companies()] == ["K Frisör AB"]

    @patch('sitecheck.search.client.requests.post')
    def test_check_with_budget(self, mock_post):
        """Test that a run stops at the search call limit."""
        self._seed("Alfa Bygg", "Beta Måleri", "Gamma Städ")
        mock_post.side_effect = [
            _search_response(["https://www.alfabygg.se/"]),
            _search_response(["https://www.hitta.se/beta"]),
        ]

        result = self._invoke('check', '--max-calls', '2', '--delay-ms', '0')

        assert result.exit_code == 0
        assert "Checking 2 of 3 unchecked companies..." in result.output
        assert "Total checked: 2" in result.output
        assert "With website: 1" in result.output
        assert "Without website: 1" in result.output
        assert "API calls used: 2" in result.output
        assert "Skipped: 1 (search call limit reached)" in result.output
        assert mock_post.call_count == 2

        with CompanyStore(self.db_path) as store:
            alfa = store.get_company_by_name("Alfa Bygg")
            assert alfa.has_website is True
            assert alfa.website == "https://www.alfabygg.se/"
            assert [c.name for c in store.get_unchecked_companies()] == ["Gamma Städ"]

    @patch('sitecheck.search.client.requests.post')
    def test_check_search_error_leaves_company_unchecked(self, mock_post):
        self._seed("Alfa Bygg")
        error = Mock()
        error.status_code = 500
        error.text = "Internal Server Error"
        mock_post.return_value = error

        result = self._invoke('check', '--delay-ms', '0')

        assert result.exit_code == 0
        assert "Errors: 1" in result.output
        assert "Alfa Bygg: LangSearch API error (HTTP 500)" in result.output
        with CompanyStore(self.db_path) as store:
            assert store.get_company_by_name("Alfa Bygg").is_checked is False

    @patch('sitecheck.search.client.requests.post')
    def test_check_export(self, mock_post):
        self._seed("Alfa Bygg")
        mock_post.return_value = _search_response(["https://alfabygg.se"])
        export_path = str(self.tmp_path / "out.csv")

        result = self._invoke('check', '--export', export_path)

        assert result.exit_code == 0
        assert f"Outcomes written to {export_path}" in result.output
        assert os.path.exists(export_path)

    def test_check_nothing_to_do(self):
        result = self._invoke('check')
        assert result.exit_code == 0
        assert "No companies to check." in result.output

    def test_check_requires_api_key(self, monkeypatch):
        monkeypatch.setenv('LANGSEARCH_API_KEY', 'short')
        self._seed("Alfa Bygg")

        result = self._invoke('check')

        assert result.exit_code == 1
        assert "LangSearch API key is required" in result.output

    @patch('sitecheck.search.client.requests.post')
    def test_check_one_found(self, mock_post):
        """Test checking a single company that is not yet stored."""
        mock_post.return_value = _search_response(["https://www.kfrisor.se"])

        result = self._invoke('check-one', 'K Frisör AB')

        assert result.exit_code == 0
        assert "✓ Website found: https://www.kfrisor.se" in result.output
        assert mock_post.call_args.kwargs["json"]["query"] == "K Frisör AB company website"
        with CompanyStore(self.db_path) as store:
            assert store.get_company_by_name("K Frisör AB").has_website is True

    @patch('sitecheck.search.client.requests.post')
    def test_check_one_not_found(self, mock_post):
        mock_post.return_value = _search_response(["https://www.hitta.se/something"])

        result = self._invoke('check-one', 'Salong Nova')

        assert result.exit_code == 0
        assert "✗ No website found for this company." in result.output

    def test_reset_and_stats(self):
        self._seed("Alfa Bygg", "Beta Måleri")
        with CompanyStore(self.db_path) as store:
            company = store.get_company_by_name("Alfa Bygg")
            store.update_website(company.id, "https://alfabygg.se", True)

        result = self._invoke('stats')
        assert "Checked: 1" in result.output
        assert "With website: 1" in result.output

        result = self._invoke('reset')
        assert result.exit_code == 0
        assert "All companies reset to unchecked" in result.output

        result = self._invoke('stats')
        assert "Unchecked: 2" in result.output

    def test_clear(self):
        self._seed("Alfa Bygg")
        result = self._invoke('clear', '--yes')
        assert result.exit_code == 0
        assert "All companies deleted" in result.output
        with CompanyStore(self.db_path) as store:
            assert store.get_all_companies() == []

    def test_config_validate(self):
        """Test configuration validation command."""
        result = self._invoke('config', 'validate')
        assert result.exit_code == 0
        assert "✅ Configuration is valid" in result.output

    def test_config_validate_failure(self):
        self.config['pipeline']['max_api_calls'] = 0
        self._write_config()

        result = self._invoke('config', 'validate')

        assert result.exit_code == 1
        assert "max_api_calls must be positive" in result.output

    def test_config_show_masks_api_key(self):
        result = self._invoke('config', 'show')
        assert result.exit_code == 0
        assert API_KEY not in result.output
        assert "********" in result.output

    def test_config_example(self):
        """Test configuration example command."""
        result = self.runner.invoke(main, ['config', 'example'])
        assert result.exit_code == 0
        assert "Example Configuration:" in result.output
        assert "max_api_calls: 20" in result.output
        assert "LANGSEARCH_API_KEY" in result.output
