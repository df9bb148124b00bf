"""Tests for CSV processing."""

import pytest
import tempfile
import os
import pandas as pd
from pathlib import Path
from unittest.mock import Mock

from sitecheck.csv_processor import CSVReader, CSVWriter, CSVValidationError
from sitecheck.core.models import CompanyRecord, MatchOutcome


class TestCSVReader:
    """Test CSV reader functionality."""

    def _write_csv(self, content):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False, encoding='utf-8') as f:
            f.write(content)
            self.paths.append(f.name)
            return f.name

    def setup_method(self):
        self.paths = []

    def teardown_method(self):
        for path in self.paths:
            os.unlink(path)

    def test_read_valid_csv(self):
        """Test reading valid CSV file."""
        path = self._write_csv(
            "name,employees,id\n"
            "K Frisör AB,1,5566778899\n"
            "Salong Nova HB,,\n"
        )

        companies = list(CSVReader(path).read_companies())

        assert companies == [
            CompanyRecord(name="K Frisör AB", employees=1.0),
            CompanyRecord(name="Salong Nova HB"),
        ]
        # Store ids are assigned by the company store, never taken from the file
        assert all(c.external_id is None for c in companies)

    def test_column_name_variations(self):
        """Test that directory-style column names are recognised."""
        path = self._write_csv(
            "CompanyName,antalAnstallda\n"
            "Alfa Bygg,\"2,5\"\n"
        )

        companies = list(CSVReader(path).read_companies())

        assert companies == [CompanyRecord(name="Alfa Bygg", employees=2.5)]

    def test_invalid_rows_are_skipped(self):
        """Test handling of rows without a name or with bad counts."""
        path = self._write_csv(
            "name,employees\n"
            ",3\n"
            "Beta Måleri,many\n"
            "Gamma Städ,-4\n"
        )

        companies = list(CSVReader(path).read_companies())

        assert companies == [
            CompanyRecord(name="Beta Måleri"),
            CompanyRecord(name="Gamma Städ"),
        ]

    def test_missing_required_columns(self):
        """Test validation of missing required columns."""
        path = self._write_csv("employees,city\n3,Umeå\n")

        with pytest.raises(CSVValidationError, match="Missing required columns"):
            list(CSVReader(path).read_companies())

    def test_empty_file(self):
        """Test handling of empty files."""
        path = self._write_csv("")
        assert list(CSVReader(path).read_companies()) == []

    def test_header_only(self):
        path = self._write_csv("name,employees\n")
        assert list(CSVReader(path).read_companies()) == []

    def test_file_not_found(self):
        """Test handling of non-existent files."""
        with pytest.raises(FileNotFoundError):
            CSVReader("nonexistent.csv")

    def test_progress_callback(self):
        """Test progress reporting."""
        path = self._write_csv("name\nAlfa\nBeta\n")
        callback = Mock()

        list(CSVReader(path).read_companies(progress_callback=callback))

        assert [c.args for c in callback.call_args_list] == [(1, 2), (2, 2)]


class TestCSVWriter:
    """Test CSV writer functionality."""

    def test_write_outcomes(self, tmp_path):
        """Test writing outcomes in run order."""
        output = tmp_path / "out" / "results.csv"
        writer = CSVWriter(str(output))

        writer.write_outcomes([
            MatchOutcome(
                CompanyRecord(name="K Frisör AB", employees=1),
                matched_url="https://kfrisor.se",
                candidate_urls=["https://kfrisor.se", "https://hitta.se/k"],
            ),
            MatchOutcome(CompanyRecord(name="Salong Nova HB"), candidate_urls=[]),
            MatchOutcome(CompanyRecord(name="Gamma Städ"), error="HTTP 500"),
        ])

        df = pd.read_csv(output, dtype=str, keep_default_na=False)
        assert list(df.columns) == writer.columns
        assert list(df['name']) == ["K Frisör AB", "Salong Nova HB", "Gamma Städ"]
        assert list(df['has_website']) == ["True", "False", "False"]
        assert df.loc[0, 'matched_url'] == "https://kfrisor.se"
        assert df.loc[0, 'candidate_urls'] == "https://kfrisor.se https://hitta.se/k"
        assert df.loc[2, 'error'] == "HTTP 500"
        assert df.loc[1, 'employees'] == ""

    def test_write_replaces_previous_content(self, tmp_path):
        output = tmp_path / "results.csv"
        writer = CSVWriter(str(output))

        writer.write_outcomes([MatchOutcome(CompanyRecord(name="Alfa"))])
        writer.write_outcomes([MatchOutcome(CompanyRecord(name="Beta"))])

        assert list(pd.read_csv(output)['name']) == ["Beta"]

    def test_write_nothing(self, tmp_path):
        output = tmp_path / "results.csv"
        CSVWriter(str(output)).write_outcomes([])
        assert not Path(output).exists()
