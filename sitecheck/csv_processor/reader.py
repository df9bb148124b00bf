"""CSV reader module for the Company Website Tracker."""

import logging
import pandas as pd
from pathlib import Path
from typing import Iterator, Optional, Callable, Dict, Any

from sitecheck.core.exceptions import CSVProcessingError
from sitecheck.core.models import CompanyRecord


logger = logging.getLogger(__name__)


class CSVValidationError(CSVProcessingError):
    """Raised when CSV validation fails."""
    pass


class CSVReader:
    """CSV reader for company lists with validation and error handling."""

    def __init__(self, file_path: str):
        """Initialize CSV reader.

        Args:
            file_path: Path to the CSV file

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

        self._required_columns = {'name'}
        self._column_mapping = {
            'name': ['name', 'CompanyName', 'company_name', 'companyName'],
            'employees': ['employees', 'Employees', 'antalAnstallda', 'employee_count']
        }

    def _normalize_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Normalize column names by mapping known variations.

        Args:
            df: DataFrame with original column names

        Returns:
            DataFrame with normalized column names
        """
        column_mapping = {}

        for normalized_name, variations in self._column_mapping.items():
            lowered = {variation.lower() for variation in variations}
            for col in df.columns:
                if str(col).lower().strip() in lowered and col not in column_mapping:
                    column_mapping[col] = normalized_name
                    break

        return df.rename(columns=column_mapping)

    def _validate_csv(self, df: pd.DataFrame) -> None:
        """Validate CSV structure and required columns.

        Raises:
            CSVValidationError: If validation fails
        """
        missing_columns = [self._column_mapping[required][0]
                           for required in self._required_columns if required not in df.columns]
        if missing_columns:
            raise CSVValidationError(f"Missing required columns: {missing_columns}")

    def _validate_row(self, row: pd.Series, row_index: int) -> Optional[Dict[str, Any]]:
        """Validate a single row and return data or None if invalid.

        Args:
            row: DataFrame row
            row_index: Row index for logging

        Returns:
            Dictionary with row data or None if invalid
        """
        name = str(row.get('name')).strip() if pd.notna(row.get('name')) else ''
        if not name:
            logger.warning(f"Row {row_index + 2}: Missing company name, skipping")
            return None

        employees = row.get('employees') if pd.notna(row.get('employees')) else None
        if employees is not None:
            try:
                employees = float(str(employees).replace(',', '.'))
            except ValueError:
                logger.warning(f"Row {row_index + 2}: Invalid employee count {employees!r}, ignoring")
                employees = None
            else:
                if employees < 0:
                    logger.warning(f"Row {row_index + 2}: Negative employee count, ignoring")
                    employees = None

        return {
            'name': name,
            'employees': employees
        }

    def read_companies(self, progress_callback: Optional[Callable[[int, int], None]] = None) -> Iterator[CompanyRecord]:
        """Read companies from CSV file with validation and error handling.

        Args:
            progress_callback: Optional callback function(current, total) for progress updates

        Yields:
            CompanyRecord objects

        Raises:
            CSVValidationError: If CSV structure is invalid
        """
        logger.info(f"Reading companies from CSV: {self.file_path}")

        try:
            df = pd.read_csv(self.file_path, dtype=str)  # Read all as strings
        except pd.errors.EmptyDataError:
            logger.warning("CSV file is empty or contains no data")
            return
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise CSVValidationError(f"Error reading CSV file: {e}")

        if df.empty:
            logger.warning("CSV file is empty")
            return

        df = self._normalize_columns(df)
        self._validate_csv(df)

        total_rows = len(df)
        logger.info(f"Found {total_rows} companies in CSV")

        valid_count = 0
        for processed_count, (index, row) in enumerate(df.iterrows(), 1):
            if progress_callback:
                progress_callback(processed_count, total_rows)

            row_data = self._validate_row(row, index)
            if row_data is None:
                continue

            valid_count += 1
            yield CompanyRecord.from_row(row_data)

        logger.info(f"Successfully read {valid_count} out of {total_rows} companies")
