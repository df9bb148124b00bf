"""CSV writer module for the Company Website Tracker."""

import logging
import pandas as pd
from pathlib import Path
from typing import Dict, Any, Sequence
from datetime import datetime

from sitecheck.core.models import MatchOutcome


logger = logging.getLogger(__name__)


class CSVWriter:
    """CSV writer for website check outcomes."""

    def __init__(self, output_path: str):
        """Initialize CSV writer.

        Args:
            output_path: Path to the output CSV file
        """
        self.output_path = Path(output_path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

        self.columns = [
            'name',
            'employees',
            'has_website',
            'matched_url',
            'candidate_urls',
            'error',
            'checked_at'
        ]

    def _outcome_to_dict(self, outcome: MatchOutcome, checked_at: str) -> Dict[str, Any]:
        """Convert MatchOutcome to dictionary for CSV writing."""
        employees = outcome.company.employees
        return {
            'name': outcome.company.name,
            'employees': employees if employees is not None else '',
            'has_website': outcome.has_website,
            'matched_url': outcome.matched_url or '',
            'candidate_urls': ' '.join(outcome.candidate_urls),
            'error': outcome.error or '',
            'checked_at': checked_at
        }

    def write_outcomes(self, outcomes: Sequence[MatchOutcome]) -> None:
        """Write outcomes to the CSV file, replacing any previous content.

        Args:
            outcomes: Outcomes in run order
        """
        if not outcomes:
            logger.warning("No outcomes to write")
            return

        logger.info(f"Writing {len(outcomes)} outcomes to {self.output_path}")
        checked_at = datetime.now().isoformat(timespec='seconds')

        rows = [self._outcome_to_dict(outcome, checked_at) for outcome in outcomes]
        df = pd.DataFrame(rows, columns=self.columns)
        df.to_csv(self.output_path, mode='w', header=True, index=False)

        logger.info(f"Successfully wrote {len(rows)} rows to {self.output_path}")
