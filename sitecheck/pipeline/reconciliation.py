"""
Budgeted, paced website checks across a batch of companies.
"""

import logging
import time
from typing import Callable, List, Optional, Sequence

from sitecheck.core.models import CallBudget, CompanyRecord, MatchOutcome, RunSummary
from sitecheck.pipeline.orchestrator import SearchOrchestrator
from sitecheck.search.rate_limiter import RateLimiter


logger = logging.getLogger(__name__)


class ReconciliationPipeline:
    """
    Run website checks for a batch of companies, one at a time.

    The batch is processed strictly in input order. Every attempt consumes
    one unit of the call budget whatever its outcome, and consecutive
    attempts are separated by a fixed pacing delay. The run stops early,
    without error, when the budget is spent or the caller asks to stop.
    Per-company failures are recorded in the outcomes and never abort the run.
    """

    def __init__(self, orchestrator: SearchOrchestrator,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the pipeline.

        Args:
            orchestrator: Single-company website checker
            sleep: Sleep function used for pacing, injectable for tests
        """
        self.orchestrator = orchestrator
        self._sleep = sleep

    def run(self, companies: Sequence[CompanyRecord], budget: CallBudget, min_delay_ms: int,
            should_stop: Optional[Callable[[], bool]] = None,
            on_outcome: Optional[Callable[[MatchOutcome], None]] = None) -> RunSummary:
        """
        Check every company in the batch until the budget runs out.

        Args:
            companies: Companies in processing order
            budget: Call budget shared by the whole run
            min_delay_ms: Pause between consecutive searches in milliseconds
            should_stop: Cancellation hook checked before each company
            on_outcome: Called with each outcome as soon as it is produced

        Returns:
            RunSummary for the companies that were attempted
        """
        companies = list(companies)
        limiter = RateLimiter(min_delay_ms, sleep=self._sleep)
        outcomes: List[MatchOutcome] = []
        budget_exhausted = False
        cancelled = False

        logger.info(f"Checking {len(companies)} companies "
                    f"({budget.remaining} of {budget.limit} search calls available)")

        def stop_requested() -> bool:
            if should_stop is None or not should_stop():
                return False
            logger.warning(f"Run cancelled after {len(outcomes)} companies")
            return True

        for index, company in enumerate(companies, 1):
            if stop_requested():
                cancelled = True
                break

            if budget.exhausted:
                logger.warning(f"Reached search call limit ({budget.limit}). "
                               f"Skipping {len(companies) - len(outcomes)} remaining companies.")
                budget_exhausted = True
                break

            if outcomes:
                limiter.wait()
                # Ctrl-C usually lands during the pause
                if stop_requested():
                    cancelled = True
                    break

            budget.consume()
            outcome = self.orchestrator.check_company(company)
            outcomes.append(outcome)
            self._log_outcome(index, len(companies), outcome)

            if on_outcome is not None:
                on_outcome(outcome)

        summary = RunSummary(
            outcomes=tuple(outcomes),
            total_batch=len(companies),
            calls_used=budget.used,
            budget_exhausted=budget_exhausted,
            cancelled=cancelled
        )

        logger.info(f"Run finished: {summary.processed} checked, {summary.with_website} with website, "
                    f"{summary.without_website} without, {summary.errors} errors, "
                    f"{summary.skipped} skipped, {summary.calls_used} search calls used")
        return summary

    @staticmethod
    def _log_outcome(index: int, total: int, outcome: MatchOutcome) -> None:
        name = outcome.company.name
        if outcome.is_error:
            logger.info(f"[{index}/{total}] {name}: ERROR {outcome.error}")
        elif outcome.has_website:
            logger.info(f"[{index}/{total}] {name}: has website {outcome.matched_url}")
        else:
            logger.info(f"[{index}/{total}] {name}: no website found "
                        f"({len(outcome.candidate_urls)} candidate URLs)")
