"""
Website check for a single company.
"""

import logging
from typing import Optional

from sitecheck.core.exceptions import SearchAPIError
from sitecheck.core.models import CompanyRecord, MatchOutcome
from sitecheck.matching.matcher import DomainMatcher
from sitecheck.search.base import SearchProvider


logger = logging.getLogger(__name__)

DEFAULT_QUERY_SUFFIX = " company website"


class SearchOrchestrator:
    """
    Search for one company and decide whether any result is its website.

    Provider failures are captured in the returned outcome; they never
    propagate to the caller.
    """

    def __init__(self, provider: SearchProvider, matcher: Optional[DomainMatcher] = None,
                 query_suffix: str = DEFAULT_QUERY_SUFFIX):
        """
        Initialize the orchestrator.

        Args:
            provider: Web search provider
            matcher: Domain matcher (defaults to the standard thresholds)
            query_suffix: Text appended to the company name to form the query
        """
        self.provider = provider
        self.matcher = matcher or DomainMatcher()
        self.query_suffix = query_suffix

    def build_query(self, company: CompanyRecord) -> str:
        return f"{company.name.strip()}{self.query_suffix}"

    def check_company(self, company: CompanyRecord) -> MatchOutcome:
        """
        Check whether a company has a website.

        Args:
            company: Company to check

        Returns:
            MatchOutcome with the matched URL, the candidate URLs and any error
        """
        query = self.build_query(company)

        try:
            candidate_urls = list(self.provider.search(query))
        except SearchAPIError as e:
            logger.warning(f"Search failed for {company.name}: {e}")
            return MatchOutcome(company=company, error=str(e) or e.__class__.__name__)

        matched_url = self.matcher.find_match(company.name, candidate_urls)
        return MatchOutcome(
            company=company,
            matched_url=matched_url,
            candidate_urls=tuple(candidate_urls)
        )
