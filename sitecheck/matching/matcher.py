"""
Lexical matching of search result URLs against company names.
"""

import logging
from typing import Optional, Sequence

from sitecheck.matching.normalizer import NameNormalizer


logger = logging.getLogger(__name__)

MIN_SIGNIFICANT_LENGTH = 3
MIN_MATCH_RATIO = 0.5


class DomainMatcher:
    """
    Decide whether a URL belongs to a company by comparing its domain with
    the company name.

    Matching is purely lexical. A URL matches when its normalized domain
    contains the whole normalized name, or when enough of the name's
    significant words (at least ``min_token_length`` characters) appear in
    the domain: the only word for single-word names, at least
    ``min_match_ratio`` of them otherwise.
    """

    def __init__(self, normalizer: Optional[NameNormalizer] = None,
                 min_token_length: int = MIN_SIGNIFICANT_LENGTH,
                 min_match_ratio: float = MIN_MATCH_RATIO):
        """
        Initialize the matcher.

        Args:
            normalizer: Name/domain normalizer (defaults to the standard word lists)
            min_token_length: Shortest name token that counts as significant
            min_match_ratio: Share of significant tokens a multi-word name must
                have present in the domain
        """
        if min_token_length < 1:
            raise ValueError("Minimum token length must be at least 1")
        if not (0 < min_match_ratio <= 1):
            raise ValueError("Match ratio must be in (0, 1]")

        self.normalizer = normalizer or NameNormalizer()
        self.min_token_length = min_token_length
        self.min_match_ratio = min_match_ratio

    def find_match(self, company_name: str, candidate_urls: Sequence[str]) -> Optional[str]:
        """
        Return the first candidate URL that belongs to the company.

        Candidates are checked in the order given; there is no re-ranking.

        Args:
            company_name: Raw company name
            candidate_urls: URLs in provider-ranked order

        Returns:
            The first matching URL, or None when nothing matches
        """
        name = self.normalizer.normalize_name_tokens(company_name)
        significant = name.significant_tokens(self.min_token_length)

        if not significant:
            logger.debug(f"No significant words in company name {company_name!r}, cannot match")
            return None

        for url in candidate_urls:
            domain = self.normalizer.normalize_domain(url)
            if self._domain_matches(domain, name.text, significant):
                logger.debug(f"Matched {company_name!r} to {url}")
                return url

        return None

    def _domain_matches(self, domain: str, name_text: str, significant: Sequence[str]) -> bool:
        if not domain:
            return False

        # Direct containment of the whole name
        if name_text in domain:
            return True

        matched_count = sum(1 for token in significant if token in domain)

        # Single-word names demand the word itself
        if len(significant) == 1:
            return matched_count == 1

        return matched_count / len(significant) >= self.min_match_ratio


_default_matcher = DomainMatcher()


def find_match(company_name: str, candidate_urls: Sequence[str]) -> Optional[str]:
    """Return the first URL matching the company name using default thresholds."""
    return _default_matcher.find_match(company_name, candidate_urls)
