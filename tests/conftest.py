"""Shared test doubles."""

from typing import Dict, List, Optional, Sequence

import pytest

from sitecheck.core.exceptions import SearchAPIError


class StaticSearchProvider:
    """
    In-memory search provider.

    Returns canned URLs per query; a query mapped to an exception instance
    raises it instead. Unknown queries return ``default``.
    """

    def __init__(self, results: Optional[Dict[str, object]] = None,
                 default: Sequence[str] = ()):
        self.results = dict(results or {})
        self.default = list(default)
        self.queries: List[str] = []

    def search(self, query: str) -> List[str]:
        self.queries.append(query)
        result = self.results.get(query, self.default)
        if isinstance(result, SearchAPIError):
            raise result
        return list(result)


@pytest.fixture
def static_provider():
    return StaticSearchProvider()
