"""
Search provider interface consumed by the website check pipeline.
"""

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class SearchProvider(Protocol):
    """
    Anything that turns a query into candidate URLs.

    Implementations return URLs in provider-ranked order and raise
    ``SearchUnavailable`` or ``SearchMalformed`` on failure.
    """

    def search(self, query: str) -> List[str]:
        ...
