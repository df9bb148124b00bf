"""
LangSearch web search client for company website lookup.
"""

import logging
import requests
from typing import List, Optional, Dict, Any

from sitecheck.core.exceptions import ConfigurationError, SearchUnavailable, SearchMalformed


DEFAULT_API_URL = "https://api.langsearch.com/v1/web-search"
MIN_API_KEY_LENGTH = 10


class LangSearchClient:
    """
    Client for the LangSearch web search API.

    Each call to ``search`` makes exactly one HTTP request; failures are
    raised rather than retried so that every request is accounted for by the
    caller's call budget.
    """

    def __init__(self, api_key: str, api_url: str = DEFAULT_API_URL,
                 freshness: str = "noLimit", summary: bool = True,
                 count: int = 10, timeout: float = 30):
        """
        Initialize the LangSearch API client.

        Args:
            api_key: LangSearch API key
            api_url: Web search endpoint
            freshness: Result freshness filter sent with each query
            summary: Whether to request result summaries
            count: Number of results to request
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If API key is not provided or invalid
        """
        if not api_key or len(api_key.strip()) < MIN_API_KEY_LENGTH:
            raise ConfigurationError(
                "LangSearch API key is required and must be at least 10 characters. "
                "Please set the LANGSEARCH_API_KEY environment variable. "
                "Get your free API key from: https://langsearch.com/api-keys"
            )

        self.api_key = api_key.strip()
        self.api_url = api_url or DEFAULT_API_URL
        self.freshness = freshness
        self.summary = summary
        self.count = count
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, search_config: Dict[str, Any]) -> 'LangSearchClient':
        """Build a client from the ``search`` configuration section."""
        return cls(
            api_key=str(search_config.get('api_key') or ''),
            api_url=search_config.get('api_url', DEFAULT_API_URL),
            freshness=search_config.get('freshness', 'noLimit'),
            summary=bool(search_config.get('summary', True)),
            count=int(search_config.get('count', 10)),
            timeout=float(search_config.get('timeout', 30))
        )

    def search(self, query: str) -> List[str]:
        """
        Search the web and return candidate URLs.

        Args:
            query: Search query

        Returns:
            URLs in provider-ranked order

        Raises:
            SearchUnavailable: For network errors and non-success status codes
            SearchMalformed: When the response cannot be parsed into a URL list
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "query": query,
            "freshness": self.freshness,
            "summary": self.summary,
            "count": self.count
        }

        try:
            response = requests.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise SearchUnavailable(f"Network error during search: {e}")

        if not 200 <= response.status_code < 300:
            raise SearchUnavailable(
                f"LangSearch API error (HTTP {response.status_code}): {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SearchMalformed(f"Invalid JSON response: {e}")

        urls = self._extract_urls(data)
        self.logger.debug(f"Search for {query!r} returned {len(urls)} URLs")
        return urls

    @staticmethod
    def _extract_urls(data: Any) -> List[str]:
        """
        Pull result URLs out of a LangSearch response body.

        The API wraps results as ``{"data": {"webPages": {"value": [...]}}}``;
        an unwrapped ``{"webPages": ...}`` body is accepted as well.
        """
        if not isinstance(data, dict):
            raise SearchMalformed("Response body is not a JSON object")

        body: Optional[Dict[str, Any]] = data.get("data") if isinstance(data.get("data"), dict) else data
        web_pages = body.get("webPages") if body else None

        if web_pages is None:
            # No web results at all is a valid, empty answer
            return []
        if not isinstance(web_pages, dict) or not isinstance(web_pages.get("value", []), list):
            raise SearchMalformed("Response 'webPages' is not a result list")

        urls = []
        for item in web_pages.get("value", []):
            # Skip malformed results
            if not isinstance(item, dict):
                continue
            url = item.get("url")
            if isinstance(url, str) and url.strip():
                urls.append(url.strip())
        return urls
