"""
Bolagsfakta business directory client.

Fetches company listings by business type, page by page.
"""

import logging
import time
import requests
from urllib.parse import quote
from typing import Callable, Iterator, List, Optional, Dict, Any

from sitecheck.core.exceptions import DirectoryUnavailable
from sitecheck.core.models import CompanyRecord


DEFAULT_BASE_URL = "https://www.bolagsfakta.se/api/search"
MAX_PAGES = 5

# Cloudflare requires realistic browser headers to allow the request
BROWSER_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "sv-SE,sv;q=0.9,en-US;q=0.8,en;q=0.7",
    "User-Agent": ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                   "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"),
    "Origin": "https://www.bolagsfakta.se",
}


class BolagsfaktaClient:
    """
    Client for the Bolagsfakta.se company search API.

    Returns company names and employee counts for a business type
    (e.g. "Frisör", "Restaurang").
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 30,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the directory client.

        Args:
            base_url: Search endpoint
            timeout: Request timeout in seconds
            sleep: Sleep function used between pages, injectable for tests
        """
        self.base_url = base_url or DEFAULT_BASE_URL
        self.timeout = timeout
        self._sleep = sleep
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, directory_config: Dict[str, Any]) -> 'BolagsfaktaClient':
        """Build a client from the ``directory`` configuration section."""
        return cls(
            base_url=directory_config.get('base_url', DEFAULT_BASE_URL),
            timeout=float(directory_config.get('timeout', 30))
        )

    def search(self, business_type: str, max_pages: int = 1, delay_ms: int = 1000,
               max_employees: Optional[float] = None) -> List[CompanyRecord]:
        """
        Search for companies by business type.

        Args:
            business_type: Type of business to search for
            max_pages: Maximum pages to fetch (clamped to 1-5)
            delay_ms: Delay between page requests in milliseconds
            max_employees: Drop companies with more employees than this

        Returns:
            Companies in directory order

        Raises:
            DirectoryUnavailable: For network errors and non-success status codes
        """
        return list(self.iter_companies(business_type, max_pages, delay_ms, max_employees))

    def iter_companies(self, business_type: str, max_pages: int = 1, delay_ms: int = 1000,
                       max_employees: Optional[float] = None) -> Iterator[CompanyRecord]:
        """Yield companies page by page; see ``search``."""
        max_pages = min(max(1, int(max_pages)), MAX_PAGES)
        total = 0

        for page in range(1, max_pages + 1):
            self.logger.info(f"Fetching directory page {page} for {business_type!r}...")
            page_companies = self.fetch_page(business_type, page)
            total += len(page_companies)
            self.logger.info(f"  Found {len(page_companies)} companies (total: {total})")

            for company in page_companies:
                if max_employees is not None and (company.employees or 0) > max_employees:
                    continue
                yield company

            if not page_companies:
                break

            # Delay between requests (except after last page)
            if page < max_pages and delay_ms > 0:
                self._sleep(delay_ms / 1000.0)

    def fetch_page(self, business_type: str, page: int) -> List[CompanyRecord]:
        """
        Fetch a single page of results.

        Args:
            business_type: Type of business to search for
            page: 1-based page number

        Returns:
            Companies on the page; empty when the response is not JSON
        """
        params = {"what": business_type, "page": page}
        headers = dict(BROWSER_HEADERS)
        headers["Referer"] = f"https://www.bolagsfakta.se/Search?what={quote(business_type)}"

        try:
            response = requests.get(self.base_url, headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise DirectoryUnavailable(f"Network error fetching directory page {page}: {e}")

        if response.status_code != 200:
            raise DirectoryUnavailable(f"Directory API error (HTTP {response.status_code})")

        body = response.text.lstrip()
        # Guard against Cloudflare returning HTML instead of JSON
        if not body.startswith("{"):
            self.logger.warning("Unexpected response from Bolagsfakta (not JSON)")
            self.logger.warning(f"First 200 chars: {body[:200]}")
            return []

        try:
            data = response.json()
        except ValueError as e:
            self.logger.warning(f"Could not parse directory response: {e}")
            return []

        return self._parse_companies(data)

    def _parse_companies(self, data: Dict[str, Any]) -> List[CompanyRecord]:
        companies = []
        for item in data.get("searchResultItems") or []:
            if not isinstance(item, dict):
                continue

            name = item.get("companyName")
            if not name or not str(name).strip():
                continue

            employees = item.get("antalAnstallda")
            try:
                employees = float(employees) if employees is not None else None
            except (TypeError, ValueError):
                employees = None
            if employees is not None and employees < 0:
                employees = None

            companies.append(CompanyRecord(name=str(name).strip(), employees=employees))
        return companies
