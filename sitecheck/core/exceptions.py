"""
Custom exceptions for the Company Website Tracker.
"""


class SitecheckError(Exception):
    """Base exception for all Company Website Tracker errors."""
    pass


class ConfigurationError(SitecheckError):
    """Raised when there's an error in configuration loading or validation."""
    pass


class CSVProcessingError(SitecheckError):
    """Raised when there's an error processing CSV files."""
    pass


class SearchAPIError(SitecheckError):
    """Raised when there's an error with the web search provider."""
    pass


class SearchUnavailable(SearchAPIError):
    """Raised when the search provider is unreachable or returns a non-success status."""
    pass


class SearchMalformed(SearchAPIError):
    """Raised when the search response cannot be parsed into a URL list."""
    pass


class DirectoryError(SitecheckError):
    """Raised when there's an error fetching companies from the business directory."""
    pass


class DirectoryUnavailable(DirectoryError):
    """Raised when the business directory is unreachable or returns a non-success status."""
    pass


class StorageError(SitecheckError):
    """Raised when there's an error in the company store."""
    pass
