"""Data models for the Company Website Tracker."""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Dict, Any


@dataclass(frozen=True)
class CompanyRecord:
    """A company to check, as supplied by the directory, the store or a CSV file."""
    name: str
    employees: Optional[float] = None
    external_id: Optional[str] = None

    def __post_init__(self):
        """Validate employee count."""
        if self.employees is not None and self.employees < 0:
            raise ValueError("Employee count cannot be negative")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'CompanyRecord':
        """Create CompanyRecord from a store or CSV row.

        Args:
            row: Dictionary with at least a ``name`` key

        Returns:
            CompanyRecord instance
        """
        employees = row.get('employees')
        external_id = row.get('id')
        return cls(
            name=str(row.get('name', '')).strip(),
            employees=float(employees) if employees not in (None, '') else None,
            external_id=str(external_id) if external_id not in (None, '') else None
        )


@dataclass(frozen=True)
class MatchOutcome:
    """Result of one website check for one company.

    At most one of ``matched_url`` and ``error`` is set. Neither set means the
    search succeeded but no candidate URL belonged to the company.
    """
    company: CompanyRecord
    matched_url: Optional[str] = None
    candidate_urls: Tuple[str, ...] = ()
    error: Optional[str] = None

    def __post_init__(self):
        """Validate outcome state."""
        if self.matched_url is not None and self.error is not None:
            raise ValueError("An outcome cannot have both a matched URL and an error")
        # Accept any sequence but store an immutable copy
        object.__setattr__(self, 'candidate_urls', tuple(self.candidate_urls))

    @property
    def has_website(self) -> bool:
        return self.matched_url is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass
class CallBudget:
    """Hard ceiling on external search calls, shared across one run."""
    limit: int
    used: int = 0

    def __post_init__(self):
        """Validate budget bounds."""
        if self.limit <= 0:
            raise ValueError("Call budget limit must be positive")
        if self.used < 0:
            raise ValueError("Call budget usage cannot be negative")

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    def consume(self) -> None:
        """Record one search attempt."""
        self.used += 1


@dataclass(frozen=True)
class RunSummary:
    """Aggregated result of a reconciliation run."""
    outcomes: Tuple[MatchOutcome, ...]
    total_batch: int
    calls_used: int
    budget_exhausted: bool = False
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    @property
    def skipped(self) -> int:
        """Companies in the batch that were never attempted."""
        return self.total_batch - self.processed

    @property
    def with_website(self) -> int:
        return len(self.websites_found)

    @property
    def without_website(self) -> int:
        return len(self.websites_missing)

    @property
    def errors(self) -> int:
        return len(self.failed)

    @property
    def websites_found(self) -> List[MatchOutcome]:
        return [o for o in self.outcomes if o.has_website]

    @property
    def websites_missing(self) -> List[MatchOutcome]:
        return [o for o in self.outcomes if not o.has_website and not o.is_error]

    @property
    def failed(self) -> List[MatchOutcome]:
        return [o for o in self.outcomes if o.is_error]

    def to_dict(self) -> Dict[str, Any]:
        """Summary counts for reporting."""
        return {
            'total_batch': self.total_batch,
            'processed': self.processed,
            'skipped': self.skipped,
            'with_website': self.with_website,
            'without_website': self.without_website,
            'errors': self.errors,
            'calls_used': self.calls_used,
            'budget_exhausted': self.budget_exhausted,
            'cancelled': self.cancelled,
        }


@dataclass
class StoredCompany:
    """A company row in the company store."""
    id: int
    name: str
    employees: Optional[float] = None
    is_checked: bool = False
    has_website: bool = False
    website: Optional[str] = None

    def to_record(self) -> CompanyRecord:
        """Convert to the immutable pipeline input."""
        return CompanyRecord(name=self.name, employees=self.employees, external_id=str(self.id))
