"""
SQLite store for companies and their website check state.
"""

import logging
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from sitecheck.core.exceptions import StorageError
from sitecheck.core.models import CompanyRecord, MatchOutcome, StoredCompany


logger = logging.getLogger(__name__)


class CompanyStore:
    """
    Persist companies and whether a website was found for them.

    A company is ``checked`` once a search for it completed, whether or not a
    website was found. Companies whose search failed stay unchecked so that
    a later run picks them up again.
    """

    def __init__(self, db_file: str, table_name: str = "companies"):
        """
        Initialize the company store.

        Args:
            db_file: Path to SQLite database file (``:memory:`` for a throwaway store)
            table_name: Name of the companies table

        Raises:
            StorageError: If database cannot be initialized
        """
        self.db_file = db_file
        self.table_name = table_name

        try:
            self._conn = sqlite3.connect(self.db_file)
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open database {db_file}: {e}")

        self._initialize_database()

    def __enter__(self) -> 'CompanyStore':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _initialize_database(self) -> None:
        """Initialize database schema."""
        try:
            self._conn.execute(f'''
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    employees REAL,
                    is_checked INTEGER NOT NULL DEFAULT 0,
                    has_website INTEGER NOT NULL DEFAULT 0,
                    website TEXT
                )
            ''')
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to initialize database: {e}")

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            self._conn.rollback()
            raise StorageError(f"Database error: {e}")

    def _query(self, sql: str, params: tuple = ()) -> List[StoredCompany]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Database error: {e}")
        return [self._map_row(row) for row in rows]

    @staticmethod
    def _map_row(row: sqlite3.Row) -> StoredCompany:
        return StoredCompany(
            id=row["id"],
            name=row["name"],
            employees=row["employees"],
            is_checked=bool(row["is_checked"]),
            has_website=bool(row["has_website"]),
            website=row["website"]
        )

    def add_company(self, name: str, employees: Optional[float] = None) -> bool:
        """
        Add a company unless one with the same name exists.

        Args:
            name: Company name
            employees: Number of employees

        Returns:
            True if a new row was inserted
        """
        cursor = self._execute(
            f"INSERT OR IGNORE INTO {self.table_name} (name, employees) VALUES (?, ?)",
            (name.strip(), employees)
        )
        return cursor.rowcount > 0

    def add_companies(self, companies: Iterable[CompanyRecord]) -> int:
        """
        Add several companies, skipping names already stored.

        Returns:
            Number of companies inserted
        """
        added = 0
        for company in companies:
            if self.add_company(company.name, company.employees):
                added += 1
        logger.info(f"Stored {added} new companies")
        return added

    def get_all_companies(self) -> List[StoredCompany]:
        return self._query(f"SELECT * FROM {self.table_name} ORDER BY name")

    def get_unchecked_companies(self, limit: Optional[int] = None) -> List[StoredCompany]:
        """Companies that have not been searched for yet, by name."""
        sql = f"SELECT * FROM {self.table_name} WHERE is_checked = 0 ORDER BY name"
        if limit is not None:
            return self._query(sql + " LIMIT ?", (int(limit),))
        return self._query(sql)

    def get_company_by_name(self, name: str) -> Optional[StoredCompany]:
        results = self._query(
            f"SELECT * FROM {self.table_name} WHERE name = ? COLLATE NOCASE LIMIT 1",
            (name.strip(),)
        )
        return results[0] if results else None

    def update_website(self, company_id: int, website: Optional[str], has_website: bool) -> None:
        """
        Store the website check result and mark the company as checked.

        Args:
            company_id: Row id of the company
            website: Matched website URL, or None
            has_website: Whether a matching website was found
        """
        self._execute(
            f"UPDATE {self.table_name} SET website = ?, has_website = ?, is_checked = 1 WHERE id = ?",
            (website, 1 if has_website else 0, company_id)
        )

    def record_outcome(self, outcome: MatchOutcome) -> bool:
        """
        Persist one outcome.

        Failed searches are not recorded, leaving the company unchecked.

        Returns:
            True if the company was updated
        """
        if outcome.is_error:
            return False

        company_id = outcome.company.external_id
        if company_id is None:
            stored = self.get_company_by_name(outcome.company.name)
            if stored is None:
                logger.warning(f"Company not found in store: {outcome.company.name}")
                return False
            company_id = stored.id

        self.update_website(int(company_id), outcome.matched_url, outcome.has_website)
        return True

    def record_outcomes(self, outcomes: Iterable[MatchOutcome]) -> int:
        """Persist several outcomes; returns how many companies were updated."""
        return sum(1 for outcome in outcomes if self.record_outcome(outcome))

    def reset_all_companies(self) -> None:
        """Reset all companies to unchecked, clearing website data."""
        self._execute(f"UPDATE {self.table_name} SET is_checked = 0, has_website = 0, website = NULL")

    def delete_all_companies(self) -> None:
        self._execute(f"DELETE FROM {self.table_name}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get store statistics.

        Returns:
            Dictionary with company counts
        """
        try:
            row = self._conn.execute(f'''
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(is_checked), 0) AS checked,
                       COALESCE(SUM(CASE WHEN is_checked = 1 AND has_website = 1 THEN 1 ELSE 0 END), 0)
                           AS with_website
                FROM {self.table_name}
            ''').fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Database error: {e}")

        return {
            "total": row["total"],
            "checked": row["checked"],
            "unchecked": row["total"] - row["checked"],
            "with_website": row["with_website"],
            "without_website": row["checked"] - row["with_website"]
        }

    def close(self) -> None:
        """Close the database connection."""
        try:
            self._conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Error closing database: {e}")
