"""Remote tabular store interface."""

from typing import Protocol

JOURNAL_ENTRIES = "journal_entries"
GOALS = "goals"


class StoreError(Exception):
    """Raised when a read or write against the store fails."""

    pass


class RecordStore(Protocol):
    """Interface for inserting and listing rows in a collection."""

    async def insert(self, collection: str, record: dict) -> None:
        """Insert a row. Server assigns id and created_at."""
        ...

    async def select_all(
        self, collection: str, order_by: str = "created_at", descending: bool = True
    ) -> list[dict]:
        """Fetch every visible row, ordered by the given column."""
        ...
