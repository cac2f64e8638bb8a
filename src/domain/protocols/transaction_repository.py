"""TransactionRepository protocol (port).

Transactions are insert-only: add() never updates an existing record.

Implementations:
    - SQLAlchemy: src/infrastructure/persistence/repositories/transaction_repository.py
"""

from datetime import datetime
from typing import Protocol

from src.domain.entities import Transaction


class TransactionRepository(Protocol):
    """Port for Transaction persistence."""

    async def find_by_transaction_id(
        self, provider_id: str, transaction_id: str
    ) -> Transaction | None:
        """Find a transaction by its provider-scoped identifier."""
        ...

    async def add(self, transaction: Transaction) -> bool:
        """Insert a transaction (atomic).

        Returns:
            True if inserted, False if the key already existed.
        """
        ...

    async def find_by_date_range(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> list[Transaction]:
        """Find transactions booked in [start, end] (open bounds allowed)."""
        ...

    async def find_recent(
        self, from_date: datetime | None = None, limit: int | None = None
    ) -> list[Transaction]:
        """Find transactions newest first, optionally bounded and limited."""
        ...
