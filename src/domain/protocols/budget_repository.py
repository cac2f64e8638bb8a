"""BudgetRepository protocol (port)."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Budget


class BudgetRepository(Protocol):
    """Port for Budget persistence."""

    async def find_by_id(self, budget_id: UUID) -> Budget | None:
        """Find a budget with its categories."""
        ...

    async def find_active(self, now: datetime) -> list[Budget]:
        """Find budgets whose window has not ended, newest first."""
        ...

    async def save(self, budget: Budget) -> None:
        """Create or update a budget and its categories (atomic)."""
        ...
