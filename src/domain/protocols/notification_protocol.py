"""Notification sink protocol (port).

Fire-and-forget user notifications about sync outcomes and budgets.
Implementations must be cheap and must not block the caller; the core
guards every call so a failing sink never affects sync results.
"""

from decimal import Decimal
from typing import Protocol


class NotificationSinkProtocol(Protocol):
    """Protocol for notification delivery."""

    async def notify_sync_success(self, provider_name: str) -> None:
        """A provider's accounts were synced."""
        ...

    async def notify_sync_error(self, provider_name: str, message: str | None = None) -> None:
        """A provider's sync failed."""
        ...

    async def notify_budget_exceeded(self, budget_name: str, exceeded_by: Decimal) -> None:
        """Total spending went over the budget limit."""
        ...

    async def notify_budget_warning(self, budget_name: str, percentage: float) -> None:
        """Spending reached the warning threshold of the budget."""
        ...

    async def notify_category_exceeded(self, category_name: str, budget_name: str) -> None:
        """Spending in one budget category went over its limit."""
        ...
