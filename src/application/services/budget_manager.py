"""Budget manager.

Creates budgets, recomputes category spending from transactions and raises
budget alerts through the notification dispatcher.

Spending is the sum of expense magnitudes booked inside the budget window
for each tracked category. Alerts after every recomputation:

    - total over limit  -> notify_budget_exceeded(name, overspend)
    - else usage >= 80% -> notify_budget_warning(name, percentage)
    - each category over its own limit -> notify_category_exceeded(category, name)
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.entities import Budget, BudgetCategory, Transaction
from src.domain.enums import BudgetPeriod, TransactionCategory
from src.domain.protocols import (
    BudgetRepository,
    LoggerProtocol,
    NotificationSinkProtocol,
)


@dataclass(frozen=True)
class CategoryLimit:
    """Requested per-category limit for a new budget."""

    category: TransactionCategory
    limit: Decimal


class BudgetManager:
    """Budget lifecycle and spending recomputation.

    Dependencies (injected via constructor):
        - BudgetRepository: Budget persistence
        - NotificationSinkProtocol: Alert delivery (expected to be fail-open)
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        budget_repository: BudgetRepository,
        notifications: NotificationSinkProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._budgets = budget_repository
        self._notifications = notifications
        self._logger = logger

    async def create_budget(
        self,
        name: str,
        total_limit: Decimal,
        period: BudgetPeriod,
        categories: list[CategoryLimit] | None = None,
        now: datetime | None = None,
    ) -> Budget:
        """Create and persist a budget for the period containing ``now``.

        Args:
            name: Display name.
            total_limit: Overall spending cap.
            period: Recurrence period (CUSTOM spans one month from now).
            categories: Per-category limits.
            now: Reference instant (defaults to current UTC time).

        Returns:
            The persisted budget.
        """
        now = now or datetime.now(UTC)
        start, end = period.window(now)
        budget = Budget(
            id=uuid7(),
            name=name,
            total_limit=total_limit,
            period=period,
            start_date=start,
            end_date=end,
            categories=[
                BudgetCategory(category=c.category, limit=c.limit) for c in categories or []
            ],
            created_at=now,
        )
        await self._budgets.save(budget)

        self._logger.info(
            "budget_created",
            budget_id=str(budget.id),
            budget_name=name,
            period=period.value,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
        )
        return budget

    async def get_budget(self, budget_id: UUID) -> Result[Budget, NotFoundError]:
        """Load a budget by id."""
        budget = await self._budgets.find_by_id(budget_id)
        if budget is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.BUDGET_NOT_FOUND,
                    message=f"Budget {budget_id} not found",
                    resource_type="Budget",
                    resource_id=str(budget_id),
                )
            )
        return Success(value=budget)

    async def get_active_budgets(self, now: datetime | None = None) -> list[Budget]:
        """Budgets whose window has not ended yet."""
        return await self._budgets.find_active(now or datetime.now(UTC))

    async def update_budget_spending(
        self, budget: Budget, transactions: list[Transaction]
    ) -> Budget:
        """Recompute each category's spending, persist, then raise alerts.

        Args:
            budget: Budget to update in place.
            transactions: Transaction set to recompute from.

        Returns:
            The updated budget.
        """
        in_window = [
            t for t in transactions if t.is_expense and budget.contains(t.transaction_date)
        ]
        for budget_category in budget.categories:
            budget_category.spent = sum(
                (t.magnitude for t in in_window if t.category == budget_category.category),
                Decimal("0"),
            )

        await self._budgets.save(budget)
        self._logger.debug(
            "budget_spending_updated",
            budget_id=str(budget.id),
            total_spent=str(budget.total_spent),
            usage_percentage=round(budget.usage_percentage, 1),
        )

        await self._check_alerts(budget)
        return budget

    async def update_all_budgets(
        self, transactions: list[Transaction], now: datetime | None = None
    ) -> list[Budget]:
        """Recompute every active budget from the given transactions."""
        budgets = await self.get_active_budgets(now)
        for budget in budgets:
            await self.update_budget_spending(budget, transactions)

        self._logger.info("budgets_recomputed", budget_count=len(budgets))
        return budgets

    async def _check_alerts(self, budget: Budget) -> None:
        if budget.is_exceeded:
            await self._notifications.notify_budget_exceeded(
                budget.name, budget.total_spent - budget.total_limit
            )
        elif budget.is_near_limit:
            await self._notifications.notify_budget_warning(
                budget.name, budget.usage_percentage
            )

        for budget_category in budget.categories:
            if budget_category.is_exceeded:
                await self._notifications.notify_category_exceeded(
                    budget_category.category.value, budget.name
                )
