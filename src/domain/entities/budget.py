"""Budget domain entity.

A budget caps spending over a period, overall and per category. Spent
amounts are recomputed from transactions by BudgetManager.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from src.domain.enums import BudgetPeriod, TransactionCategory

WARNING_THRESHOLD_PERCENT = 80.0


@dataclass
class BudgetCategory:
    """Per-category limit inside a budget.

    Attributes:
        category: Expense category tracked.
        limit: Spending cap for the period.
        spent: Spending recomputed from transactions (magnitude).
    """

    category: TransactionCategory
    limit: Decimal
    spent: Decimal = Decimal("0")

    @property
    def is_exceeded(self) -> bool:
        return self.spent > self.limit

    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0"), self.limit - self.spent)

    @property
    def usage_percentage(self) -> float:
        if self.limit <= 0:
            return 0.0
        return float(self.spent / self.limit * 100)


@dataclass
class Budget:
    """Spending budget.

    Attributes:
        id: Internal identifier.
        name: Display name.
        total_limit: Overall spending cap.
        period: Recurrence period.
        start_date: Inclusive window start.
        end_date: Inclusive window end.
        categories: Per-category limits.
        created_at: Creation timestamp.
    """

    id: UUID
    name: str
    total_limit: Decimal
    period: BudgetPeriod
    start_date: datetime
    end_date: datetime
    categories: list[BudgetCategory] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate limit and window."""
        if self.total_limit < 0:
            raise ValueError("total_limit cannot be negative")
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")

    @property
    def total_spent(self) -> Decimal:
        return sum((c.spent for c in self.categories), Decimal("0"))

    @property
    def usage_percentage(self) -> float:
        if self.total_limit <= 0:
            return 0.0
        return float(self.total_spent / self.total_limit * 100)

    @property
    def is_exceeded(self) -> bool:
        return self.total_spent > self.total_limit

    @property
    def is_near_limit(self) -> bool:
        """Usage at or above the warning threshold."""
        return self.usage_percentage >= WARNING_THRESHOLD_PERCENT

    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0"), self.total_limit - self.total_spent)

    def is_active(self, now: datetime | None = None) -> bool:
        """Whether the window has not ended yet."""
        return self.end_date >= (now or datetime.now(UTC))

    def contains(self, moment: datetime) -> bool:
        """Whether moment falls inside the budget window."""
        return self.start_date <= moment <= self.end_date
