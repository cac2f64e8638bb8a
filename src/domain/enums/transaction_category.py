"""Transaction category enumeration."""

from enum import Enum


class TransactionCategory(str, Enum):
    """Spending and income categories used by budgets and forecasts."""

    # Income
    SALARY = "salary"
    BONUS = "bonus"
    INVESTMENT = "investment"
    GIFT = "gift"
    OTHER_INCOME = "other_income"

    # Expense
    FOOD = "food"
    TRANSPORT = "transport"
    UTILITIES = "utilities"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    EDUCATION = "education"
    BILLS = "bills"
    SUBSCRIPTIONS = "subscriptions"
    OTHER_EXPENSE = "other_expense"

    @property
    def is_income(self) -> bool:
        """Whether this category describes incoming money."""
        return self in _INCOME_CATEGORIES

    @classmethod
    def parse(cls, value: str | None) -> "TransactionCategory | None":
        """Parse a provider category, returning None when unknown.

        Args:
            value: Raw category string.

        Returns:
            Matching category or None.
        """
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_INCOME_CATEGORIES = frozenset(
    {
        TransactionCategory.SALARY,
        TransactionCategory.BONUS,
        TransactionCategory.INVESTMENT,
        TransactionCategory.GIFT,
        TransactionCategory.OTHER_INCOME,
    }
)
