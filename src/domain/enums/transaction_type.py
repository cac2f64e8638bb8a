"""Transaction type enumeration.

The type is fixed at ingestion and always agrees with the sign of the
amount: income is never negative, expense is never positive.
"""

from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    """Direction of money movement."""

    INCOME = "income"
    """Money received (salary, bonus, refund). Amount >= 0."""

    EXPENSE = "expense"
    """Money spent (purchases, bills). Amount <= 0."""

    TRANSFER = "transfer"
    """Movement between own accounts. Either sign."""

    @classmethod
    def from_provider(cls, value: str | None, amount: Decimal) -> "TransactionType":
        """Map a provider type string, inferring from the sign when unknown.

        Providers use credit/debit as well as income/expense.

        Args:
            value: Raw provider type (case-insensitive).
            amount: Signed provider amount.

        Returns:
            Matching TransactionType.
        """
        normalized = (value or "").strip().lower()
        aliases = {"credit": cls.INCOME, "debit": cls.EXPENSE}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return cls.EXPENSE if amount < 0 else cls.INCOME
