"""Transaction domain entity.

Transactions are immutable once ingested: sync inserts a transaction at most
once per (provider_id, transaction_id) and never updates it afterwards.

Invariant:
    The sign of amount agrees with transaction_type for the record's
    lifetime: INCOME >= 0, EXPENSE <= 0.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.domain.enums import TransactionCategory, TransactionStatus, TransactionType


@dataclass(frozen=True)
class Transaction:
    """Financial transaction from a provider account.

    Attributes:
        id: Internal identifier.
        provider_id: Owning provider identifier.
        account_id: Provider-scoped account identifier.
        transaction_id: Provider-scoped transaction identifier.
        amount: Signed amount (negative for expenses).
        currency: ISO 4217 currency code.
        transaction_date: When the transaction was booked.
        transaction_type: Income, expense or transfer.
        status: Lifecycle status.
        description: Free-text description.
        merchant_name: Merchant, when reported.
        category: Category tag, when known.
    """

    id: UUID
    provider_id: str
    account_id: str
    transaction_id: str
    amount: Decimal
    currency: str
    transaction_date: datetime
    transaction_type: TransactionType
    status: TransactionStatus = TransactionStatus.COMPLETED
    description: str | None = None
    merchant_name: str | None = None
    category: TransactionCategory | None = None

    def __post_init__(self) -> None:
        """Enforce sign/type agreement."""
        if not self.transaction_id:
            raise ValueError("transaction_id cannot be empty")
        if self.transaction_type == TransactionType.INCOME and self.amount < 0:
            raise ValueError(
                f"Income transaction {self.transaction_id} has negative amount {self.amount}"
            )
        if self.transaction_type == TransactionType.EXPENSE and self.amount > 0:
            raise ValueError(
                f"Expense transaction {self.transaction_id} has positive amount {self.amount}"
            )

    @property
    def is_income(self) -> bool:
        """Whether this is incoming money."""
        return self.transaction_type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        """Whether this is outgoing money."""
        return self.transaction_type == TransactionType.EXPENSE

    @property
    def is_completed(self) -> bool:
        """Whether the transaction has settled."""
        return self.status == TransactionStatus.COMPLETED

    @property
    def magnitude(self) -> Decimal:
        """Absolute amount."""
        return abs(self.amount)
