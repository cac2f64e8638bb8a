"""Account domain entity.

Represents a financial account aggregated from a connected provider.
Accounts are keyed by (provider_id, account_id) and upserted on every sync.

Financial Precision:
    Monetary values use Decimal. Never store money as float.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID

from src.domain.enums import AccountStatus, AccountType


@dataclass
class Account:
    """Financial account from a provider.

    Attributes:
        id: Internal identifier.
        provider_id: Owning provider identifier.
        account_id: Provider-scoped account identifier.
        account_number: Account number as reported by the provider.
        account_type: Type classification.
        currency: ISO 4217 currency code.
        balance: Current balance.
        available_balance: Available balance if reported.
        status: Provider-reported status.
        name: Display name.
        opened_date: Opening date if reported.
        last_synced_at: Last successful sync timestamp.
    """

    id: UUID
    provider_id: str
    account_id: str
    account_number: str
    account_type: AccountType
    currency: str
    balance: Decimal
    name: str
    available_balance: Decimal | None = None
    status: AccountStatus = AccountStatus.ACTIVE
    opened_date: date | None = None
    last_synced_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate identifiers and currency."""
        if not self.account_id:
            raise ValueError("account_id cannot be empty")
        if len(self.currency) != 3:
            raise ValueError(f"Currency must be a 3-letter ISO code: {self.currency}")
        self.currency = self.currency.upper()

    @property
    def is_active(self) -> bool:
        """Whether the account counts toward aggregated balances."""
        return self.status == AccountStatus.ACTIVE

    def refresh_from(self, other: "Account", now: datetime | None = None) -> None:
        """Overwrite provider-owned fields with freshly fetched values.

        Identity (id, provider_id, account_id) is kept.
        """
        self.account_number = other.account_number
        self.account_type = other.account_type
        self.currency = other.currency
        self.balance = other.balance
        self.available_balance = other.available_balance
        self.status = other.status
        self.name = other.name
        self.opened_date = other.opened_date
        self.last_synced_at = now or datetime.now(UTC)
