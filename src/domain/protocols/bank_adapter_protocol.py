"""Bank adapter protocol and the provider data it returns.

A bank adapter translates the canonical operations (list accounts, get
balance, list transactions, get card) into one provider's HTTP dialect. Two
implementations exist: the standard bearer-token adapter and the signed
gateway adapter. AdapterFactory picks one per provider descriptor.

The data classes below are the adapter output, before mapping to domain
entities. They decouple provider payload shapes from the domain model.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol

from src.core.result import Result
from src.domain.enums import CardStatus, CardType
from src.domain.errors import ProviderError


@dataclass(frozen=True, kw_only=True)
class OAuthTokens:
    """Token envelope returned by a token endpoint.

    Attributes:
        access_token: Bearer token for API authentication.
        refresh_token: Token for obtaining new access tokens, if issued.
        id_token: OpenID identity token, if issued.
        token_type: Token type, typically "Bearer".
        expires_in: Seconds until access_token expires (None = never).
        scope: Granted scope.
    """

    access_token: str
    refresh_token: str | None = None
    id_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None


@dataclass(frozen=True, kw_only=True)
class ProviderAccountData:
    """Account as returned by a provider.

    Attributes:
        account_id: Provider's unique account identifier.
        account_number: Account number for display.
        name: Account name.
        account_type: Provider's account type string.
        currency: ISO 4217 currency code.
        balance: Current balance.
        available_balance: Available balance, if reported.
        status: Provider's status string.
        opened_date: Opening date, if reported.
        raw_data: Full provider payload for debugging.
    """

    account_id: str
    account_number: str
    name: str
    account_type: str | None
    currency: str
    balance: Decimal
    available_balance: Decimal | None = None
    status: str | None = None
    opened_date: date | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class ProviderTransactionData:
    """Transaction as returned by a provider.

    The amount keeps the provider's sign; ingestion reconciles it with the
    transaction type.
    """

    transaction_id: str
    account_id: str
    amount: Decimal
    currency: str
    transaction_date: datetime
    transaction_type: str | None = None
    status: str | None = None
    description: str | None = None
    merchant_name: str | None = None
    category: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class BalanceData:
    """Current balance of one account."""

    account_id: str
    balance: Decimal
    currency: str
    available_balance: Decimal | None = None
    last_updated: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class CardData:
    """Payment card details (card number masked by the provider)."""

    card_id: str
    account_id: str | None
    card_number: str
    card_type: CardType
    status: CardStatus
    expiration_date: str | None = None
    holder_name: str | None = None


@dataclass(frozen=True, kw_only=True)
class BankInfoData:
    """Public information about a bank (gateway providers only)."""

    bank_id: str
    name: str
    details: dict[str, Any] = field(default_factory=dict)


class BankAdapterProtocol(Protocol):
    """Canonical operations every bank adapter supports.

    Implementations:
        - StandardAdapter: bearer token, consent headers, path probing
        - GatewayAdapter: signed requests, client-credentials tokens
    """

    @property
    def provider_id(self) -> str:
        """Identifier of the provider this adapter talks to."""
        ...

    async def list_accounts(self) -> Result[list[ProviderAccountData], ProviderError]:
        """Fetch all accounts visible to the current token/consent."""
        ...

    async def get_balance(self, account_id: str) -> Result[BalanceData, ProviderError]:
        """Fetch the current balance of one account."""
        ...

    async def list_transactions(
        self,
        account_id: str,
        from_date: datetime,
        to_date: datetime,
        limit: int,
    ) -> Result[list[ProviderTransactionData], ProviderError]:
        """Fetch one page of transactions for an account in a date range."""
        ...

    async def get_card_info(self, card_id: str) -> Result[CardData, ProviderError]:
        """Fetch card details."""
        ...

    async def check_connection(self) -> bool:
        """Whether listing accounts currently succeeds."""
        ...
