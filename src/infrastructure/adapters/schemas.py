"""Provider data wire schemas.

Both adapter variants share the payload shapes below (snake_case fields).
List endpoints wrap their items: {"accounts": [...]}, {"transactions": [...]}.
Envelopes keep items as raw dicts so a single malformed item can be skipped
by the mapper instead of failing the whole page.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AccountsEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    accounts: list[dict[str, Any]] = Field(default_factory=list)


class TransactionsEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transactions: list[dict[str, Any]] = Field(default_factory=list)


class AccountPayload(BaseModel):
    """Single account item."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    account_number: str | None = None
    account_type: str | None = None
    currency: str = Field(..., min_length=3, max_length=3)
    balance: Decimal | None = None
    available_balance: Decimal | None = None
    status: str | None = None
    name: str | None = None
    opened_date: date | None = None
    bank_id: str | None = None


class TransactionPayload(BaseModel):
    """Single transaction item. The amount keeps the provider's sign."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    account_id: str | None = None
    amount: Decimal
    currency: str = Field(..., min_length=3, max_length=3)
    transaction_date: datetime
    description: str | None = None
    category: str | None = None
    merchant_name: str | None = None
    type: str | None = None
    status: str | None = None
    bank_id: str | None = None


class BalancePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    account_id: str
    balance: Decimal
    available_balance: Decimal | None = None
    currency: str = Field(..., min_length=3, max_length=3)
    last_updated: datetime | None = None


class CardPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    account_id: str | None = None
    card_number: str
    card_type: str
    expiration_date: str | None = None
    holder_name: str | None = None
    status: str
    bank_id: str | None = None


class BankInfoPayload(BaseModel):
    """Public bank information (gateway only). Unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    bank_id: str | None = None
    name: str
