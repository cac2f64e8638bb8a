"""Provider payload mapper.

Converts provider JSON items into ProviderAccountData / ProviderTransactionData
and the balance, card and bank-info records. Items that fail validation are
skipped with a warning; a page never fails because of one bad item.

Thread-safe: No mutable state, can be shared across adapters.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from src.domain.enums import CardStatus, CardType
from src.domain.protocols import (
    BalanceData,
    BankInfoData,
    CardData,
    ProviderAccountData,
    ProviderTransactionData,
)
from src.infrastructure.adapters.schemas import (
    AccountPayload,
    BalancePayload,
    BankInfoPayload,
    CardPayload,
    TransactionPayload,
)

logger = structlog.get_logger(__name__)


class BankPayloadMapper:
    """Maps provider payloads onto adapter output records.

    Example:
        >>> mapper = BankPayloadMapper(provider_id="vbank")
        >>> accounts = mapper.map_accounts(envelope.accounts)
    """

    def __init__(self, *, provider_id: str) -> None:
        self._provider_id = provider_id

    # =========================================================================
    # Accounts
    # =========================================================================

    def map_account(self, data: dict[str, Any]) -> ProviderAccountData | None:
        """Map a single account item, or None if it is invalid."""
        try:
            payload = AccountPayload.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(
                "account_mapping_failed",
                provider_id=self._provider_id,
                errors=e.error_count(),
                account_id=data.get("id") if isinstance(data, dict) else None,
            )
            return None

        return ProviderAccountData(
            account_id=payload.id,
            account_number=payload.account_number or payload.id,
            name=payload.name or payload.account_number or payload.id,
            account_type=payload.account_type,
            currency=payload.currency.upper(),
            balance=payload.balance if payload.balance is not None else Decimal("0"),
            available_balance=payload.available_balance,
            status=payload.status,
            opened_date=payload.opened_date,
            raw_data=data,
        )

    def map_accounts(self, items: list[dict[str, Any]]) -> list[ProviderAccountData]:
        accounts = [self.map_account(item) for item in items]
        return [account for account in accounts if account is not None]

    # =========================================================================
    # Transactions
    # =========================================================================

    def map_transaction(
        self, data: dict[str, Any], account_id: str
    ) -> ProviderTransactionData | None:
        """Map a single transaction item, or None if it is invalid.

        Args:
            data: Transaction item.
            account_id: Account the page was requested for (used when the
                item omits account_id).
        """
        try:
            payload = TransactionPayload.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(
                "transaction_mapping_failed",
                provider_id=self._provider_id,
                errors=e.error_count(),
                transaction_id=data.get("id") if isinstance(data, dict) else None,
            )
            return None

        return ProviderTransactionData(
            transaction_id=payload.id,
            account_id=payload.account_id or account_id,
            amount=payload.amount,
            currency=payload.currency.upper(),
            transaction_date=payload.transaction_date,
            transaction_type=payload.type,
            status=payload.status,
            description=payload.description,
            merchant_name=payload.merchant_name,
            category=payload.category,
            raw_data=data,
        )

    def map_transactions(
        self, items: list[dict[str, Any]], account_id: str
    ) -> list[ProviderTransactionData]:
        transactions = [self.map_transaction(item, account_id) for item in items]
        return [txn for txn in transactions if txn is not None]

    # =========================================================================
    # Balance, card, bank info
    # =========================================================================

    @staticmethod
    def map_balance(payload: BalancePayload) -> BalanceData:
        return BalanceData(
            account_id=payload.account_id,
            balance=payload.balance,
            currency=payload.currency.upper(),
            available_balance=payload.available_balance,
            last_updated=payload.last_updated,
        )

    @staticmethod
    def map_card(payload: CardPayload) -> CardData:
        return CardData(
            card_id=payload.id,
            account_id=payload.account_id,
            card_number=payload.card_number,
            card_type=_parse_enum(CardType, payload.card_type, CardType.DEBIT),
            status=_parse_enum(CardStatus, payload.status, CardStatus.PENDING),
            expiration_date=payload.expiration_date,
            holder_name=payload.holder_name,
        )

    @staticmethod
    def map_bank_info(payload: BankInfoPayload, bank_id: str) -> BankInfoData:
        return BankInfoData(
            bank_id=payload.bank_id or payload.id or bank_id,
            name=payload.name,
            details=dict(payload.model_extra or {}),
        )


def _parse_enum[E: Enum](enum_cls: type[E], value: str, default: E) -> E:
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return default
