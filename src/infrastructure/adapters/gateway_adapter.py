"""Signed gateway adapter.

Every request is built in full (URL with query string, body bytes) and
signed by RequestSigner before dispatch. Tokens come from the
client-credentials exchange only. All routes live under GATEWAY_API_PREFIX.
"""

from datetime import UTC, datetime
from urllib.parse import urlencode

import structlog
from pydantic import BaseModel

from src.core.constants import BEARER_PREFIX, GATEWAY_API_PREFIX
from src.core.result import Failure, Result, Success
from src.domain.errors import ProviderError
from src.domain.protocols import (
    BalanceData,
    BankInfoData,
    CardData,
    ProviderAccountData,
    ProviderTransactionData,
)
from src.domain.value_objects import ProviderDescriptor
from src.infrastructure.adapters.mappers import BankPayloadMapper
from src.infrastructure.adapters.request_signer import RequestSigner
from src.infrastructure.adapters.schemas import (
    AccountsEnvelope,
    BalancePayload,
    BankInfoPayload,
    CardPayload,
    TransactionsEnvelope,
)
from src.infrastructure.http import HTTPClient


def format_gateway_time(moment: datetime) -> str:
    """ISO-8601 UTC without fractional seconds, e.g. 2024-01-05T00:00:00Z."""
    return moment.astimezone(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")


class GatewayAdapter:
    """Bank adapter for the signed gateway variant."""

    def __init__(
        self,
        *,
        descriptor: ProviderDescriptor,
        http_client: HTTPClient,
        access_token: str,
        signer: RequestSigner | None = None,
    ) -> None:
        self.descriptor = descriptor
        self._http_client = http_client.for_provider(descriptor.id)
        self._access_token = access_token
        self._signer = signer or RequestSigner()
        self._mapper = BankPayloadMapper(provider_id=descriptor.id)
        self._logger = structlog.get_logger("gateway_adapter").bind(provider_id=descriptor.id)

    @property
    def provider_id(self) -> str:
        return self.descriptor.id

    def _url(self, path: str, params: dict[str, str] | None = None) -> str:
        url = f"{self.descriptor.base_url}{GATEWAY_API_PREFIX}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    async def _signed_get[M: BaseModel](
        self,
        path: str,
        model: type[M],
        operation: str,
        params: dict[str, str] | None = None,
    ) -> Result[M, ProviderError]:
        url = self._url(path, params)
        headers = self._signer.sign(
            "GET",
            url,
            {
                "Authorization": f"{BEARER_PREFIX}{self._access_token}",
                "Accept": "application/json",
            },
        )
        self._logger.debug("gateway_request_signed", operation=operation, url=url)
        return await self._http_client.execute_and_decode(
            "GET",
            url,
            model,
            headers=headers,
            operation=operation,
        )

    async def list_accounts(self) -> Result[list[ProviderAccountData], ProviderError]:
        result = await self._signed_get("/accounts", AccountsEnvelope, "list_accounts")
        if isinstance(result, Failure):
            return result
        accounts = self._mapper.map_accounts(result.value.accounts)
        self._logger.info("accounts_fetched", count=len(accounts))
        return Success(value=accounts)

    async def get_balance(self, account_id: str) -> Result[BalanceData, ProviderError]:
        result = await self._signed_get(
            f"/accounts/{account_id}/balance", BalancePayload, "get_balance"
        )
        if isinstance(result, Failure):
            return result
        return Success(value=self._mapper.map_balance(result.value))

    async def list_transactions(
        self,
        account_id: str,
        from_date: datetime,
        to_date: datetime,
        limit: int,
    ) -> Result[list[ProviderTransactionData], ProviderError]:
        params = {
            "from_date": format_gateway_time(from_date),
            "to_date": format_gateway_time(to_date),
            "limit": str(limit),
        }
        result = await self._signed_get(
            f"/accounts/{account_id}/transactions",
            TransactionsEnvelope,
            "list_transactions",
            params=params,
        )
        if isinstance(result, Failure):
            return result
        transactions = self._mapper.map_transactions(result.value.transactions, account_id)
        self._logger.info("transactions_fetched", account_id=account_id, count=len(transactions))
        return Success(value=transactions)

    async def get_card_info(self, card_id: str) -> Result[CardData, ProviderError]:
        result = await self._signed_get(f"/cards/{card_id}", CardPayload, "get_card_info")
        if isinstance(result, Failure):
            return result
        return Success(value=self._mapper.map_card(result.value))

    async def get_bank_info(self, bank_id: str | None = None) -> Result[BankInfoData, ProviderError]:
        """Fetch public information about a bank (defaults to this provider)."""
        bank_id = bank_id or self.provider_id
        result = await self._signed_get(
            f"/banks/{bank_id}/public", BankInfoPayload, "get_bank_info"
        )
        if isinstance(result, Failure):
            return result
        return Success(value=self._mapper.map_bank_info(result.value, bank_id))

    async def check_connection(self) -> bool:
        return isinstance(await self.list_accounts(), Success)
