"""Standard Open Banking adapter.

Bearer-token provider dialect:
    - Authorization: Bearer {token}, plus X-Requesting-Bank and
      X-Consent-Id when known
    - Account listing probes several candidate paths (404 = try next,
      403 = consent missing, stop)
    - Balance: /api/v1/accounts/{id}/balances
    - Transactions: /api/v1/accounts/{id}/transactions
    - Card: /cards/{id}
"""

from dataclasses import replace
from datetime import UTC, datetime

import structlog

from src.core.constants import (
    ACCOUNT_CANDIDATE_PATHS,
    BEARER_PREFIX,
    HEADER_CONSENT_ID,
    HEADER_REQUESTING_BANK,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import (
    ProviderError,
    ProviderForbiddenError,
    ProviderResourceNotFoundError,
)
from src.domain.protocols import (
    BalanceData,
    CardData,
    ProviderAccountData,
    ProviderTransactionData,
)
from src.domain.value_objects import ProviderDescriptor
from src.infrastructure.adapters.mappers import BankPayloadMapper
from src.infrastructure.adapters.schemas import (
    AccountsEnvelope,
    BalancePayload,
    CardPayload,
    TransactionsEnvelope,
)
from src.infrastructure.http import HTTPClient


def format_booking_time(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2024-01-05T00:00:00.000Z."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StandardAdapter:
    """Bank adapter for standard (bearer token + consent) providers.

    Attributes:
        descriptor: Provider descriptor.
        consent_id: Consent attached to data requests, if granted.
        client_id: Client id added to account listing, if known.
    """

    def __init__(
        self,
        *,
        descriptor: ProviderDescriptor,
        http_client: HTTPClient,
        access_token: str,
        consent_id: str | None = None,
        client_id: str | None = None,
        account_paths: tuple[str, ...] = ACCOUNT_CANDIDATE_PATHS,
    ) -> None:
        self.descriptor = descriptor
        self.consent_id = consent_id
        self.client_id = client_id
        self._http_client = http_client.for_provider(descriptor.id)
        self._access_token = access_token
        self._account_paths = account_paths
        self._mapper = BankPayloadMapper(provider_id=descriptor.id)
        self._logger = structlog.get_logger("standard_adapter").bind(provider_id=descriptor.id)

    @property
    def provider_id(self) -> str:
        return self.descriptor.id

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"{BEARER_PREFIX}{self._access_token}",
            "Accept": "application/json",
        }
        if self.descriptor.requesting_bank_id:
            headers[HEADER_REQUESTING_BANK] = self.descriptor.requesting_bank_id
        if self.consent_id:
            headers[HEADER_CONSENT_ID] = self.consent_id
        return headers

    def _url(self, path: str) -> str:
        return f"{self.descriptor.base_url}{path}"

    async def list_accounts(self) -> Result[list[ProviderAccountData], ProviderError]:
        """List accounts, probing candidate paths in order.

        Returns:
            Success(accounts) from the first path answering 2xx.
            Failure(ProviderForbiddenError) with consent_required=True on 403.
            Failure(ProviderResourceNotFoundError) when every path is 404.
            Failure(ProviderError) for any other error.
        """
        params = {"client_id": self.client_id} if self.client_id else None

        for path in self._account_paths:
            self._logger.debug("accounts_path_attempt", path=path)
            result = await self._http_client.execute_and_decode(
                "GET",
                self._url(path),
                AccountsEnvelope,
                headers=self._headers(),
                params=params,
                operation="list_accounts",
            )
            match result:
                case Success(value=envelope):
                    accounts = self._mapper.map_accounts(envelope.accounts)
                    self._logger.info("accounts_fetched", path=path, count=len(accounts))
                    return Success(value=accounts)
                case Failure(error=ProviderForbiddenError() as error):
                    self._logger.warning(
                        "accounts_consent_required",
                        path=path,
                        has_consent=self.consent_id is not None,
                    )
                    return Failure(error=replace(error, consent_required=True))
                case Failure(error=error) if error.code == ErrorCode.PROVIDER_RESOURCE_NOT_FOUND:
                    self._logger.debug("accounts_path_not_found", path=path)
                    continue
                case Failure():
                    return result

        return Failure(
            error=ProviderResourceNotFoundError(
                code=ErrorCode.PROVIDER_RESOURCE_NOT_FOUND,
                message=f"No account listing route found for {self.provider_id}",
                provider_name=self.provider_id,
                status_code=404,
                details={"attempted_paths": list(self._account_paths)},
            )
        )

    async def get_balance(self, account_id: str) -> Result[BalanceData, ProviderError]:
        result = await self._http_client.execute_and_decode(
            "GET",
            self._url(f"/api/v1/accounts/{account_id}/balances"),
            BalancePayload,
            headers=self._headers(),
            operation="get_balance",
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
        """Fetch the first page of transactions booked in [from_date, to_date]."""
        params = {
            "from_booking_date_time": format_booking_time(from_date),
            "to_booking_date_time": format_booking_time(to_date),
            "limit": str(limit),
            "page": "1",
        }
        result = await self._http_client.execute_and_decode(
            "GET",
            self._url(f"/api/v1/accounts/{account_id}/transactions"),
            TransactionsEnvelope,
            headers=self._headers(),
            params=params,
            operation="list_transactions",
        )
        if isinstance(result, Failure):
            return result
        transactions = self._mapper.map_transactions(result.value.transactions, account_id)
        self._logger.info("transactions_fetched", account_id=account_id, count=len(transactions))
        return Success(value=transactions)

    async def get_card_info(self, card_id: str) -> Result[CardData, ProviderError]:
        result = await self._http_client.execute_and_decode(
            "GET",
            self._url(f"/cards/{card_id}"),
            CardPayload,
            headers=self._headers(),
            operation="get_card_info",
        )
        if isinstance(result, Failure):
            return result
        return Success(value=self._mapper.map_card(result.value))

    async def check_connection(self) -> bool:
        return isinstance(await self.list_accounts(), Success)
