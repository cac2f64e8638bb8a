"""Account consent negotiation.

Providers disagree on the consent creation route, so creation probes an
ordered list of candidate paths. A 404 means "wrong route, try the next
one"; any other failure ends the negotiation. Status and revocation use one
fixed route because they run only once a consent id is known.
"""

import structlog

from src.core.constants import (
    BEARER_PREFIX,
    CONSENT_CANDIDATE_PATHS,
    CONSENT_DETAIL_PATH,
    CONSENT_PERMISSIONS,
    CONSENT_REASON,
    HEADER_REQUESTING_BANK,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import ConsentError, ProviderError
from src.domain.value_objects import Consent, ConsentDetails
from src.infrastructure.consent.schemas import (
    ConsentRequest,
    ConsentResponse,
    ConsentStatusResponse,
)
from src.infrastructure.http import HTTPClient


class ConsentGateway:
    """Creates, inspects and revokes account consents.

    Example:
        >>> gateway = ConsentGateway(http_client=HTTPClient())
        >>> result = await gateway.create_account_consent(
        ...     access_token="abc",
        ...     client_id="team042",
        ...     requesting_bank_id="team042",
        ...     base_url="https://vbank.example",
        ... )
    """

    def __init__(
        self,
        *,
        http_client: HTTPClient,
        candidate_paths: tuple[str, ...] = CONSENT_CANDIDATE_PATHS,
    ) -> None:
        """Initialize consent gateway.

        Args:
            http_client: Client used for consent calls.
            candidate_paths: Creation routes, probed in order.
        """
        self._http_client = http_client
        self._candidate_paths = candidate_paths
        self._logger = structlog.get_logger("consent_gateway")

    async def create_account_consent(
        self,
        *,
        access_token: str,
        client_id: str,
        requesting_bank_id: str,
        base_url: str,
        requesting_bank_name: str | None = None,
        provider_id: str = "provider",
    ) -> Result[Consent, ProviderError]:
        """Request a consent for reading accounts, balances and transactions.

        Args:
            access_token: Bearer token for the provider.
            client_id: Registered OAuth client id.
            requesting_bank_id: Requesting-party identifier.
            base_url: Provider API base URL.
            requesting_bank_name: Requesting-party display name.
            provider_id: Provider identifier for logging and errors.

        Returns:
            Success(Consent) from the first candidate answering 2xx.
            Failure(ProviderError) for the first non-404 failure.
            Failure(ConsentError) with CONSENT_NEGOTIATION_EXHAUSTED when
            every candidate answered 404.
        """
        client = self._http_client.for_provider(provider_id)
        body = ConsentRequest(
            client_id=client_id,
            permissions=list(CONSENT_PERMISSIONS),
            reason=CONSENT_REASON,
            requesting_bank=requesting_bank_id,
            requesting_bank_name=requesting_bank_name,
        )
        headers = {
            "Authorization": f"{BEARER_PREFIX}{access_token}",
            HEADER_REQUESTING_BANK: requesting_bank_id,
            "Accept": "application/json",
        }
        base = base_url.rstrip("/")

        attempted: list[str] = []
        for path in self._candidate_paths:
            attempted.append(path)
            self._logger.info(
                "consent_creation_attempt",
                provider_id=provider_id,
                path=path,
                client_id=client_id,
            )
            result = await client.execute_and_decode(
                "POST",
                f"{base}{path}",
                ConsentResponse,
                headers=headers,
                json_body=body.model_dump(),
                operation="create_consent",
            )
            match result:
                case Success(value=response):
                    consent = response.to_consent()
                    self._logger.info(
                        "consent_created",
                        provider_id=provider_id,
                        path=path,
                        consent_id=consent.consent_id,
                        status=consent.status.value,
                    )
                    return Success(value=consent)
                case Failure(error=error) if error.code == ErrorCode.PROVIDER_RESOURCE_NOT_FOUND:
                    self._logger.info(
                        "consent_path_not_found",
                        provider_id=provider_id,
                        path=path,
                    )
                    continue
                case Failure(error=error):
                    self._logger.warning(
                        "consent_creation_failed",
                        provider_id=provider_id,
                        path=path,
                        error_code=error.code.value,
                        status_code=error.status_code,
                    )
                    return result

        self._logger.warning(
            "consent_negotiation_exhausted",
            provider_id=provider_id,
            attempted_paths=attempted,
        )
        return Failure(
            error=ConsentError(
                code=ErrorCode.CONSENT_NEGOTIATION_EXHAUSTED,
                message=f"No consent route found for {provider_id}",
                provider_name=provider_id,
                status_code=404,
                attempted_paths=tuple(attempted),
            )
        )

    async def get_consent_status(
        self,
        *,
        consent_id: str,
        base_url: str,
        access_token: str | None = None,
        provider_id: str = "provider",
    ) -> Result[ConsentDetails, ProviderError]:
        """Fetch the current status of a known consent."""
        url = f"{base_url.rstrip('/')}{CONSENT_DETAIL_PATH.format(consent_id=consent_id)}"
        result = await self._http_client.for_provider(provider_id).execute_and_decode(
            "GET",
            url,
            ConsentStatusResponse,
            headers=self._detail_headers(access_token),
            operation="get_consent_status",
        )
        if isinstance(result, Failure):
            return result
        return Success(value=result.value.to_details())

    async def revoke_consent(
        self,
        *,
        consent_id: str,
        base_url: str,
        access_token: str | None = None,
        provider_id: str = "provider",
    ) -> Result[None, ProviderError]:
        """Revoke a consent. Any 2xx response counts as revoked."""
        url = f"{base_url.rstrip('/')}{CONSENT_DETAIL_PATH.format(consent_id=consent_id)}"
        result = await self._http_client.for_provider(provider_id).execute(
            "DELETE",
            url,
            headers=self._detail_headers(access_token),
            operation="revoke_consent",
        )
        if isinstance(result, Failure):
            self._logger.warning(
                "consent_revoke_failed",
                provider_id=provider_id,
                consent_id=consent_id,
                error_code=result.error.code.value,
            )
            return result
        self._logger.info("consent_revoked", provider_id=provider_id, consent_id=consent_id)
        return Success(value=None)

    @staticmethod
    def _detail_headers(access_token: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"{BEARER_PREFIX}{access_token}"
        return headers
