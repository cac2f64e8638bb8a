"""Bank adapter factory.

Selects the adapter variant from the descriptor's gateway flag. Holds only
the shared HTTP client and signer; every call returns a fresh adapter.
"""

from src.domain.protocols import BankAdapterProtocol
from src.domain.value_objects import ProviderDescriptor
from src.infrastructure.adapters.gateway_adapter import GatewayAdapter
from src.infrastructure.adapters.request_signer import RequestSigner
from src.infrastructure.adapters.standard_adapter import StandardAdapter
from src.infrastructure.http import HTTPClient


class AdapterFactory:
    """Creates bank adapters.

    Example:
        >>> factory = AdapterFactory(http_client=HTTPClient())
        >>> adapter = factory.create(descriptor, access_token="abc", consent_id="c-1")
        >>> result = await adapter.list_accounts()
    """

    def __init__(self, *, http_client: HTTPClient, signer: RequestSigner | None = None) -> None:
        self._http_client = http_client
        self._signer = signer or RequestSigner()

    def create(
        self,
        descriptor: ProviderDescriptor,
        *,
        access_token: str,
        consent_id: str | None = None,
        client_id: str | None = None,
    ) -> BankAdapterProtocol:
        """Build the adapter for a provider.

        Args:
            descriptor: Provider descriptor.
            access_token: Valid access token.
            consent_id: Consent id (standard variant only).
            client_id: Client id for account listing (standard variant only).

        Returns:
            GatewayAdapter for gateway providers, StandardAdapter otherwise.
        """
        if descriptor.is_gateway:
            return GatewayAdapter(
                descriptor=descriptor,
                http_client=self._http_client,
                access_token=access_token,
                signer=self._signer,
            )
        return StandardAdapter(
            descriptor=descriptor,
            http_client=self._http_client,
            access_token=access_token,
            consent_id=consent_id,
            client_id=client_id,
        )
