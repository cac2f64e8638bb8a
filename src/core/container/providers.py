"""Provider descriptor factory (configuration-driven).

Builds immutable ProviderDescriptors from Settings.providers and wraps them
in a ProviderRegistry.

Defaults applied per entry:
    - authorization endpoint: {base_url}/oauth/authorize
    - token endpoint: {base_url}/oauth/token, or the well-known gateway
      token URL for gateway providers
    - gateway providers without a base_url override use gateway_api_base_url
    - scopes: oauth_default_scopes

Client secret resolution order: configuration entry, secret storage
(key "{provider_id}_client_secret"), environment variable
({PROVIDER_ID}_CLIENT_SECRET).
"""

from typing import TYPE_CHECKING

from src.core.config import ProviderConfig, Settings, get_settings
from src.core.constants import CLIENT_SECRET_KEY
from src.core.result import Success
from src.domain.value_objects import OAuthConfig, ProviderDescriptor

if TYPE_CHECKING:
    from src.application.services import ProviderRegistry
    from src.domain.protocols import SecretStorageProtocol


def resolve_client_secret(
    config: ProviderConfig,
    secret_storage: "SecretStorageProtocol | None" = None,
) -> str | None:
    """Find the client secret of one provider entry."""
    from src.infrastructure.secrets import EnvSecretStore

    if config.client_secret:
        return config.client_secret

    key = CLIENT_SECRET_KEY.format(provider_id=config.id)
    stores = [secret_storage] if secret_storage is not None else []
    stores.append(EnvSecretStore())
    for store in stores:
        result = store.get(key)
        if isinstance(result, Success) and result.value:
            return result.value.decode("utf-8")
    return None


def build_provider_descriptor(
    config: ProviderConfig,
    settings: Settings | None = None,
    secret_storage: "SecretStorageProtocol | None" = None,
) -> ProviderDescriptor:
    """Convert one configuration entry into a descriptor.

    Raises:
        ValueError: If the resulting URLs are not absolute.
    """
    settings = settings or get_settings()
    base_url = config.base_url.rstrip("/")
    if config.is_gateway and not base_url:
        base_url = settings.gateway_api_base_url

    default_token_endpoint = (
        settings.gateway_token_url if config.is_gateway else f"{base_url}/oauth/token"
    )

    return ProviderDescriptor(
        id=config.id,
        display_name=config.display_name,
        base_url=base_url,
        oauth=OAuthConfig(
            authorization_endpoint=config.authorization_endpoint
            or f"{base_url}/oauth/authorize",
            token_endpoint=config.token_endpoint or default_token_endpoint,
            client_id=config.client_id,
            client_secret=resolve_client_secret(config, secret_storage),
            scopes=tuple(config.scopes or settings.oauth_default_scopes),
            redirect_uri=settings.oauth_redirect_uri,
        ),
        is_gateway=config.is_gateway,
        requesting_bank_id=config.requesting_bank_id,
        requesting_bank_name=config.requesting_bank_name,
    )


def get_provider_registry(
    settings: Settings | None = None,
    secret_storage: "SecretStorageProtocol | None" = None,
) -> "ProviderRegistry":
    """Return a registry of every configured provider.

    Raises:
        ValueError: If an entry is invalid or two entries share an id.
    """
    from src.application.services import ProviderRegistry

    settings = settings or get_settings()
    return ProviderRegistry(
        build_provider_descriptor(config, settings, secret_storage)
        for config in settings.providers
    )
