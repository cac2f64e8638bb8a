"""Infrastructure dependency factories.

Builders for core infrastructure services:
- Logging (structlog console/JSON)
- HTTP client (retry/backoff, optional mutual TLS)
- Secret storage (AES-256-GCM, namespaced)
- Token store, OAuth gateway, consent gateway, adapter factory
- Database (SQLAlchemy async)

Every factory builds a new instance from Settings. Callers that need a
shared instance (one TokenStore behind both OAuthGateway and the
orchestrator) build it once and pass it along.
"""

import secrets
import ssl
from typing import TYPE_CHECKING

from src.core.config import Settings, get_settings
from src.core.result import Failure

if TYPE_CHECKING:
    from src.domain.protocols import LoggerProtocol, SecretStorageProtocol
    from src.infrastructure.adapters import AdapterFactory
    from src.infrastructure.auth import OAuthGateway, TokenStore
    from src.infrastructure.consent import ConsentGateway
    from src.infrastructure.http import HTTPClient
    from src.infrastructure.persistence import Database


def get_logger(settings: Settings | None = None) -> "LoggerProtocol":
    """Return a logger configured from settings.

    Renderer selection:
    - log_format=json: JSON lines (log shipping)
    - log_format=console: human-readable
    """
    from src.infrastructure.logging import ConsoleAdapter

    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level
    return ConsoleAdapter(
        name=settings.app_name,
        level=level,
        use_json=settings.log_format == "json",
    )


def build_ssl_context(settings: Settings | None = None) -> ssl.SSLContext | bool:
    """TLS verification for provider calls.

    Returns True (default verification) unless a CA bundle or client
    certificate is configured, in which case an SSLContext is built.
    """
    settings = settings or get_settings()
    if not (settings.tls_ca_file or settings.tls_client_cert_file):
        return True

    context = ssl.create_default_context(cafile=settings.tls_ca_file)
    if settings.tls_client_cert_file:
        context.load_cert_chain(
            certfile=settings.tls_client_cert_file,
            keyfile=settings.tls_client_key_file,
        )
    return context


def get_http_client(settings: Settings | None = None) -> "HTTPClient":
    """Return an HTTP client configured from settings."""
    from src.infrastructure.http import HTTPClient

    settings = settings or get_settings()
    return HTTPClient(
        timeout=settings.http_timeout_seconds,
        max_retry_attempts=settings.http_max_retry_attempts,
        retry_base_delay=settings.http_retry_base_delay_seconds,
        verify=build_ssl_context(settings),
    )


def get_secret_storage(settings: Settings | None = None) -> "SecretStorageProtocol":
    """Return the encrypted, namespaced secret store.

    Uses settings.encryption_key when set. Without a key an ephemeral one is
    generated, so stored secrets only live as long as the process.

    Raises:
        RuntimeError: If the configured key has the wrong length.
    """
    from src.core.constants import AES_KEY_LENGTH
    from src.infrastructure.secrets import EncryptedSecretStore, EncryptionService

    settings = settings or get_settings()
    key = (
        settings.encryption_key.encode("utf-8")
        if settings.encryption_key
        else secrets.token_bytes(AES_KEY_LENGTH)
    )

    result = EncryptionService.create(key)
    if isinstance(result, Failure):
        raise RuntimeError(f"Invalid encryption key: {result.error.message}")

    return EncryptedSecretStore(encryption=result.value, namespace=settings.app_name)


def get_token_store(secret_storage: "SecretStorageProtocol") -> "TokenStore":
    """Return a token store over the given secret storage."""
    from src.infrastructure.auth import TokenStore

    return TokenStore(secret_storage=secret_storage)


def get_oauth_gateway(
    http_client: "HTTPClient", token_store: "TokenStore"
) -> "OAuthGateway":
    """Return an OAuth gateway writing into token_store."""
    from src.infrastructure.auth import OAuthGateway

    return OAuthGateway(http_client=http_client, token_store=token_store)


def get_consent_gateway(http_client: "HTTPClient") -> "ConsentGateway":
    """Return a consent gateway."""
    from src.infrastructure.consent import ConsentGateway

    return ConsentGateway(http_client=http_client)


def get_adapter_factory(http_client: "HTTPClient") -> "AdapterFactory":
    """Return an adapter factory with the default request signer."""
    from src.infrastructure.adapters import AdapterFactory

    return AdapterFactory(http_client=http_client)


def get_database(settings: Settings | None = None) -> "Database":
    """Return a database configured from settings.

    Call create_all() once before first use and close() on shutdown.
    """
    from src.infrastructure.persistence import Database

    settings = settings or get_settings()
    return Database(database_url=settings.database_url, echo=settings.db_echo)
