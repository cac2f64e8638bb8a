"""Provider descriptor value object.

Immutable description of one banking provider: where it lives, how to
authenticate against it, and which adapter variant speaks its protocol.
Descriptors are rebuilt from configuration at startup and never persisted.

Usage:
    descriptor = ProviderDescriptor(
        id="vbank",
        display_name="Virtual Bank",
        base_url="https://vbank.example",
        oauth=OAuthConfig(
            authorization_endpoint="https://vbank.example/oauth/authorize",
            token_endpoint="https://vbank.example/oauth/token",
            client_id="team042",
            redirect_uri="vtb:///oauth/callback",
        ),
    )
"""

from dataclasses import dataclass, field
from urllib.parse import urlparse


def is_absolute_http_url(value: str) -> bool:
    """Whether value is an absolute http(s) URL with a host."""
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True, kw_only=True)
class OAuthConfig:
    """OAuth client configuration for a provider.

    Attributes:
        authorization_endpoint: Interactive authorization URL.
        token_endpoint: Token exchange URL.
        client_id: Registered client identifier.
        client_secret: Client secret (None for public clients).
        scopes: Requested scopes.
        redirect_uri: Registered redirect URI.
    """

    authorization_endpoint: str
    token_endpoint: str
    client_id: str
    redirect_uri: str
    client_secret: str | None = None
    scopes: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, kw_only=True)
class ProviderDescriptor:
    """Immutable provider description.

    Attributes:
        id: Provider identifier (also the token store key).
        display_name: Human-readable name used in notifications.
        base_url: API base URL (no trailing slash).
        oauth: OAuth client configuration.
        is_gateway: True for the signed, client-credentials-only variant.
        requesting_bank_id: Requesting-party id (X-Requesting-Bank).
        requesting_bank_name: Requesting-party display name.

    Raises:
        ValueError: If base_url or token endpoint is not an absolute URL.
    """

    id: str
    display_name: str
    base_url: str
    oauth: OAuthConfig
    is_gateway: bool = False
    requesting_bank_id: str | None = None
    requesting_bank_name: str | None = None

    def __post_init__(self) -> None:
        """Validate identifiers and URLs."""
        if not self.id.strip():
            raise ValueError("Provider id cannot be empty")
        if not is_absolute_http_url(self.base_url):
            raise ValueError(f"Provider base_url must be an absolute URL: {self.base_url}")
        if not is_absolute_http_url(self.oauth.token_endpoint):
            raise ValueError(
                f"Provider token endpoint must be an absolute URL: {self.oauth.token_endpoint}"
            )
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
