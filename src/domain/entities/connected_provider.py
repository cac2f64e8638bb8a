"""ConnectedProvider domain entity.

Aggregate root of the sync model: accounts and transactions hang off a
connected provider. Providers are never hard-deleted; disconnecting clears
the active flag so historical analytics stay queryable.

Usage:
    from uuid_extensions import uuid7
    from src.domain.entities import ConnectedProvider

    provider = ConnectedProvider(
        id=uuid7(),
        provider_id="vbank",
        display_name="Virtual Bank",
        base_url="https://vbank.example",
        client_id="team042",
    )
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.domain.enums import ConsentStatus
from src.domain.value_objects import Consent


@dataclass
class ConnectedProvider:
    """A provider the user has connected.

    Attributes:
        id: Internal identifier.
        provider_id: Provider identifier (matches ProviderDescriptor.id).
        display_name: Human-readable name.
        base_url: API base URL.
        client_id: OAuth client identifier.
        consent_id: Granted consent identifier (None until obtained).
        consent_status: Status of the stored consent.
        requesting_bank_id: Requesting-party identifier.
        is_gateway: Whether the provider uses the gateway variant.
        connected_at: First successful connection.
        is_active: False once disconnected (soft delete).
        last_sync_at: Last successful account sync.
    """

    id: UUID
    provider_id: str
    display_name: str
    base_url: str
    client_id: str
    consent_id: str | None = None
    consent_status: ConsentStatus | None = None
    requesting_bank_id: str | None = None
    is_gateway: bool = False
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_active: bool = True
    last_sync_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate identifiers."""
        if not self.provider_id.strip():
            raise ValueError("provider_id cannot be empty")
        if not self.client_id.strip():
            raise ValueError("client_id cannot be empty")

    def attach_consent(self, consent: Consent) -> None:
        """Record a consent obtained from the provider."""
        self.consent_id = consent.consent_id
        self.consent_status = consent.status

    def clear_consent(self) -> None:
        """Forget the stored consent (after revocation)."""
        self.consent_id = None
        self.consent_status = None

    def deactivate(self) -> None:
        """Soft-delete the provider."""
        self.is_active = False

    def reactivate(self) -> None:
        """Reconnect a previously disconnected provider."""
        self.is_active = True

    def mark_synced(self, now: datetime | None = None) -> None:
        """Record a successful account sync."""
        self.last_sync_at = now or datetime.now(UTC)

    def is_fresh(self, window: timedelta, now: datetime | None = None) -> bool:
        """Whether the last successful sync is within the freshness window.

        Args:
            window: Freshness window length.
            now: Reference instant (defaults to current UTC time).

        Returns:
            True if a repeat sync can be skipped.
        """
        if self.last_sync_at is None:
            return False
        return (now or datetime.now(UTC)) - self.last_sync_at < window
