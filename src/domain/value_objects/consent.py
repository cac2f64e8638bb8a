"""Consent value objects returned by consent negotiation."""

from dataclasses import dataclass, field
from datetime import datetime

from src.domain.enums import ConsentStatus


@dataclass(frozen=True, kw_only=True)
class Consent:
    """Result of a consent creation request.

    Only consent_id and status are persisted (onto ConnectedProvider).

    Attributes:
        consent_id: Provider-issued consent identifier.
        status: Current consent status.
        message: Optional provider message.
        request_id: Provider request identifier, when returned.
        auto_approved: Whether the provider approved without user action.
    """

    consent_id: str
    status: ConsentStatus
    message: str | None = None
    request_id: str | None = None
    auto_approved: bool = False

    @property
    def is_approved(self) -> bool:
        """Whether data calls may use this consent."""
        return self.status == ConsentStatus.APPROVED


@dataclass(frozen=True, kw_only=True)
class ConsentDetails:
    """Consent status as reported by the fixed detail endpoint."""

    consent_id: str
    status: ConsentStatus
    permissions: tuple[str, ...] = field(default_factory=tuple)
    created_at: datetime | None = None
    status_updated_at: datetime | None = None
    expires_at: datetime | None = None
