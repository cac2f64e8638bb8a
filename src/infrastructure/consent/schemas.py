"""Consent endpoint wire schemas (snake_case on the wire)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.domain.enums import ConsentStatus
from src.domain.value_objects import Consent, ConsentDetails


class ConsentRequest(BaseModel):
    """Body of a consent creation request."""

    client_id: str = Field(..., description="Registered OAuth client id")
    permissions: list[str] = Field(..., description="Requested permission scopes")
    reason: str | None = Field(None, description="Human-readable reason")
    requesting_bank: str = Field(..., description="Requesting-party identifier")
    requesting_bank_name: str | None = Field(None, description="Requesting-party name")


class ConsentResponse(BaseModel):
    """Consent creation response."""

    model_config = ConfigDict(extra="ignore")

    consent_id: str = Field(..., min_length=1)
    status: str | None = None
    message: str | None = None
    request_id: str | None = None
    created_at: str | None = None
    auto_approved: bool | None = None

    def to_consent(self) -> Consent:
        return Consent(
            consent_id=self.consent_id,
            status=ConsentStatus.from_provider(self.status),
            message=self.message,
            request_id=self.request_id,
            auto_approved=bool(self.auto_approved),
        )


class ConsentStatusResponse(BaseModel):
    """Consent detail response."""

    model_config = ConfigDict(extra="ignore")

    consent_id: str
    status: str | None = None
    creation_date_time: datetime | None = None
    status_update_date_time: datetime | None = None
    permissions: list[str] | None = None
    expiration_date_time: datetime | None = None

    def to_details(self) -> ConsentDetails:
        return ConsentDetails(
            consent_id=self.consent_id,
            status=ConsentStatus.from_provider(self.status),
            permissions=tuple(self.permissions or ()),
            created_at=self.creation_date_time,
            status_updated_at=self.status_update_date_time,
            expires_at=self.expiration_date_time,
        )
