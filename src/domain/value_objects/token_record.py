"""Token record value object.

One record per provider, owned by the token store. Expiry is absolute;
a record without expiry never expires.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from src.core.constants import TOKEN_NEAR_EXPIRY_SECONDS


@dataclass(frozen=True, kw_only=True)
class TokenRecord:
    """Stored OAuth tokens for one provider.

    Attributes:
        access_token: Bearer token for API calls.
        refresh_token: Token used to obtain a new access token.
        id_token: OpenID identity token, when issued.
        token_type: Token type, typically "Bearer".
        expires_at: Absolute expiry (None = never expires).
        scope: Granted scope.
    """

    access_token: str
    refresh_token: str | None = None
    id_token: str | None = None
    token_type: str = "Bearer"
    expires_at: datetime | None = None
    scope: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the expiry instant has passed (False without expiry)."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(UTC))

    def near_expiry(self, now: datetime | None = None) -> bool:
        """Whether the token expires within the near-expiry window."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(UTC)
        return self.expires_at - now <= timedelta(seconds=TOKEN_NEAR_EXPIRY_SECONDS)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for durable secret storage."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "id_token": self.id_token,
            "token_type": self.token_type,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "scope": self.scope,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenRecord":
        """Rebuild a record serialized by to_dict().

        Raises:
            KeyError: If access_token is missing.
            ValueError: If expires_at is not ISO-8601.
        """
        expires_at = data.get("expires_at")
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            id_token=data.get("id_token"),
            token_type=data.get("token_type") or "Bearer",
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            scope=data.get("scope"),
        )
