"""Consent status enumeration."""

from enum import Enum


class ConsentStatus(str, Enum):
    """State of a data-sharing consent at the provider."""

    APPROVED = "approved"
    """Consent granted; data calls may carry the consent id."""

    PENDING = "pending"
    """Awaiting approval by the account holder."""

    REJECTED = "rejected"
    """Account holder or provider declined."""

    REVOKED = "revoked"
    """Previously granted consent was withdrawn."""

    @classmethod
    def from_provider(cls, value: str | None) -> "ConsentStatus":
        """Map a provider status string (default PENDING).

        Open Banking providers also report "Authorised" / "AwaitingAuthorisation".

        Args:
            value: Raw provider status.

        Returns:
            Matching ConsentStatus.
        """
        normalized = (value or "").strip().lower()
        aliases = {
            "authorised": cls.APPROVED,
            "authorized": cls.APPROVED,
            "awaitingauthorisation": cls.PENDING,
        }
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return cls.PENDING
