"""Account status enumeration."""

from enum import Enum


class AccountStatus(str, Enum):
    """Account lifecycle status as reported by the provider."""

    ACTIVE = "active"
    BLOCKED = "blocked"
    CLOSED = "closed"
    PENDING = "pending"

    @classmethod
    def from_provider(cls, value: str | None) -> "AccountStatus":
        """Map a provider string onto a known status (default ACTIVE).

        Args:
            value: Raw provider status (case-insensitive).

        Returns:
            Matching AccountStatus.
        """
        try:
            return cls((value or "active").strip().lower())
        except ValueError:
            return cls.ACTIVE
