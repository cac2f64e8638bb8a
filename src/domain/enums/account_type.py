"""Account type enumeration."""

from enum import Enum


class AccountType(str, Enum):
    """Account classification normalized across providers."""

    CURRENT = "current"
    """Current (checking) account for everyday banking."""

    SAVINGS = "savings"
    """Savings account with interest."""

    DEPOSIT = "deposit"
    """Term deposit."""

    CREDIT = "credit"
    """Credit account or credit card account."""

    INVESTMENT = "investment"
    """Brokerage or investment account."""

    @classmethod
    def from_provider(cls, value: str | None) -> "AccountType":
        """Map a provider string onto a known type.

        Unknown or missing values fall back to CURRENT.

        Args:
            value: Raw provider type (case-insensitive).

        Returns:
            Matching AccountType.
        """
        normalized = (value or "").strip().lower()
        aliases = {"checking": cls.CURRENT, "card": cls.CREDIT}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return cls.CURRENT
