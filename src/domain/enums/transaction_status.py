"""Transaction status enumeration."""

from enum import Enum


class TransactionStatus(str, Enum):
    """Transaction lifecycle status.

    **Lifecycle Flow**:
        PENDING → COMPLETED (normal flow)
        PENDING → FAILED (processing error)
        PENDING → CANCELLED (voided by provider)

    Only COMPLETED transactions feed forecasts.
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def from_provider(cls, value: str | None) -> "TransactionStatus":
        """Map a provider string onto a known status.

        Providers use "booked" for settled transactions; missing values are
        treated as COMPLETED.

        Args:
            value: Raw provider status (case-insensitive).

        Returns:
            Matching TransactionStatus.
        """
        normalized = (value or "completed").strip().lower()
        aliases = {"booked": cls.COMPLETED, "settled": cls.COMPLETED}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return cls.PENDING
