"""Card type and status enumerations."""

from enum import Enum


class CardType(str, Enum):
    """Payment card type."""

    DEBIT = "debit"
    CREDIT = "credit"
    PREPAID = "prepaid"


class CardStatus(str, Enum):
    """Payment card status."""

    ACTIVE = "active"
    BLOCKED = "blocked"
    EXPIRED = "expired"
    PENDING = "pending"
