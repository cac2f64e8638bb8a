"""Domain enums for business logic.

All domain enums live in src/domain/enums/ and are re-exported here.
"""

from src.domain.enums.account_status import AccountStatus
from src.domain.enums.account_type import AccountType
from src.domain.enums.budget_period import BudgetPeriod
from src.domain.enums.card_enums import CardStatus, CardType
from src.domain.enums.consent_status import ConsentStatus
from src.domain.enums.forecast_enums import (
    ForecastDirection,
    ForecastMethod,
    ForecastPeriod,
)
from src.domain.enums.transaction_category import TransactionCategory
from src.domain.enums.transaction_status import TransactionStatus
from src.domain.enums.transaction_type import TransactionType

__all__ = [
    "AccountStatus",
    "AccountType",
    "BudgetPeriod",
    "CardStatus",
    "CardType",
    "ConsentStatus",
    "ForecastDirection",
    "ForecastMethod",
    "ForecastPeriod",
    "TransactionCategory",
    "TransactionStatus",
    "TransactionType",
]
