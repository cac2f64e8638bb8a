"""SQLAlchemy repository implementations of the domain ports."""

from src.infrastructure.persistence.repositories.account_repository import AccountRepository
from src.infrastructure.persistence.repositories.budget_repository import BudgetRepository
from src.infrastructure.persistence.repositories.connected_provider_repository import (
    ConnectedProviderRepository,
)
from src.infrastructure.persistence.repositories.transaction_repository import (
    TransactionRepository,
)

__all__ = [
    "AccountRepository",
    "BudgetRepository",
    "ConnectedProviderRepository",
    "TransactionRepository",
]
