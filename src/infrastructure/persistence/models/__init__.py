"""SQLAlchemy models. Importing this package registers every table."""

from src.infrastructure.persistence.models.account import AccountModel
from src.infrastructure.persistence.models.budget import BudgetCategoryModel, BudgetModel
from src.infrastructure.persistence.models.connected_provider import ConnectedProviderModel
from src.infrastructure.persistence.models.transaction import TransactionModel

__all__ = [
    "AccountModel",
    "BudgetCategoryModel",
    "BudgetModel",
    "ConnectedProviderModel",
    "TransactionModel",
]
