"""Domain entities for business logic.

Pure business logic entities with no framework dependencies.
"""

from src.domain.entities.account import Account
from src.domain.entities.budget import Budget, BudgetCategory
from src.domain.entities.connected_provider import ConnectedProvider
from src.domain.entities.transaction import Transaction

__all__ = [
    "Account",
    "Budget",
    "BudgetCategory",
    "ConnectedProvider",
    "Transaction",
]
