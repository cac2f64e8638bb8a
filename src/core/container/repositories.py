"""Repository dependency factories.

Repositories are scoped to a Database, not to a session: each repository
call opens its own session and commits on success, so every upsert is
atomic on its own and concurrent provider syncs never share a session.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infrastructure.persistence import Database
    from src.infrastructure.persistence.repositories import (
        AccountRepository,
        BudgetRepository,
        ConnectedProviderRepository,
        TransactionRepository,
    )


def get_connected_provider_repository(database: "Database") -> "ConnectedProviderRepository":
    """Return the connected provider repository."""
    from src.infrastructure.persistence.repositories import ConnectedProviderRepository

    return ConnectedProviderRepository(database)


def get_account_repository(database: "Database") -> "AccountRepository":
    """Return the account repository."""
    from src.infrastructure.persistence.repositories import AccountRepository

    return AccountRepository(database)


def get_transaction_repository(database: "Database") -> "TransactionRepository":
    """Return the transaction repository."""
    from src.infrastructure.persistence.repositories import TransactionRepository

    return TransactionRepository(database)


def get_budget_repository(database: "Database") -> "BudgetRepository":
    """Return the budget repository."""
    from src.infrastructure.persistence.repositories import BudgetRepository

    return BudgetRepository(database)
