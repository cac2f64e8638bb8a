"""AccountRepository protocol (port).

Accounts are keyed by (provider_id, account_id); save() upserts on that key.

Implementations:
    - SQLAlchemy: src/infrastructure/persistence/repositories/account_repository.py
"""

from typing import Protocol

from src.domain.entities import Account


class AccountRepository(Protocol):
    """Port for Account persistence."""

    async def find_by_provider_account_id(
        self, provider_id: str, account_id: str
    ) -> Account | None:
        """Find an account by its provider-scoped key."""
        ...

    async def find_by_provider(self, provider_id: str) -> list[Account]:
        """Find every account of one provider."""
        ...

    async def find_all(self, currency: str | None = None) -> list[Account]:
        """Find all accounts, optionally filtered by currency."""
        ...

    async def save(self, account: Account) -> None:
        """Upsert an account keyed by (provider_id, account_id) (atomic)."""
        ...
