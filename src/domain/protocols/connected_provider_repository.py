"""ConnectedProviderRepository protocol (port).

Implementations:
    - SQLAlchemy: src/infrastructure/persistence/repositories/connected_provider_repository.py
"""

from typing import Protocol

from src.domain.entities import ConnectedProvider


class ConnectedProviderRepository(Protocol):
    """Port for ConnectedProvider persistence."""

    async def find_by_provider_id(self, provider_id: str) -> ConnectedProvider | None:
        """Find a connected provider by provider identifier.

        Inactive providers are returned too (history linkage).
        """
        ...

    async def find_all_active(self) -> list[ConnectedProvider]:
        """Find all providers whose active flag is set."""
        ...

    async def save(self, provider: ConnectedProvider) -> None:
        """Create or update a connected provider (atomic)."""
        ...
