"""ConnectedProviderRepository - SQLAlchemy implementation.

Adapter for hexagonal architecture. Maps between domain ConnectedProvider
entities and ConnectedProviderModel rows.
"""

from sqlalchemy import select

from src.domain.entities import ConnectedProvider
from src.domain.enums import ConsentStatus
from src.infrastructure.persistence.base import as_utc
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import ConnectedProviderModel


class ConnectedProviderRepository:
    """SQLAlchemy implementation of the ConnectedProviderRepository protocol.

    Each call runs in its own session and commits before returning.

    Example:
        >>> repo = ConnectedProviderRepository(database)
        >>> provider = await repo.find_by_provider_id("vbank")
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def find_by_provider_id(self, provider_id: str) -> ConnectedProvider | None:
        async with self._database.get_session() as session:
            stmt = select(ConnectedProviderModel).where(
                ConnectedProviderModel.provider_id == provider_id
            )
            model = (await session.execute(stmt)).scalar_one_or_none()
            return self._to_domain(model) if model else None

    async def find_all_active(self) -> list[ConnectedProvider]:
        async with self._database.get_session() as session:
            stmt = (
                select(ConnectedProviderModel)
                .where(ConnectedProviderModel.is_active == True)  # noqa: E712
                .order_by(ConnectedProviderModel.connected_at)
            )
            models = (await session.execute(stmt)).scalars().all()
            return [self._to_domain(model) for model in models]

    async def save(self, provider: ConnectedProvider) -> None:
        """Create or update by provider_id."""
        async with self._database.get_session() as session:
            stmt = select(ConnectedProviderModel).where(
                ConnectedProviderModel.provider_id == provider.provider_id
            )
            existing = (await session.execute(stmt)).scalar_one_or_none()
            if existing is None:
                session.add(self._to_model(provider))
            else:
                self._update_model(existing, provider)

    # =========================================================================
    # Entity ↔ Model Mapping
    # =========================================================================

    def _to_domain(self, model: ConnectedProviderModel) -> ConnectedProvider:
        return ConnectedProvider(
            id=model.id,
            provider_id=model.provider_id,
            display_name=model.display_name,
            base_url=model.base_url,
            client_id=model.client_id,
            consent_id=model.consent_id,
            consent_status=ConsentStatus(model.consent_status) if model.consent_status else None,
            requesting_bank_id=model.requesting_bank_id,
            is_gateway=model.is_gateway,
            connected_at=as_utc(model.connected_at),
            is_active=model.is_active,
            last_sync_at=as_utc(model.last_sync_at),
        )

    def _to_model(self, entity: ConnectedProvider) -> ConnectedProviderModel:
        return ConnectedProviderModel(
            id=entity.id,
            provider_id=entity.provider_id,
            display_name=entity.display_name,
            base_url=entity.base_url,
            client_id=entity.client_id,
            consent_id=entity.consent_id,
            consent_status=entity.consent_status.value if entity.consent_status else None,
            requesting_bank_id=entity.requesting_bank_id,
            is_gateway=entity.is_gateway,
            connected_at=entity.connected_at,
            is_active=entity.is_active,
            last_sync_at=entity.last_sync_at,
        )

    def _update_model(self, model: ConnectedProviderModel, entity: ConnectedProvider) -> None:
        """Update mutable fields (id, provider_id and connected_at are kept)."""
        model.display_name = entity.display_name
        model.base_url = entity.base_url
        model.client_id = entity.client_id
        model.consent_id = entity.consent_id
        model.consent_status = entity.consent_status.value if entity.consent_status else None
        model.requesting_bank_id = entity.requesting_bank_id
        model.is_gateway = entity.is_gateway
        model.is_active = entity.is_active
        model.last_sync_at = entity.last_sync_at
