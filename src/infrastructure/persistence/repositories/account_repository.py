"""AccountRepository - SQLAlchemy implementation of AccountRepository protocol.

Adapter for hexagonal architecture. Maps between domain Account entities
and AccountModel rows. Upserts on (provider_id, account_id).
"""

from sqlalchemy import select

from src.domain.entities import Account
from src.domain.enums import AccountStatus, AccountType
from src.infrastructure.persistence.base import as_utc
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import AccountModel


class AccountRepository:
    """SQLAlchemy implementation of AccountRepository protocol.

    This class does NOT inherit from the protocol (Protocol uses structural typing).

    Example:
        >>> repo = AccountRepository(database)
        >>> accounts = await repo.find_all(currency="RUB")
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def find_by_provider_account_id(
        self, provider_id: str, account_id: str
    ) -> Account | None:
        """Find account by its provider-scoped key.

        Args:
            provider_id: Owning provider identifier.
            account_id: Provider's account identifier.

        Returns:
            Account if found, None otherwise.
        """
        async with self._database.get_session() as session:
            stmt = select(AccountModel).where(
                AccountModel.provider_id == provider_id,
                AccountModel.account_id == account_id,
            )
            model = (await session.execute(stmt)).scalar_one_or_none()
            return self._to_domain(model) if model else None

    async def find_by_provider(self, provider_id: str) -> list[Account]:
        async with self._database.get_session() as session:
            stmt = (
                select(AccountModel)
                .where(AccountModel.provider_id == provider_id)
                .order_by(AccountModel.account_id)
            )
            models = (await session.execute(stmt)).scalars().all()
            return [self._to_domain(model) for model in models]

    async def find_all(self, currency: str | None = None) -> list[Account]:
        async with self._database.get_session() as session:
            stmt = select(AccountModel).order_by(AccountModel.provider_id, AccountModel.account_id)
            if currency is not None:
                stmt = stmt.where(AccountModel.currency == currency.upper())
            models = (await session.execute(stmt)).scalars().all()
            return [self._to_domain(model) for model in models]

    async def save(self, account: Account) -> None:
        """Create or update account keyed by (provider_id, account_id).

        An existing row keeps its id; provider-owned fields are overwritten.
        """
        async with self._database.get_session() as session:
            stmt = select(AccountModel).where(
                AccountModel.provider_id == account.provider_id,
                AccountModel.account_id == account.account_id,
            )
            existing = (await session.execute(stmt)).scalar_one_or_none()
            if existing is None:
                session.add(self._to_model(account))
            else:
                self._update_model(existing, account)

    # =========================================================================
    # Entity ↔ Model Mapping
    # =========================================================================

    def _to_domain(self, model: AccountModel) -> Account:
        return Account(
            id=model.id,
            provider_id=model.provider_id,
            account_id=model.account_id,
            account_number=model.account_number,
            account_type=AccountType(model.account_type),
            currency=model.currency,
            balance=model.balance,
            name=model.name,
            available_balance=model.available_balance,
            status=AccountStatus(model.status),
            opened_date=model.opened_date,
            last_synced_at=as_utc(model.last_synced_at),
        )

    def _to_model(self, entity: Account) -> AccountModel:
        return AccountModel(
            id=entity.id,
            provider_id=entity.provider_id,
            account_id=entity.account_id,
            account_number=entity.account_number,
            account_type=entity.account_type.value,
            currency=entity.currency,
            balance=entity.balance,
            available_balance=entity.available_balance,
            status=entity.status.value,
            name=entity.name,
            opened_date=entity.opened_date,
            last_synced_at=entity.last_synced_at,
        )

    def _update_model(self, model: AccountModel, entity: Account) -> None:
        model.account_number = entity.account_number
        model.account_type = entity.account_type.value
        model.currency = entity.currency
        model.balance = entity.balance
        model.available_balance = entity.available_balance
        model.status = entity.status.value
        model.name = entity.name
        model.opened_date = entity.opened_date
        model.last_synced_at = entity.last_synced_at
