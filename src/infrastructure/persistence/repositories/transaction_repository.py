"""TransactionRepository - SQLAlchemy implementation.

Insert-only. add() probes for the (provider_id, transaction_id) key before
inserting; the unique constraint catches a concurrent duplicate.
"""

from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from src.domain.entities import Transaction
from src.domain.enums import TransactionCategory, TransactionStatus, TransactionType
from src.infrastructure.persistence.base import as_utc
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import TransactionModel

logger = structlog.get_logger(__name__)


class TransactionRepository:
    """SQLAlchemy implementation of TransactionRepository protocol."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def find_by_transaction_id(
        self, provider_id: str, transaction_id: str
    ) -> Transaction | None:
        async with self._database.get_session() as session:
            stmt = select(TransactionModel).where(
                TransactionModel.provider_id == provider_id,
                TransactionModel.transaction_id == transaction_id,
            )
            model = (await session.execute(stmt)).scalar_one_or_none()
            return self._to_domain(model) if model else None

    async def add(self, transaction: Transaction) -> bool:
        """Insert a transaction unless its key already exists.

        Returns:
            True if inserted, False if it was a duplicate.
        """
        try:
            async with self._database.get_session() as session:
                stmt = select(TransactionModel.id).where(
                    TransactionModel.provider_id == transaction.provider_id,
                    TransactionModel.transaction_id == transaction.transaction_id,
                )
                if (await session.execute(stmt)).first() is not None:
                    return False
                session.add(self._to_model(transaction))
        except IntegrityError:
            logger.info(
                "transaction_duplicate_rejected",
                provider_id=transaction.provider_id,
                transaction_id=transaction.transaction_id,
            )
            return False
        return True

    async def find_by_date_range(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> list[Transaction]:
        async with self._database.get_session() as session:
            stmt = select(TransactionModel).order_by(TransactionModel.transaction_date)
            if start is not None:
                stmt = stmt.where(TransactionModel.transaction_date >= start)
            if end is not None:
                stmt = stmt.where(TransactionModel.transaction_date <= end)
            models = (await session.execute(stmt)).scalars().all()
            return [self._to_domain(model) for model in models]

    async def find_recent(
        self, from_date: datetime | None = None, limit: int | None = None
    ) -> list[Transaction]:
        async with self._database.get_session() as session:
            stmt = select(TransactionModel).order_by(TransactionModel.transaction_date.desc())
            if from_date is not None:
                stmt = stmt.where(TransactionModel.transaction_date >= from_date)
            if limit is not None:
                stmt = stmt.limit(limit)
            models = (await session.execute(stmt)).scalars().all()
            return [self._to_domain(model) for model in models]

    # =========================================================================
    # Entity ↔ Model Mapping
    # =========================================================================

    def _to_domain(self, model: TransactionModel) -> Transaction:
        return Transaction(
            id=model.id,
            provider_id=model.provider_id,
            account_id=model.account_id,
            transaction_id=model.transaction_id,
            amount=model.amount,
            currency=model.currency,
            transaction_date=as_utc(model.transaction_date),
            transaction_type=TransactionType(model.transaction_type),
            status=TransactionStatus(model.status),
            description=model.description,
            merchant_name=model.merchant_name,
            category=TransactionCategory(model.category) if model.category else None,
        )

    def _to_model(self, entity: Transaction) -> TransactionModel:
        return TransactionModel(
            id=entity.id,
            provider_id=entity.provider_id,
            account_id=entity.account_id,
            transaction_id=entity.transaction_id,
            amount=entity.amount,
            currency=entity.currency,
            transaction_date=entity.transaction_date,
            transaction_type=entity.transaction_type.value,
            status=entity.status.value,
            description=entity.description,
            merchant_name=entity.merchant_name,
            category=entity.category.value if entity.category else None,
        )
