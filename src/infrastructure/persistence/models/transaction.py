"""Transaction database model.

Insert-only: no updated_at. The unique (provider_id, transaction_id)
constraint backs idempotent ingestion even if two syncs race.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class TransactionModel(BaseModel):
    """Transaction table.

    Indexes:
        - uq_transactions_provider_txn: unique (provider_id, transaction_id)
        - ix_transactions_date: date range queries
    """

    __tablename__ = "transactions"

    provider_id: Mapped[str] = mapped_column(String(100), nullable=False)
    account_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    transaction_id: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=19, scale=4),
        nullable=False,
        comment="Signed amount (negative for expenses)",
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    merchant_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(30), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("provider_id", "transaction_id", name="uq_transactions_provider_txn"),
        Index("ix_transactions_date", "transaction_date"),
    )
