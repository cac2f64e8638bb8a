"""Account database model.

Architecture:
    - Accounts belong to a connected provider (provider_id)
    - Unique per (provider_id, account_id); sync upserts on that key
    - Balance stored as Decimal with separate currency column
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class AccountModel(BaseMutableModel):
    """Account table.

    Indexes:
        - ix_accounts_provider_id: provider lookup
        - uq_accounts_provider_account: unique (provider_id, account_id)
    """

    __tablename__ = "accounts"

    provider_id: Mapped[str] = mapped_column(
        ForeignKey("connected_providers.provider_id"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Provider's account identifier",
    )
    account_number: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[str] = mapped_column(String(20), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=19, scale=4),
        nullable=False,
        default=Decimal("0"),
    )
    available_balance: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=19, scale=4),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    opened_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("provider_id", "account_id", name="uq_accounts_provider_account"),
    )
