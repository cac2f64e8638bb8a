"""Connected provider database model.

One row per provider the user connected. Rows are never deleted;
disconnecting clears is_active.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class ConnectedProviderModel(BaseMutableModel):
    """Connected provider table.

    Indexes:
        - provider_id: unique
        - is_active: active provider queries
    """

    __tablename__ = "connected_providers"

    provider_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Provider identifier (descriptor id)",
    )
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    base_url: Mapped[str] = mapped_column(String(500), nullable=False)
    client_id: Mapped[str] = mapped_column(String(255), nullable=False)
    consent_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Granted consent identifier",
    )
    consent_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    requesting_bank_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_gateway: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    connected_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )
    last_sync_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last successful account sync (freshness anchor)",
    )
