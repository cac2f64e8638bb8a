"""Budget and budget category database models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.persistence.base import BaseMutableModel


class BudgetModel(BaseMutableModel):
    """Budget table. Categories are loaded eagerly with the budget."""

    __tablename__ = "budgets"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_limit: Mapped[Decimal] = mapped_column(Numeric(precision=19, scale=4), nullable=False)
    period: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    categories: Mapped[list["BudgetCategoryModel"]] = relationship(
        back_populates="budget",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class BudgetCategoryModel(BaseMutableModel):
    """Per-category limit and recomputed spending."""

    __tablename__ = "budget_categories"

    budget_id: Mapped[UUID] = mapped_column(
        ForeignKey("budgets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    limit_amount: Mapped[Decimal] = mapped_column(Numeric(precision=19, scale=4), nullable=False)
    spent: Mapped[Decimal] = mapped_column(
        Numeric(precision=19, scale=4),
        nullable=False,
        default=Decimal("0"),
    )

    budget: Mapped[BudgetModel] = relationship(back_populates="categories")

    __table_args__ = (
        UniqueConstraint("budget_id", "category", name="uq_budget_categories_budget_category"),
    )
