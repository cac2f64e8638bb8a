"""BudgetRepository - SQLAlchemy implementation.

Budgets are saved together with their categories in one session.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from src.domain.entities import Budget, BudgetCategory
from src.domain.enums import BudgetPeriod, TransactionCategory
from src.infrastructure.persistence.base import as_utc
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import BudgetCategoryModel, BudgetModel


class BudgetRepository:
    """SQLAlchemy implementation of BudgetRepository protocol."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def find_by_id(self, budget_id: UUID) -> Budget | None:
        async with self._database.get_session() as session:
            model = await session.get(BudgetModel, budget_id)
            return self._to_domain(model) if model else None

    async def find_active(self, now: datetime) -> list[Budget]:
        async with self._database.get_session() as session:
            stmt = (
                select(BudgetModel)
                .where(BudgetModel.end_date >= now)
                .order_by(BudgetModel.created_at.desc())
            )
            models = (await session.execute(stmt)).scalars().all()
            return [self._to_domain(model) for model in models]

    async def save(self, budget: Budget) -> None:
        """Create or update a budget; categories are matched by category name."""
        async with self._database.get_session() as session:
            existing = await session.get(BudgetModel, budget.id)
            if existing is None:
                session.add(self._to_model(budget))
                return

            existing.name = budget.name
            existing.total_limit = budget.total_limit
            existing.period = budget.period.value
            existing.start_date = budget.start_date
            existing.end_date = budget.end_date

            by_category = {c.category: c for c in existing.categories}
            keep = set()
            for category in budget.categories:
                keep.add(category.category.value)
                row = by_category.get(category.category.value)
                if row is None:
                    existing.categories.append(self._category_to_model(category))
                else:
                    row.limit_amount = category.limit
                    row.spent = category.spent
            existing.categories[:] = [
                row for row in existing.categories if row.category in keep
            ]

    # =========================================================================
    # Entity ↔ Model Mapping
    # =========================================================================

    def _to_domain(self, model: BudgetModel) -> Budget:
        return Budget(
            id=model.id,
            name=model.name,
            total_limit=model.total_limit,
            period=BudgetPeriod(model.period),
            start_date=as_utc(model.start_date),
            end_date=as_utc(model.end_date),
            categories=[
                BudgetCategory(
                    category=TransactionCategory(row.category),
                    limit=row.limit_amount,
                    spent=row.spent,
                )
                for row in sorted(model.categories, key=lambda row: row.category)
            ],
            created_at=as_utc(model.created_at),
        )

    def _to_model(self, entity: Budget) -> BudgetModel:
        return BudgetModel(
            id=entity.id,
            name=entity.name,
            total_limit=entity.total_limit,
            period=entity.period.value,
            start_date=entity.start_date,
            end_date=entity.end_date,
            created_at=entity.created_at,
            categories=[self._category_to_model(c) for c in entity.categories],
        )

    @staticmethod
    def _category_to_model(category: BudgetCategory) -> BudgetCategoryModel:
        return BudgetCategoryModel(
            category=category.category.value,
            limit_amount=category.limit,
            spent=category.spent,
        )
