"""Integration tests for the SQLAlchemy repositories.

Tests cover:
- ConnectedProvider upsert by provider_id and active filtering
- Account upsert by (provider_id, account_id) and currency filtering
- Transaction insert-only semantics and date queries
- Budget persistence with categories
- Entity ↔ Model mapping (Decimal amounts, UTC timestamps, enums)

Architecture:
- Integration tests with a REAL SQLite database (aiosqlite)
- Uses test_database fixture (fresh instance per test)
"""

from decimal import Decimal

import pytest
from uuid_extensions import uuid7

from src.domain.entities import Budget, BudgetCategory
from src.domain.enums import (
    AccountStatus,
    BudgetPeriod,
    ConsentStatus,
    TransactionCategory,
)
from src.domain.value_objects import Consent
from src.infrastructure.persistence.repositories import (
    AccountRepository,
    BudgetRepository,
    ConnectedProviderRepository,
    TransactionRepository,
)
from tests.conftest import make_account, make_provider, make_transaction, utc

# =============================================================================
# Connected providers
# =============================================================================


@pytest.mark.integration
class TestConnectedProviderRepository:
    """Tests for ConnectedProviderRepository."""

    async def test_save_and_find(self, test_database):
        """A saved provider round-trips with aware timestamps."""
        repo = ConnectedProviderRepository(test_database)
        provider = make_provider(last_sync_at=utc(2024, 3, 1))

        await repo.save(provider)
        found = await repo.find_by_provider_id("vbank")

        assert found is not None
        assert found.id == provider.id
        assert found.last_sync_at == utc(2024, 3, 1)
        assert found.last_sync_at.tzinfo is not None

    async def test_save_updates_existing_row(self, test_database):
        """Saving again updates consent and keeps the id."""
        repo = ConnectedProviderRepository(test_database)
        provider = make_provider()
        await repo.save(provider)

        provider.attach_consent(Consent(consent_id="c-1", status=ConsentStatus.APPROVED))
        await repo.save(provider)
        found = await repo.find_by_provider_id("vbank")

        assert found.id == provider.id
        assert found.consent_id == "c-1"
        assert found.consent_status == ConsentStatus.APPROVED

    async def test_find_all_active_excludes_disconnected(self, test_database):
        """Soft-deleted providers are not active."""
        repo = ConnectedProviderRepository(test_database)
        gone = make_provider("abank")
        gone.deactivate()
        await repo.save(make_provider("vbank"))
        await repo.save(gone)

        active = await repo.find_all_active()

        assert [p.provider_id for p in active] == ["vbank"]

    async def test_unknown_provider(self, test_database):
        """Missing rows yield None."""
        repo = ConnectedProviderRepository(test_database)

        assert await repo.find_by_provider_id("nope") is None


# =============================================================================
# Accounts
# =============================================================================


@pytest.mark.integration
class TestAccountRepository:
    """Tests for AccountRepository."""

    async def test_upsert_by_provider_key(self, test_database):
        """A second save with the same key updates the balance in place."""
        repo = AccountRepository(test_database)
        account = make_account(balance="100.50", available_balance="90.00")
        await repo.save(account)

        account.balance = Decimal("250.75")
        await repo.save(account)
        found = await repo.find_by_provider_account_id("vbank", "acc-1")

        assert found.id == account.id
        assert found.balance == Decimal("250.75")
        assert found.available_balance == Decimal("90.00")
        assert len(await repo.find_by_provider("vbank")) == 1

    async def test_same_account_id_under_two_providers(self, test_database):
        """Account ids are scoped by provider."""
        repo = AccountRepository(test_database)
        await repo.save(make_account(provider_id="vbank"))
        await repo.save(make_account(provider_id="abank"))

        assert len(await repo.find_all()) == 2

    async def test_find_all_filters_currency(self, test_database):
        """Currency filtering is case-insensitive."""
        repo = AccountRepository(test_database)
        await repo.save(make_account("acc-1", currency="RUB"))
        await repo.save(make_account("acc-2", currency="USD"))

        rub = await repo.find_all("rub")

        assert [a.account_id for a in rub] == ["acc-1"]

    async def test_status_round_trip(self, test_database):
        """Enum values are restored."""
        repo = AccountRepository(test_database)
        await repo.save(make_account(status=AccountStatus.BLOCKED))

        found = await repo.find_by_provider_account_id("vbank", "acc-1")

        assert found.status == AccountStatus.BLOCKED
        assert not found.is_active


# =============================================================================
# Transactions
# =============================================================================


@pytest.mark.integration
class TestTransactionRepository:
    """Tests for TransactionRepository."""

    async def test_add_is_insert_only(self, test_database):
        """A second add with the same key is rejected."""
        repo = TransactionRepository(test_database)
        first = make_transaction("-500", utc(2024, 3, 2), transaction_id="t-1")
        again = make_transaction("-999", utc(2024, 3, 2), transaction_id="t-1")

        assert await repo.add(first) is True
        assert await repo.add(again) is False

        stored = await repo.find_by_transaction_id("vbank", "t-1")
        assert stored.id == first.id
        assert stored.amount == Decimal("-500")

    async def test_same_id_under_two_providers(self, test_database):
        """Transaction ids are scoped by provider."""
        repo = TransactionRepository(test_database)

        assert await repo.add(make_transaction("-1", utc(2024, 3, 2), transaction_id="t-1"))
        assert await repo.add(
            make_transaction("-1", utc(2024, 3, 2), transaction_id="t-1", provider_id="abank")
        )

    async def test_mapping(self, test_database):
        """Category, description and UTC date survive storage."""
        repo = TransactionRepository(test_database)
        await repo.add(
            make_transaction(
                "-320.40",
                utc(2024, 3, 2, 9),
                transaction_id="t-1",
                category=TransactionCategory.FOOD,
                description="Пятёрочка",
            )
        )

        stored = await repo.find_by_transaction_id("vbank", "t-1")

        assert stored.category == TransactionCategory.FOOD
        assert stored.description == "Пятёрочка"
        assert stored.transaction_date == utc(2024, 3, 2, 9)
        assert stored.is_expense

    async def test_date_queries(self, test_database):
        """Range queries are ascending; recent queries are newest first."""
        repo = TransactionRepository(test_database)
        for day in (1, 5, 10, 20):
            await repo.add(make_transaction("-10", utc(2024, 3, day), transaction_id=f"t-{day}"))

        in_range = await repo.find_by_date_range(utc(2024, 3, 4), utc(2024, 3, 15))
        recent = await repo.find_recent(from_date=utc(2024, 3, 4), limit=2)

        assert [t.transaction_id for t in in_range] == ["t-5", "t-10"]
        assert [t.transaction_id for t in recent] == ["t-20", "t-10"]


# =============================================================================
# Budgets
# =============================================================================


@pytest.mark.integration
class TestBudgetRepository:
    """Tests for BudgetRepository."""

    def _budget(self) -> Budget:
        start, end = BudgetPeriod.MONTHLY.window(utc(2024, 3, 15))
        return Budget(
            id=uuid7(),
            name="March",
            total_limit=Decimal("10000"),
            period=BudgetPeriod.MONTHLY,
            start_date=start,
            end_date=end,
            categories=[
                BudgetCategory(TransactionCategory.FOOD, Decimal("5000")),
                BudgetCategory(TransactionCategory.TRANSPORT, Decimal("2000")),
            ],
        )

    async def test_save_and_find_with_categories(self, test_database):
        """Categories are stored with the budget."""
        repo = BudgetRepository(test_database)
        budget = self._budget()
        await repo.save(budget)

        found = await repo.find_by_id(budget.id)

        assert found.name == "March"
        assert found.end_date == budget.end_date
        assert {c.category for c in found.categories} == {
            TransactionCategory.FOOD,
            TransactionCategory.TRANSPORT,
        }

    async def test_save_updates_spending(self, test_database):
        """Recomputed spending replaces stored values."""
        repo = BudgetRepository(test_database)
        budget = self._budget()
        await repo.save(budget)

        budget.categories[0].spent = Decimal("1500")
        await repo.save(budget)
        found = await repo.find_by_id(budget.id)

        spent = {c.category: c.spent for c in found.categories}
        assert spent[TransactionCategory.FOOD] == Decimal("1500")
        assert spent[TransactionCategory.TRANSPORT] == Decimal("0")

    async def test_find_active(self, test_database):
        """Budgets whose window has ended are not active."""
        repo = BudgetRepository(test_database)
        budget = self._budget()
        await repo.save(budget)

        assert [b.id for b in await repo.find_active(utc(2024, 3, 20))] == [budget.id]
        assert await repo.find_active(utc(2024, 4, 2)) == []
