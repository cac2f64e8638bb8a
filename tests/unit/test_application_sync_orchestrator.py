"""Unit tests for SyncOrchestrator.

Tests for:
- Account sync: freshness skip, token failure, best-effort consent, upsert
- Transaction sync: dedupe, sign normalization, categorization, UTC dates
- sync_all: per-provider isolation and budget recomputation
- Provider lifecycle and consent pass-throughs
- Aggregated balances

Repositories, gateways and adapters are mocked; the registry, analyzer and
entities are real.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.services import ProviderRegistry, SyncOrchestrator, TransactionAnalyzer
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import (
    AccountStatus,
    ConsentStatus,
    TransactionCategory,
    TransactionType,
)
from src.domain.errors import OAuthError, ProviderAuthenticationError, ProviderForbiddenError
from src.domain.protocols import ProviderAccountData, ProviderTransactionData
from src.domain.value_objects import Consent, ConsentDetails
from tests.conftest import (
    GATEWAY_BASE_URL,
    make_account,
    make_descriptor,
    make_provider,
    make_transaction,
    utc,
)

NOW = utc(2024, 3, 15)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def providers() -> AsyncMock:
    repository = AsyncMock()
    repository.find_by_provider_id.return_value = None
    repository.find_all_active.return_value = []
    return repository


@pytest.fixture
def accounts() -> AsyncMock:
    repository = AsyncMock()
    repository.find_by_provider_account_id.return_value = None
    repository.find_by_provider.return_value = []
    repository.find_all.return_value = []
    return repository


@pytest.fixture
def transactions() -> AsyncMock:
    repository = AsyncMock()
    repository.find_by_transaction_id.return_value = None
    repository.add.return_value = True
    repository.find_by_date_range.return_value = []
    return repository


@pytest.fixture
def oauth() -> AsyncMock:
    gateway = AsyncMock()
    gateway.get_valid_access_token.return_value = Success(value="access-token")
    gateway.token_store.get_access_token.return_value = "access-token"
    return gateway


@pytest.fixture
def consent() -> AsyncMock:
    gateway = AsyncMock()
    gateway.create_account_consent.return_value = Success(
        value=Consent(consent_id="c-1", status=ConsentStatus.APPROVED)
    )
    return gateway


@pytest.fixture
def adapter() -> AsyncMock:
    mock = AsyncMock()
    mock.list_accounts.return_value = Success(value=[])
    mock.list_transactions.return_value = Success(value=[])
    return mock


@pytest.fixture
def adapter_factory(adapter) -> MagicMock:
    factory = MagicMock()
    factory.create.return_value = adapter
    return factory


@pytest.fixture
def budget_manager() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def notifications() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def orchestrator(
    providers,
    accounts,
    transactions,
    oauth,
    consent,
    adapter_factory,
    budget_manager,
    notifications,
    logger,
) -> SyncOrchestrator:
    registry = ProviderRegistry(
        [
            make_descriptor("vbank"),
            make_descriptor("gost", base_url=GATEWAY_BASE_URL, is_gateway=True),
        ]
    )
    return SyncOrchestrator(
        provider_repository=providers,
        account_repository=accounts,
        transaction_repository=transactions,
        registry=registry,
        oauth_gateway=oauth,
        consent_gateway=consent,
        adapter_factory=adapter_factory,
        analyzer=TransactionAnalyzer(),
        budget_manager=budget_manager,
        notifications=notifications,
        logger=logger,
    )


def _account_data(account_id: str = "acc-1", balance: str = "1000.00") -> ProviderAccountData:
    return ProviderAccountData(
        account_id=account_id,
        account_number=f"40817810{account_id}",
        name="Main",
        account_type="checking",
        currency="RUB",
        balance=Decimal(balance),
        status="active",
    )


def _transaction_data(
    transaction_id: str,
    amount: str,
    *,
    transaction_type: str | None = None,
    description: str | None = None,
    category: str | None = None,
    transaction_date: datetime | None = None,
) -> ProviderTransactionData:
    return ProviderTransactionData(
        transaction_id=transaction_id,
        account_id="acc-1",
        amount=Decimal(amount),
        currency="RUB",
        transaction_date=transaction_date or utc(2024, 3, 10),
        transaction_type=transaction_type,
        description=description,
        category=category,
    )


# =============================================================================
# Account sync
# =============================================================================


@pytest.mark.unit
class TestSyncAccounts:
    """Tests for sync_accounts."""

    async def test_unknown_provider(self, orchestrator):
        """Providers that are not connected yield PROVIDER_NOT_FOUND."""
        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_NOT_FOUND

    async def test_inactive_provider(self, orchestrator, providers):
        """Disconnected providers are not synced."""
        provider = make_provider()
        provider.deactivate()
        providers.find_by_provider_id.return_value = provider

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert isinstance(result, Failure)

    async def test_fresh_provider_skips_network(self, orchestrator, providers, accounts, oauth):
        """A sync within the freshness window returns stored accounts."""
        providers.find_by_provider_id.return_value = make_provider(
            last_sync_at=NOW - timedelta(seconds=60)
        )
        stored = [make_account()]
        accounts.find_by_provider.return_value = stored

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert result == Success(value=stored)
        oauth.get_valid_access_token.assert_not_awaited()

    async def test_stale_provider_syncs(self, orchestrator, providers, oauth):
        """A sync older than the window goes to the network."""
        providers.find_by_provider_id.return_value = make_provider(
            last_sync_at=NOW - timedelta(seconds=301)
        )

        await orchestrator.sync_accounts("vbank", now=NOW)

        oauth.get_valid_access_token.assert_awaited_once()

    async def test_successful_sync(
        self, orchestrator, providers, accounts, adapter, adapter_factory, notifications
    ):
        """Accounts are upserted, the provider marked synced and success notified."""
        provider = make_provider()
        providers.find_by_provider_id.return_value = provider
        adapter.list_accounts.return_value = Success(value=[_account_data()])

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert isinstance(result, Success)
        [account] = result.value
        assert account.account_id == "acc-1"
        assert account.last_synced_at == NOW
        accounts.save.assert_awaited_once_with(account)
        assert provider.last_sync_at == NOW
        assert provider.consent_id == "c-1"
        assert adapter_factory.create.call_args.kwargs["consent_id"] == "c-1"
        notifications.notify_sync_success.assert_awaited_once_with("Vbank Bank")

    async def test_existing_account_is_refreshed(self, orchestrator, providers, accounts, adapter):
        """Re-synced accounts keep their identity and take fresh values."""
        providers.find_by_provider_id.return_value = make_provider(consent_id="c-1")
        existing = make_account(balance="10.00")
        accounts.find_by_provider_account_id.return_value = existing
        adapter.list_accounts.return_value = Success(value=[_account_data(balance="250.00")])

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        [account] = result.value
        assert account is existing
        assert account.balance == Decimal("250.00")

    async def test_consent_failure_does_not_stop_sync(
        self, orchestrator, providers, consent, adapter, adapter_factory, logger
    ):
        """A failed consent is logged and the sync proceeds without one."""
        providers.find_by_provider_id.return_value = make_provider()
        consent.create_account_consent.return_value = Failure(
            error=ProviderForbiddenError(
                code=ErrorCode.PROVIDER_FORBIDDEN,
                message="denied",
                provider_name="vbank",
                status_code=403,
            )
        )
        adapter.list_accounts.return_value = Success(value=[_account_data()])

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert isinstance(result, Success)
        assert adapter_factory.create.call_args.kwargs["consent_id"] is None
        events = [c.args[0] for c in logger.warning.call_args_list]
        assert "consent_acquisition_skipped" in events

    async def test_existing_consent_not_renegotiated(self, orchestrator, providers, consent):
        """A stored consent id skips consent creation."""
        providers.find_by_provider_id.return_value = make_provider(consent_id="c-9")

        await orchestrator.sync_accounts("vbank", now=NOW)

        consent.create_account_consent.assert_not_awaited()

    async def test_gateway_provider_skips_consent(self, orchestrator, providers, consent):
        """Gateway providers never negotiate consents."""
        providers.find_by_provider_id.return_value = make_provider(
            "gost", base_url=GATEWAY_BASE_URL, is_gateway=True
        )

        result = await orchestrator.sync_accounts("gost", now=NOW)

        assert isinstance(result, Success)
        consent.create_account_consent.assert_not_awaited()

    async def test_token_failure_notifies_error(
        self, orchestrator, providers, oauth, adapter, notifications
    ):
        """Without a valid token the sync fails and the error is notified."""
        providers.find_by_provider_id.return_value = make_provider()
        oauth.get_valid_access_token.return_value = Failure(
            error=OAuthError(
                code=ErrorCode.NO_ACCESS_TOKEN,
                message="No access token",
                provider_name="vbank",
            )
        )

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.NO_ACCESS_TOKEN
        adapter.list_accounts.assert_not_awaited()
        notifications.notify_sync_error.assert_awaited_once_with("Vbank Bank", "No access token")

    async def test_listing_failure_leaves_provider_unsynced(
        self, orchestrator, providers, adapter, notifications
    ):
        """A failed listing does not mark the provider synced."""
        provider = make_provider(consent_id="c-1")
        providers.find_by_provider_id.return_value = provider
        adapter.list_accounts.return_value = Failure(
            error=ProviderAuthenticationError(
                code=ErrorCode.PROVIDER_AUTHENTICATION_FAILED,
                message="Unauthorized",
                provider_name="vbank",
                status_code=401,
            )
        )

        result = await orchestrator.sync_accounts("vbank", now=NOW)

        assert isinstance(result, Failure)
        assert provider.last_sync_at is None
        notifications.notify_sync_error.assert_awaited_once()


# =============================================================================
# Transaction sync
# =============================================================================


@pytest.mark.unit
class TestSyncTransactions:
    """Tests for sync_transactions."""

    @pytest.fixture(autouse=True)
    def _connected(self, providers):
        providers.find_by_provider_id.return_value = make_provider(consent_id="c-1")

    async def test_default_range_and_page_limit(self, orchestrator, adapter):
        """Without a range the last 30 days are requested, 100 per page."""
        await orchestrator.sync_transactions(make_account(), now=NOW)

        adapter.list_transactions.assert_awaited_once_with(
            "acc-1", NOW - timedelta(days=30), NOW, 100
        )

    async def test_new_and_duplicate_transactions(self, orchestrator, adapter, transactions):
        """Stored transaction ids are skipped and counted as duplicates."""
        adapter.list_transactions.return_value = Success(
            value=[_transaction_data("t-1", "-100"), _transaction_data("t-2", "-200")]
        )
        transactions.find_by_transaction_id.side_effect = [
            make_transaction("-100", utc(2024, 3, 10), transaction_id="t-1"),
            None,
        ]

        result = await orchestrator.sync_transactions(make_account(), now=NOW)

        assert result.value.fetched == 2
        assert result.value.created == 1
        assert result.value.duplicates == 1
        transactions.add.assert_awaited_once()
        assert transactions.add.call_args.args[0].transaction_id == "t-2"

    async def test_insert_race_counts_as_duplicate(self, orchestrator, adapter, transactions):
        """A unique-key conflict on insert is a duplicate, not an error."""
        adapter.list_transactions.return_value = Success(value=[_transaction_data("t-1", "-1")])
        transactions.add.return_value = False

        result = await orchestrator.sync_transactions(make_account(), now=NOW)

        assert result.value.created == 0
        assert result.value.duplicates == 1

    async def test_debit_sign_is_normalized(self, orchestrator, adapter, transactions):
        """A debit reported with a positive amount is stored negative."""
        adapter.list_transactions.return_value = Success(
            value=[_transaction_data("t-1", "500.00", transaction_type="debit")]
        )

        await orchestrator.sync_transactions(make_account(), now=NOW)

        stored = transactions.add.call_args.args[0]
        assert stored.transaction_type == TransactionType.EXPENSE
        assert stored.amount == Decimal("-500.00")

    async def test_type_inferred_from_sign(self, orchestrator, adapter, transactions):
        """Without a type, a positive amount is income."""
        adapter.list_transactions.return_value = Success(
            value=[_transaction_data("t-1", "75000", description="Зарплата")]
        )

        await orchestrator.sync_transactions(make_account(), now=NOW)

        stored = transactions.add.call_args.args[0]
        assert stored.transaction_type == TransactionType.INCOME
        assert stored.category == TransactionCategory.SALARY

    async def test_provider_category_wins_over_keywords(self, orchestrator, adapter, transactions):
        """A known provider category is kept as is."""
        adapter.list_transactions.return_value = Success(
            value=[_transaction_data("t-1", "-300", description="Taxi", category="Health")]
        )

        await orchestrator.sync_transactions(make_account(), now=NOW)

        assert transactions.add.call_args.args[0].category == TransactionCategory.HEALTH

    async def test_naive_dates_are_treated_as_utc(self, orchestrator, adapter, transactions):
        """Naive provider timestamps are stored as UTC."""
        adapter.list_transactions.return_value = Success(
            value=[_transaction_data("t-1", "-1", transaction_date=datetime(2024, 3, 10, 9, 30))]
        )

        await orchestrator.sync_transactions(make_account(), now=NOW)

        assert transactions.add.call_args.args[0].transaction_date == datetime(
            2024, 3, 10, 9, 30, tzinfo=UTC
        )

    async def test_invalid_item_counted(self, orchestrator, adapter, transactions):
        """Items that cannot form a transaction are counted and skipped."""
        adapter.list_transactions.return_value = Success(value=[_transaction_data("", "-1")])

        result = await orchestrator.sync_transactions(make_account(), now=NOW)

        assert result.value.invalid == 1
        transactions.add.assert_not_awaited()

    async def test_inactive_provider_is_not_synced(self, orchestrator, providers, adapter):
        """Disconnected providers cannot have their accounts synced directly."""
        provider = make_provider(consent_id="c-1")
        provider.deactivate()
        providers.find_by_provider_id.return_value = provider

        result = await orchestrator.sync_transactions(make_account(), now=NOW)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_NOT_FOUND
        adapter.list_transactions.assert_not_awaited()

    async def test_provider_failure_propagates(self, orchestrator, adapter):
        """A failed page fetch is returned as Failure."""
        adapter.list_transactions.return_value = Failure(
            error=ProviderForbiddenError(
                code=ErrorCode.PROVIDER_FORBIDDEN,
                message="consent",
                provider_name="vbank",
            )
        )

        result = await orchestrator.sync_transactions(make_account(), now=NOW)

        assert isinstance(result, Failure)


# =============================================================================
# Sync all
# =============================================================================


@pytest.mark.unit
class TestSyncAll:
    """Tests for sync_all."""

    async def test_failing_provider_does_not_stop_others(
        self, orchestrator, providers, oauth, adapter, budget_manager, transactions
    ):
        """Each provider gets its own outcome; budgets are recomputed once."""
        vbank = make_provider("vbank", consent_id="c-1")
        gost = make_provider("gost", base_url=GATEWAY_BASE_URL, is_gateway=True)
        providers.find_all_active.return_value = [vbank, gost]
        providers.find_by_provider_id.side_effect = lambda pid: {"vbank": vbank, "gost": gost}[pid]

        async def token_for(descriptor):
            if descriptor.id == "gost":
                return Failure(
                    error=OAuthError(
                        code=ErrorCode.NO_ACCESS_TOKEN,
                        message="No access token",
                        provider_name="gost",
                    )
                )
            return Success(value="access-token")

        oauth.get_valid_access_token.side_effect = token_for
        adapter.list_accounts.return_value = Success(value=[_account_data()])
        adapter.list_transactions.return_value = Success(
            value=[_transaction_data("t-1", "-100"), _transaction_data("t-2", "-50")]
        )
        stored = [make_transaction("-100", utc(2024, 3, 10))]
        transactions.find_by_date_range.return_value = stored

        outcomes = await orchestrator.sync_all(now=NOW)

        by_id = {o.provider_id: o for o in outcomes}
        assert by_id["vbank"].succeeded
        assert by_id["vbank"].accounts_synced == 1
        assert by_id["vbank"].transactions_created == 2
        assert not by_id["gost"].succeeded
        assert by_id["gost"].error.code == ErrorCode.NO_ACCESS_TOKEN
        budget_manager.update_all_budgets.assert_awaited_once_with(stored, NOW)

    async def test_crashing_provider_is_isolated(
        self, orchestrator, providers, accounts, adapter, budget_manager, logger
    ):
        """An exception inside one provider's sync becomes that provider's error."""
        vbank = make_provider("vbank", consent_id="c-1")
        gost = make_provider("gost", base_url=GATEWAY_BASE_URL, is_gateway=True)
        providers.find_all_active.return_value = [vbank, gost]
        providers.find_by_provider_id.side_effect = lambda pid: {"vbank": vbank, "gost": gost}[pid]
        adapter.list_accounts.return_value = Success(value=[_account_data()])

        async def save(account):
            if account.provider_id == "vbank":
                raise RuntimeError("database is locked")

        accounts.save.side_effect = save

        outcomes = await orchestrator.sync_all(now=NOW)

        by_id = {o.provider_id: o for o in outcomes}
        assert by_id["gost"].succeeded
        assert by_id["gost"].accounts_synced == 1
        assert by_id["vbank"].error.code == ErrorCode.SYNC_FAILED
        assert by_id["vbank"].error.details == {"error_type": "RuntimeError"}
        budget_manager.update_all_budgets.assert_awaited_once()
        assert logger.error.call_args.args[0] == "provider_sync_crashed"

    async def test_account_errors_are_recorded(self, orchestrator, providers, adapter):
        """A failing account does not fail the provider."""
        providers.find_all_active.return_value = [make_provider(consent_id="c-1")]
        providers.find_by_provider_id.return_value = providers.find_all_active.return_value[0]
        adapter.list_accounts.return_value = Success(value=[_account_data()])
        adapter.list_transactions.return_value = Failure(
            error=ProviderForbiddenError(
                code=ErrorCode.PROVIDER_FORBIDDEN,
                message="consent",
                provider_name="vbank",
            )
        )

        [outcome] = await orchestrator.sync_all(now=NOW)

        assert outcome.succeeded
        assert set(outcome.account_errors) == {"acc-1"}


# =============================================================================
# Lifecycle, pass-throughs, read side
# =============================================================================


@pytest.mark.unit
class TestProviderLifecycle:
    """Tests for connect/disconnect."""

    async def test_connect_unconfigured_provider(self, orchestrator):
        """Providers missing from configuration cannot be connected."""
        result = await orchestrator.connect_provider("unknown")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_NOT_FOUND

    async def test_connect_creates_provider_from_descriptor(self, orchestrator, providers):
        """A new connection copies descriptor fields."""
        result = await orchestrator.connect_provider("gost")

        provider = result.value
        assert provider.is_gateway is True
        assert provider.base_url == GATEWAY_BASE_URL
        providers.save.assert_awaited_once_with(provider)

    async def test_connect_reactivates_existing(self, orchestrator, providers):
        """Reconnecting keeps the existing record."""
        existing = make_provider()
        existing.deactivate()
        providers.find_by_provider_id.return_value = existing

        result = await orchestrator.connect_provider("vbank")

        assert result.value is existing
        assert existing.is_active

    async def test_disconnect_deactivates_and_deletes_tokens(self, orchestrator, providers, oauth):
        """Disconnecting soft-deletes the provider and its tokens."""
        provider = make_provider()
        providers.find_by_provider_id.return_value = provider

        result = await orchestrator.disconnect_provider("vbank")

        assert result == Success(value=None)
        assert provider.is_active is False
        oauth.disconnect.assert_awaited_once_with("vbank")


@pytest.mark.unit
class TestPassThroughs:
    """Tests for live provider queries and consent management."""

    async def test_bank_info_requires_gateway(self, orchestrator, providers):
        """Standard providers have no bank info endpoint."""
        providers.find_by_provider_id.return_value = make_provider()

        result = await orchestrator.get_bank_info("vbank")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_PROVIDER_CONFIGURATION

    async def test_get_balance_uses_adapter(self, orchestrator, providers, adapter):
        """Balances come straight from the adapter."""
        providers.find_by_provider_id.return_value = make_provider()
        adapter.get_balance.return_value = Success(value="balance")

        result = await orchestrator.get_balance("vbank", "acc-1")

        assert result == Success(value="balance")
        adapter.get_balance.assert_awaited_once_with("acc-1")

    async def test_consent_status_without_consent(self, orchestrator, providers):
        """Status needs a stored consent."""
        providers.find_by_provider_id.return_value = make_provider()

        result = await orchestrator.get_consent_status("vbank")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CONSENT_REQUIRED

    async def test_consent_status_is_persisted(self, orchestrator, providers, consent):
        """The fetched status is stored on the provider."""
        provider = make_provider(consent_id="c-1")
        providers.find_by_provider_id.return_value = provider
        consent.get_consent_status.return_value = Success(
            value=ConsentDetails(consent_id="c-1", status=ConsentStatus.REVOKED)
        )

        await orchestrator.get_consent_status("vbank")

        assert provider.consent_status == ConsentStatus.REVOKED
        providers.save.assert_awaited_once_with(provider)

    async def test_revoke_clears_local_consent(self, orchestrator, providers, consent):
        """A successful revocation forgets the consent."""
        provider = make_provider(consent_id="c-1")
        providers.find_by_provider_id.return_value = provider
        consent.revoke_consent.return_value = Success(value=None)

        result = await orchestrator.revoke_consent("vbank")

        assert result == Success(value=None)
        assert provider.consent_id is None
        assert consent.revoke_consent.call_args.kwargs["access_token"] == "access-token"


@pytest.mark.unit
class TestAggregatedBalance:
    """Tests for balance aggregation."""

    async def test_sums_active_accounts_in_currency(self, orchestrator, accounts):
        """Inactive accounts are excluded; the default currency is RUB."""
        accounts.find_all.return_value = [
            make_account("a", balance="100.50", available_balance="90.00"),
            make_account("b", balance="200.25"),
            make_account("c", balance="1000", status=AccountStatus.CLOSED),
        ]

        assert await orchestrator.aggregated_balance() == Decimal("300.75")
        assert await orchestrator.aggregated_available_balance() == Decimal("90.00")
        accounts.find_all.assert_awaited_with("RUB")

    async def test_currency_is_uppercased(self, orchestrator, accounts):
        """Lower-case currency codes are normalized."""
        await orchestrator.aggregated_balance("usd")

        accounts.find_all.assert_awaited_once_with("USD")
