"""Sync orchestrator.

Drives account and transaction synchronization for connected providers and
answers aggregated read-side queries over the synchronized data.

Account sync, per provider:
    1. Skip the network if the last successful sync is still fresh
    2. Obtain a valid access token (refresh once if needed)
    3. Best-effort consent acquisition when none is stored
    4. Build the adapter variant for the provider
    5. List accounts, upsert each keyed by (provider_id, account_id)
    6. Mark the provider synced, notify success (or notify the error)

Transaction sync inserts each provider transaction at most once per
(provider_id, transaction_id); duplicates are skipped, never merged.

Failures are scoped to one provider: sync_all keeps going when a provider
fails and reports a per-provider outcome.

Architecture:
    - Application layer service (orchestrates infrastructure ports)
    - Dependencies injected via constructor (no hidden singletons)
    - Returns Result types for provider-scoped failures
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from uuid_extensions import uuid7

from src.application.services.budget_manager import BudgetManager
from src.application.services.provider_registry import ProviderRegistry
from src.application.services.transaction_analyzer import TransactionAnalyzer
from src.core.enums import ErrorCode
from src.core.errors import DomainError, NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.entities import Account, ConnectedProvider, Transaction
from src.domain.enums import (
    AccountStatus,
    AccountType,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from src.domain.errors import ProviderConfigurationError
from src.domain.protocols import (
    AccountRepository,
    BalanceData,
    BankAdapterProtocol,
    BankInfoData,
    CardData,
    ConnectedProviderRepository,
    LoggerProtocol,
    NotificationSinkProtocol,
    ProviderAccountData,
    ProviderTransactionData,
    TransactionRepository,
)
from src.domain.value_objects import ConsentDetails, ProviderDescriptor
from src.infrastructure.adapters import AdapterFactory, GatewayAdapter
from src.infrastructure.auth import OAuthGateway
from src.infrastructure.consent import ConsentGateway

DEFAULT_FRESHNESS_WINDOW = timedelta(seconds=300)
DEFAULT_LOOKBACK = timedelta(days=30)
DEFAULT_PAGE_LIMIT = 100
DEFAULT_MAX_CONCURRENCY = 4
DEFAULT_CURRENCY = "RUB"


@dataclass(frozen=True)
class SyncTransactionsResult:
    """Counts from one account's transaction sync.

    Attributes:
        account_id: Provider-scoped account identifier.
        fetched: Transactions returned by the provider.
        created: New transactions stored.
        duplicates: Transactions already stored (skipped).
        invalid: Transactions rejected while building the entity.
    """

    account_id: str
    fetched: int
    created: int
    duplicates: int
    invalid: int


@dataclass
class ProviderSyncOutcome:
    """Result of syncing one provider inside sync_all.

    Attributes:
        provider_id: Provider identifier.
        accounts_synced: Accounts returned by the account sync.
        transactions_created: New transactions stored across accounts.
        error: Failure that stopped the provider's sync, if any.
        account_errors: Per-account transaction sync failures.
    """

    provider_id: str
    accounts_synced: int = 0
    transactions_created: int = 0
    error: DomainError | None = None
    account_errors: dict[str, DomainError] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.error is None


class SyncOrchestrator:
    """Account and transaction synchronization across providers.

    Dependencies (injected via constructor):
        - ConnectedProviderRepository, AccountRepository, TransactionRepository
        - ProviderRegistry: Provider descriptors by id
        - OAuthGateway: Valid access tokens
        - ConsentGateway: Consent acquisition, status and revocation
        - AdapterFactory: Adapter variant per provider
        - TransactionAnalyzer: Categorization of uncategorized transactions
        - BudgetManager: Budget recomputation after sync_all
        - NotificationSinkProtocol: Sync outcome notifications (fail-open)
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        provider_repository: ConnectedProviderRepository,
        account_repository: AccountRepository,
        transaction_repository: TransactionRepository,
        registry: ProviderRegistry,
        oauth_gateway: OAuthGateway,
        consent_gateway: ConsentGateway,
        adapter_factory: AdapterFactory,
        analyzer: TransactionAnalyzer,
        budget_manager: BudgetManager,
        notifications: NotificationSinkProtocol,
        logger: LoggerProtocol,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        default_lookback: timedelta = DEFAULT_LOOKBACK,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        default_currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._providers = provider_repository
        self._accounts = account_repository
        self._transactions = transaction_repository
        self._registry = registry
        self._oauth = oauth_gateway
        self._consent = consent_gateway
        self._adapter_factory = adapter_factory
        self._analyzer = analyzer
        self._budget_manager = budget_manager
        self._notifications = notifications
        self._logger = logger
        self._freshness_window = freshness_window
        self._default_lookback = default_lookback
        self._page_limit = page_limit
        self._max_concurrency = max(1, max_concurrency)
        self._default_currency = default_currency

    # =========================================================================
    # Provider lifecycle
    # =========================================================================

    async def connect_provider(
        self, provider_id: str
    ) -> Result[ConnectedProvider, DomainError]:
        """Register (or reactivate) a configured provider for syncing.

        Tokens are obtained separately, through OAuthGateway.authenticate()
        for interactive providers or lazily on first sync for providers
        holding a client secret.
        """
        descriptor_result = self._registry.get(provider_id)
        if isinstance(descriptor_result, Failure):
            return descriptor_result
        descriptor = descriptor_result.value

        provider = await self._providers.find_by_provider_id(provider_id)
        if provider is None:
            provider = ConnectedProvider(
                id=uuid7(),
                provider_id=descriptor.id,
                display_name=descriptor.display_name,
                base_url=descriptor.base_url,
                client_id=descriptor.oauth.client_id,
                requesting_bank_id=descriptor.requesting_bank_id,
                is_gateway=descriptor.is_gateway,
            )
        else:
            provider.reactivate()

        await self._providers.save(provider)
        self._logger.info("provider_connected", provider_id=provider_id)
        return Success(value=provider)

    async def disconnect_provider(self, provider_id: str) -> Result[None, DomainError]:
        """Deactivate the provider and delete its tokens.

        Accounts and transactions are kept for historical analytics.
        """
        provider = await self._providers.find_by_provider_id(provider_id)
        if provider is None:
            return Failure(error=_provider_not_found(provider_id))

        provider.deactivate()
        await self._providers.save(provider)
        await self._oauth.disconnect(provider_id)

        self._logger.info("provider_disconnected", provider_id=provider_id)
        return Success(value=None)

    # =========================================================================
    # Account sync
    # =========================================================================

    async def sync_accounts(
        self, provider_id: str, now: datetime | None = None
    ) -> Result[list[Account], DomainError]:
        """Synchronize one provider's accounts.

        Args:
            provider_id: Connected provider to sync.
            now: Reference instant (defaults to current UTC time).

        Returns:
            Success(accounts) with the persisted accounts.
            Failure(DomainError) if the provider is unknown, has no usable
            token, or listing accounts failed.
        """
        now = now or datetime.now(UTC)
        provider = await self._providers.find_by_provider_id(provider_id)
        if provider is None or not provider.is_active:
            return Failure(error=_provider_not_found(provider_id))

        # 1. Freshness check
        if provider.is_fresh(self._freshness_window, now):
            self._logger.debug("account_sync_skipped_fresh", provider_id=provider_id)
            return Success(value=await self._accounts.find_by_provider(provider_id))

        self._logger.info("account_sync_started", provider_id=provider_id)

        # 2-4. Token, consent, adapter
        adapter_result = await self._adapter_for(provider, acquire_consent=True)
        if isinstance(adapter_result, Failure):
            await self._sync_failed(provider, adapter_result.error)
            return adapter_result
        adapter = adapter_result.value

        # 5. Fetch
        fetched = await adapter.list_accounts()
        if isinstance(fetched, Failure):
            await self._sync_failed(provider, fetched.error)
            return fetched

        accounts = []
        for data in fetched.value:
            account = await self._upsert_account(provider_id, data, now)
            if account is not None:
                accounts.append(account)

        # 6. Mark synced
        provider.mark_synced(now)
        await self._providers.save(provider)

        self._logger.info(
            "account_sync_succeeded",
            provider_id=provider_id,
            account_count=len(accounts),
        )
        await self._notifications.notify_sync_success(provider.display_name)
        return Success(value=accounts)

    async def _upsert_account(
        self, provider_id: str, data: ProviderAccountData, now: datetime
    ) -> Account | None:
        try:
            incoming = Account(
                id=uuid7(),
                provider_id=provider_id,
                account_id=data.account_id,
                account_number=data.account_number,
                account_type=AccountType.from_provider(data.account_type),
                currency=data.currency,
                balance=data.balance,
                name=data.name,
                available_balance=data.available_balance,
                status=AccountStatus.from_provider(data.status),
                opened_date=data.opened_date,
                last_synced_at=now,
            )
        except ValueError as e:
            self._logger.warning(
                "account_rejected",
                provider_id=provider_id,
                account_id=data.account_id,
                error=str(e),
            )
            return None

        existing = await self._accounts.find_by_provider_account_id(
            provider_id, data.account_id
        )
        if existing is None:
            await self._accounts.save(incoming)
            return incoming

        existing.refresh_from(incoming, now)
        await self._accounts.save(existing)
        return existing

    # =========================================================================
    # Transaction sync
    # =========================================================================

    async def sync_transactions(
        self,
        account: Account,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        now: datetime | None = None,
    ) -> Result[SyncTransactionsResult, DomainError]:
        """Fetch one page of an account's transactions and store new ones.

        Args:
            account: Account to sync.
            from_date: Range start (defaults to the configured lookback).
            to_date: Range end (defaults to now).
            now: Reference instant (defaults to current UTC time).

        Returns:
            Success(SyncTransactionsResult) with insert counts.
            Failure(DomainError) if the provider is not connected, inactive,
            or could not be queried.
        """
        now = now or datetime.now(UTC)
        to_date = to_date or now
        from_date = from_date or (now - self._default_lookback)

        adapter_result = await self._adapter_by_id(account.provider_id)
        if isinstance(adapter_result, Failure):
            return adapter_result

        fetched = await adapter_result.value.list_transactions(
            account.account_id, from_date, to_date, self._page_limit
        )
        if isinstance(fetched, Failure):
            self._logger.warning(
                "transaction_sync_failed",
                provider_id=account.provider_id,
                account_id=account.account_id,
                error_code=fetched.error.code.value,
            )
            return fetched

        created = duplicates = invalid = 0
        for data in fetched.value:
            existing = await self._transactions.find_by_transaction_id(
                account.provider_id, data.transaction_id
            )
            if existing is not None:
                duplicates += 1
                continue

            transaction = self._build_transaction(account, data)
            if transaction is None:
                invalid += 1
                continue

            if await self._transactions.add(transaction):
                created += 1
            else:
                duplicates += 1

        result = SyncTransactionsResult(
            account_id=account.account_id,
            fetched=len(fetched.value),
            created=created,
            duplicates=duplicates,
            invalid=invalid,
        )
        self._logger.info(
            "transaction_sync_succeeded",
            provider_id=account.provider_id,
            account_id=account.account_id,
            fetched=result.fetched,
            created=created,
            duplicates=duplicates,
        )
        return Success(value=result)

    def _build_transaction(
        self, account: Account, data: ProviderTransactionData
    ) -> Transaction | None:
        transaction_type = TransactionType.from_provider(data.transaction_type, data.amount)
        match transaction_type:
            case TransactionType.EXPENSE:
                amount = -abs(data.amount)
            case TransactionType.INCOME:
                amount = abs(data.amount)
            case _:
                amount = data.amount

        category = TransactionCategory.parse(data.category) or self._analyzer.categorize(
            data.description, data.merchant_name, transaction_type
        )

        booked_at = data.transaction_date
        booked_at = (
            booked_at.replace(tzinfo=UTC)
            if booked_at.tzinfo is None
            else booked_at.astimezone(UTC)
        )

        try:
            return Transaction(
                id=uuid7(),
                provider_id=account.provider_id,
                account_id=data.account_id or account.account_id,
                transaction_id=data.transaction_id,
                amount=amount,
                currency=data.currency or account.currency,
                transaction_date=booked_at,
                transaction_type=transaction_type,
                status=TransactionStatus.from_provider(data.status),
                description=data.description,
                merchant_name=data.merchant_name,
                category=category,
            )
        except ValueError as e:
            self._logger.warning(
                "transaction_rejected",
                provider_id=account.provider_id,
                transaction_id=data.transaction_id,
                error=str(e),
            )
            return None

    # =========================================================================
    # Sync all
    # =========================================================================

    async def sync_all(self, now: datetime | None = None) -> list[ProviderSyncOutcome]:
        """Sync every active provider, then recompute budgets.

        Providers run concurrently, bounded by max_concurrency. A failing
        provider never stops its siblings.

        Returns:
            One outcome per active provider, in repository order.
        """
        now = now or datetime.now(UTC)
        providers = await self._providers.find_all_active()
        semaphore = asyncio.Semaphore(self._max_concurrency)

        self._logger.info("sync_all_started", provider_count=len(providers))

        async def run(provider: ConnectedProvider) -> ProviderSyncOutcome:
            async with semaphore:
                try:
                    return await self._sync_provider(provider.provider_id, now)
                except Exception as e:
                    self._logger.error(
                        "provider_sync_crashed",
                        error=e,
                        provider_id=provider.provider_id,
                    )
                    return ProviderSyncOutcome(
                        provider_id=provider.provider_id,
                        error=DomainError(
                            code=ErrorCode.SYNC_FAILED,
                            message=f"Sync of '{provider.provider_id}' failed: {e}",
                            details={"error_type": type(e).__name__},
                        ),
                    )

        outcomes = list(await asyncio.gather(*(run(p) for p in providers)))

        all_transactions = await self._transactions.find_by_date_range()
        await self._budget_manager.update_all_budgets(all_transactions, now)

        self._logger.info(
            "sync_all_completed",
            provider_count=len(outcomes),
            failed=sum(1 for o in outcomes if not o.succeeded),
            transactions_created=sum(o.transactions_created for o in outcomes),
        )
        return outcomes

    async def _sync_provider(self, provider_id: str, now: datetime) -> ProviderSyncOutcome:
        outcome = ProviderSyncOutcome(provider_id=provider_id)

        accounts_result = await self.sync_accounts(provider_id, now)
        if isinstance(accounts_result, Failure):
            outcome.error = accounts_result.error
            return outcome

        outcome.accounts_synced = len(accounts_result.value)
        for account in accounts_result.value:
            match await self.sync_transactions(account, now=now):
                case Success(value=result):
                    outcome.transactions_created += result.created
                case Failure(error=error):
                    outcome.account_errors[account.account_id] = error
        return outcome

    # =========================================================================
    # Read side
    # =========================================================================

    async def aggregated_balance(self, currency: str | None = None) -> Decimal:
        """Sum of balances over active accounts in one currency."""
        accounts = await self._active_accounts(currency)
        return sum((a.balance for a in accounts), Decimal("0"))

    async def aggregated_available_balance(self, currency: str | None = None) -> Decimal:
        """Sum of available balances over active accounts in one currency.

        Accounts without a reported available balance contribute zero.
        """
        accounts = await self._active_accounts(currency)
        return sum((a.available_balance or Decimal("0") for a in accounts), Decimal("0"))

    async def _active_accounts(self, currency: str | None) -> list[Account]:
        code = (currency or self._default_currency).upper()
        return [a for a in await self._accounts.find_all(code) if a.is_active]

    async def get_all_accounts(self) -> list[Account]:
        """Every stored account across providers."""
        return await self._accounts.find_all()

    async def get_all_transactions(
        self, from_date: datetime | None = None, limit: int | None = None
    ) -> list[Transaction]:
        """Stored transactions, newest first."""
        return await self._transactions.find_recent(from_date=from_date, limit=limit)

    # =========================================================================
    # Provider pass-throughs
    # =========================================================================

    async def get_balance(
        self, provider_id: str, account_id: str
    ) -> Result[BalanceData, DomainError]:
        """Fetch a live balance from the provider."""
        adapter_result = await self._adapter_by_id(provider_id)
        if isinstance(adapter_result, Failure):
            return adapter_result
        return await adapter_result.value.get_balance(account_id)

    async def get_card_info(
        self, provider_id: str, card_id: str
    ) -> Result[CardData, DomainError]:
        """Fetch card details from the provider."""
        adapter_result = await self._adapter_by_id(provider_id)
        if isinstance(adapter_result, Failure):
            return adapter_result
        return await adapter_result.value.get_card_info(card_id)

    async def get_bank_info(
        self, provider_id: str, bank_id: str | None = None
    ) -> Result[BankInfoData, DomainError]:
        """Fetch public bank information (gateway providers only)."""
        adapter_result = await self._adapter_by_id(provider_id)
        if isinstance(adapter_result, Failure):
            return adapter_result

        adapter = adapter_result.value
        if not isinstance(adapter, GatewayAdapter):
            return Failure(
                error=ProviderConfigurationError(
                    code=ErrorCode.INVALID_PROVIDER_CONFIGURATION,
                    message="Bank info is only available for gateway providers",
                    provider_name=provider_id,
                    field="is_gateway",
                )
            )
        return await adapter.get_bank_info(bank_id)

    async def get_consent_status(
        self, provider_id: str
    ) -> Result[ConsentDetails, DomainError]:
        """Fetch the stored consent's status and persist it on the provider."""
        provider = await self._providers.find_by_provider_id(provider_id)
        if provider is None:
            return Failure(error=_provider_not_found(provider_id))
        if provider.consent_id is None:
            return Failure(error=_no_consent(provider_id))

        token = await self._oauth.token_store.get_access_token(provider_id)
        result = await self._consent.get_consent_status(
            consent_id=provider.consent_id,
            base_url=provider.base_url,
            access_token=token,
            provider_id=provider_id,
        )
        if isinstance(result, Success):
            provider.consent_status = result.value.status
            await self._providers.save(provider)
        return result

    async def revoke_consent(self, provider_id: str) -> Result[None, DomainError]:
        """Revoke the stored consent and forget it locally."""
        provider = await self._providers.find_by_provider_id(provider_id)
        if provider is None:
            return Failure(error=_provider_not_found(provider_id))
        if provider.consent_id is None:
            return Failure(error=_no_consent(provider_id))

        token = await self._oauth.token_store.get_access_token(provider_id)
        result = await self._consent.revoke_consent(
            consent_id=provider.consent_id,
            base_url=provider.base_url,
            access_token=token,
            provider_id=provider_id,
        )
        if isinstance(result, Success):
            provider.clear_consent()
            await self._providers.save(provider)
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _adapter_by_id(
        self, provider_id: str
    ) -> Result[BankAdapterProtocol, DomainError]:
        provider = await self._providers.find_by_provider_id(provider_id)
        if provider is None or not provider.is_active:
            return Failure(error=_provider_not_found(provider_id))
        return await self._adapter_for(provider)

    async def _adapter_for(
        self, provider: ConnectedProvider, acquire_consent: bool = False
    ) -> Result[BankAdapterProtocol, DomainError]:
        descriptor_result = self._registry.get(provider.provider_id)
        if isinstance(descriptor_result, Failure):
            return descriptor_result
        descriptor = descriptor_result.value

        token_result = await self._oauth.get_valid_access_token(descriptor)
        if isinstance(token_result, Failure):
            return token_result
        access_token = token_result.value

        if acquire_consent:
            await self._ensure_consent(provider, descriptor, access_token)

        return Success(
            value=self._adapter_factory.create(
                descriptor,
                access_token=access_token,
                consent_id=provider.consent_id,
                client_id=provider.client_id,
            )
        )

    async def _ensure_consent(
        self,
        provider: ConnectedProvider,
        descriptor: ProviderDescriptor,
        access_token: str,
    ) -> None:
        """Best-effort consent acquisition; failures never stop the sync."""
        if provider.consent_id or descriptor.is_gateway or not descriptor.requesting_bank_id:
            return

        result = await self._consent.create_account_consent(
            access_token=access_token,
            client_id=descriptor.oauth.client_id,
            requesting_bank_id=descriptor.requesting_bank_id,
            base_url=descriptor.base_url,
            requesting_bank_name=descriptor.requesting_bank_name,
            provider_id=descriptor.id,
        )
        match result:
            case Success(value=consent):
                provider.attach_consent(consent)
                await self._providers.save(provider)
                self._logger.info(
                    "consent_attached",
                    provider_id=provider.provider_id,
                    consent_id=consent.consent_id,
                    consent_status=consent.status.value,
                )
            case Failure(error=error):
                self._logger.warning(
                    "consent_acquisition_skipped",
                    provider_id=provider.provider_id,
                    error_code=error.code.value,
                    error=str(error),
                )

    async def _sync_failed(self, provider: ConnectedProvider, error: DomainError) -> None:
        self._logger.warning(
            "account_sync_failed",
            provider_id=provider.provider_id,
            error_code=error.code.value,
            error=str(error),
        )
        await self._notifications.notify_sync_error(provider.display_name, error.message)


def _provider_not_found(provider_id: str) -> NotFoundError:
    return NotFoundError(
        code=ErrorCode.PROVIDER_NOT_FOUND,
        message=f"Provider '{provider_id}' is not connected",
        resource_type="ConnectedProvider",
        resource_id=provider_id,
    )


def _no_consent(provider_id: str) -> DomainError:
    return DomainError(
        code=ErrorCode.CONSENT_REQUIRED,
        message=f"Provider '{provider_id}' has no stored consent",
    )
