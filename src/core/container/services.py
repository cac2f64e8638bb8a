"""Application service factories.

get_sync_orchestrator() is the composition root: it builds the whole object
graph once, so the TokenStore behind OAuthGateway is the one the
orchestrator reads, and the same notification dispatcher serves sync and
budget alerts.
"""

from datetime import timedelta
from typing import TYPE_CHECKING

from src.core.config import Settings, get_settings
from src.core.container.infrastructure import (
    get_adapter_factory,
    get_consent_gateway,
    get_database,
    get_http_client,
    get_logger,
    get_oauth_gateway,
    get_secret_storage,
    get_token_store,
)
from src.core.container.providers import get_provider_registry
from src.core.container.repositories import (
    get_account_repository,
    get_budget_repository,
    get_connected_provider_repository,
    get_transaction_repository,
)

if TYPE_CHECKING:
    from src.application.services import (
        BudgetManager,
        ForecastEngine,
        NotificationDispatcher,
        SyncOrchestrator,
    )
    from src.domain.protocols import (
        LoggerProtocol,
        NotificationSinkProtocol,
        SecretStorageProtocol,
    )
    from src.infrastructure.persistence import Database


def get_forecast_engine() -> "ForecastEngine":
    """Return a forecast engine (stateless)."""
    from src.application.services import ForecastEngine

    return ForecastEngine()


def get_notification_dispatcher(
    logger: "LoggerProtocol",
    sink: "NotificationSinkProtocol | None" = None,
) -> "NotificationDispatcher":
    """Return a fail-open dispatcher, logging notifications by default."""
    from src.application.services import NotificationDispatcher
    from src.infrastructure.notifications import LoggingNotificationSink

    return NotificationDispatcher(
        sink=sink or LoggingNotificationSink(logger=logger),
        logger=logger,
    )


def get_budget_manager(
    database: "Database",
    notifications: "NotificationSinkProtocol",
    logger: "LoggerProtocol",
) -> "BudgetManager":
    """Return a budget manager persisting through database."""
    from src.application.services import BudgetManager

    return BudgetManager(
        budget_repository=get_budget_repository(database),
        notifications=notifications,
        logger=logger,
    )


def get_sync_orchestrator(
    settings: Settings | None = None,
    *,
    database: "Database | None" = None,
    secret_storage: "SecretStorageProtocol | None" = None,
    sink: "NotificationSinkProtocol | None" = None,
) -> "SyncOrchestrator":
    """Build a fully wired sync orchestrator.

    Args:
        settings: Configuration (defaults to get_settings()).
        database: Database to persist into (built from settings when omitted).
        secret_storage: Token/secret storage (built from settings when omitted).
        sink: Notification sink (log-backed when omitted).

    Returns:
        SyncOrchestrator sharing one HTTP client, token store and dispatcher.
    """
    from src.application.services import SyncOrchestrator, TransactionAnalyzer

    settings = settings or get_settings()
    logger = get_logger(settings)
    database = database or get_database(settings)
    secret_storage = secret_storage or get_secret_storage(settings)

    http_client = get_http_client(settings)
    token_store = get_token_store(secret_storage)
    notifications = get_notification_dispatcher(logger, sink)

    return SyncOrchestrator(
        provider_repository=get_connected_provider_repository(database),
        account_repository=get_account_repository(database),
        transaction_repository=get_transaction_repository(database),
        registry=get_provider_registry(settings, secret_storage),
        oauth_gateway=get_oauth_gateway(http_client, token_store),
        consent_gateway=get_consent_gateway(http_client),
        adapter_factory=get_adapter_factory(http_client),
        analyzer=TransactionAnalyzer(),
        budget_manager=get_budget_manager(database, notifications, logger),
        notifications=notifications,
        logger=logger,
        freshness_window=timedelta(seconds=settings.sync_freshness_seconds),
        default_lookback=timedelta(days=settings.sync_default_lookback_days),
        page_limit=settings.sync_transaction_page_limit,
        max_concurrency=settings.sync_max_concurrency,
        default_currency=settings.default_currency,
    )
