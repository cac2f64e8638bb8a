"""Application services.

Usage:
    from src.application.services import SyncOrchestrator, ForecastEngine
"""

from src.application.services.budget_manager import BudgetManager, CategoryLimit
from src.application.services.forecast_engine import ForecastEngine
from src.application.services.notification_dispatcher import NotificationDispatcher
from src.application.services.provider_registry import ProviderRegistry
from src.application.services.sync_orchestrator import (
    ProviderSyncOutcome,
    SyncOrchestrator,
    SyncTransactionsResult,
)
from src.application.services.transaction_analyzer import (
    CategoryTotal,
    TransactionAnalyzer,
)

__all__ = [
    "BudgetManager",
    "CategoryLimit",
    "CategoryTotal",
    "ForecastEngine",
    "NotificationDispatcher",
    "ProviderRegistry",
    "ProviderSyncOutcome",
    "SyncOrchestrator",
    "SyncTransactionsResult",
    "TransactionAnalyzer",
]
