"""Container module - Centralized dependency construction.

This module re-exports all factory functions from submodules:

    from src.core.container import get_sync_orchestrator, get_database

The container is organized into modules by concern:
- infrastructure: Logging, HTTP, secrets, auth, consent, adapters, database
- providers: Provider descriptors from configuration
- repositories: Repository factories
- services: Application services and the orchestrator composition root

Only Settings is cached (get_settings); every other factory builds a new
instance, so there is no hidden process-wide mutable state.
"""

from src.core.container.infrastructure import (
    build_ssl_context,
    get_adapter_factory,
    get_consent_gateway,
    get_database,
    get_http_client,
    get_logger,
    get_oauth_gateway,
    get_secret_storage,
    get_token_store,
)
from src.core.container.providers import (
    build_provider_descriptor,
    get_provider_registry,
    resolve_client_secret,
)
from src.core.container.repositories import (
    get_account_repository,
    get_budget_repository,
    get_connected_provider_repository,
    get_transaction_repository,
)
from src.core.container.services import (
    get_budget_manager,
    get_forecast_engine,
    get_notification_dispatcher,
    get_sync_orchestrator,
)

__all__ = [
    # Infrastructure
    "build_ssl_context",
    "get_adapter_factory",
    "get_consent_gateway",
    "get_database",
    "get_http_client",
    "get_logger",
    "get_oauth_gateway",
    "get_secret_storage",
    "get_token_store",
    # Providers
    "build_provider_descriptor",
    "get_provider_registry",
    "resolve_client_secret",
    # Repositories
    "get_account_repository",
    "get_budget_repository",
    "get_connected_provider_repository",
    "get_transaction_repository",
    # Services
    "get_budget_manager",
    "get_forecast_engine",
    "get_notification_dispatcher",
    "get_sync_orchestrator",
]
