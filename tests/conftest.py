"""Shared pytest configuration and test helpers.

Provides:
1. Automatic asyncio marker for coroutine tests
2. Factories for descriptors, accounts and transactions
3. Fixtures for the HTTP client (no real sleeping), secret storage and
   token store
"""

import inspect
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from uuid_extensions import uuid7

from src.domain.entities import Account, ConnectedProvider, Transaction
from src.domain.enums import (
    AccountStatus,
    AccountType,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from src.domain.value_objects import OAuthConfig, ProviderDescriptor
from src.infrastructure.auth import TokenStore
from src.infrastructure.http import HTTPClient
from src.infrastructure.secrets import EncryptedSecretStore, EncryptionService

TEST_ENCRYPTION_KEY = b"0123456789abcdef0123456789abcdef"

STANDARD_BASE_URL = "https://vbank.example"
GATEWAY_BASE_URL = "https://api.gateway.example:8443"
GATEWAY_TOKEN_URL = "https://auth.gateway.example/token"


# =============================================================================
# Factories
# =============================================================================


def make_descriptor(
    provider_id: str = "vbank",
    *,
    base_url: str = STANDARD_BASE_URL,
    client_secret: str | None = None,
    is_gateway: bool = False,
    requesting_bank_id: str | None = "team042",
    token_endpoint: str | None = None,
) -> ProviderDescriptor:
    """Build a provider descriptor for tests."""
    return ProviderDescriptor(
        id=provider_id,
        display_name=f"{provider_id.title()} Bank",
        base_url=base_url,
        oauth=OAuthConfig(
            authorization_endpoint=f"{base_url}/oauth/authorize",
            token_endpoint=token_endpoint
            or (GATEWAY_TOKEN_URL if is_gateway else f"{base_url}/oauth/token"),
            client_id="team042",
            client_secret=client_secret,
            scopes=("accounts", "transactions"),
            redirect_uri="vtb:///oauth/callback",
        ),
        is_gateway=is_gateway,
        requesting_bank_id=requesting_bank_id,
        requesting_bank_name="Team 42" if requesting_bank_id else None,
    )


def make_provider(
    provider_id: str = "vbank",
    *,
    base_url: str = STANDARD_BASE_URL,
    consent_id: str | None = None,
    is_gateway: bool = False,
    last_sync_at: datetime | None = None,
) -> ConnectedProvider:
    """Build a connected provider entity for tests."""
    return ConnectedProvider(
        id=uuid7(),
        provider_id=provider_id,
        display_name=f"{provider_id.title()} Bank",
        base_url=base_url,
        client_id="team042",
        consent_id=consent_id,
        requesting_bank_id="team042",
        is_gateway=is_gateway,
        last_sync_at=last_sync_at,
    )


def make_account(
    account_id: str = "acc-1",
    *,
    provider_id: str = "vbank",
    balance: str = "1000.00",
    available_balance: str | None = None,
    currency: str = "RUB",
    status: AccountStatus = AccountStatus.ACTIVE,
) -> Account:
    """Build an account entity for tests."""
    return Account(
        id=uuid7(),
        provider_id=provider_id,
        account_id=account_id,
        account_number=f"40817810{account_id}",
        account_type=AccountType.CURRENT,
        currency=currency,
        balance=Decimal(balance),
        name="Main account",
        available_balance=Decimal(available_balance) if available_balance else None,
        status=status,
    )


def make_transaction(
    amount: str,
    transaction_date: datetime,
    *,
    transaction_id: str | None = None,
    category: TransactionCategory | None = None,
    status: TransactionStatus = TransactionStatus.COMPLETED,
    provider_id: str = "vbank",
    account_id: str = "acc-1",
    description: str | None = None,
) -> Transaction:
    """Build a transaction; the type follows the sign of amount."""
    value = Decimal(amount)
    return Transaction(
        id=uuid7(),
        provider_id=provider_id,
        account_id=account_id,
        transaction_id=transaction_id or f"txn-{uuid7().hex[:12]}",
        amount=value,
        currency="RUB",
        transaction_date=transaction_date,
        transaction_type=TransactionType.EXPENSE if value < 0 else TransactionType.INCOME,
        status=status,
        description=description,
        category=category,
    )


def utc(year: int, month: int, day: int, hour: int = 12) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(year, month, day, hour, tzinfo=UTC)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sleep() -> AsyncMock:
    """Backoff sleep stand-in recording requested delays."""
    return AsyncMock()


@pytest.fixture
def http_client(sleep: AsyncMock) -> HTTPClient:
    """HTTP client with fast backoff and no real sleeping."""
    return HTTPClient(
        provider_name="vbank",
        timeout=5.0,
        max_retry_attempts=2,
        retry_base_delay=0.5,
        sleep=sleep,
    )


@pytest.fixture
def encryption() -> EncryptionService:
    """AES-256-GCM service with a fixed test key."""
    return EncryptionService.create(TEST_ENCRYPTION_KEY).value


@pytest.fixture
def secret_storage(encryption: EncryptionService) -> EncryptedSecretStore:
    """Encrypted in-memory secret store."""
    return EncryptedSecretStore(encryption=encryption, namespace="openbank-aggregator-test")


@pytest.fixture
def token_store(secret_storage: EncryptedSecretStore) -> TokenStore:
    """Token store over the encrypted secret store."""
    return TokenStore(secret_storage=secret_storage)


# =============================================================================
# Pytest hooks
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: Integration tests with real database")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
