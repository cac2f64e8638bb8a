"""Unit tests for TokenStore.

Tests for:
- save/get round trip through encrypted secret storage
- needs_refresh window (5 minutes) and tokens without expiry
- Durable reload by a fresh store instance
- delete / delete_all
- Secret storage failures are non-fatal
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.errors import SecretsError
from src.domain.protocols import OAuthTokens
from src.infrastructure.auth import TokenStore
from src.infrastructure.secrets import EncryptedSecretStore


@pytest.mark.unit
class TestSaveAndGet:
    """Tests for storing and reading token records."""

    @freeze_time("2024-03-01 10:00:00")
    async def test_save_computes_absolute_expiry(self, token_store: TokenStore):
        """expires_in is converted to an absolute expiry."""
        record = await token_store.save(
            "vbank", OAuthTokens(access_token="abc", refresh_token="r1", expires_in=3600)
        )

        assert record.expires_at == datetime(2024, 3, 1, 11, 0, tzinfo=UTC)
        assert await token_store.get_access_token("vbank") == "abc"
        assert await token_store.get_refresh("vbank") == "r1"

    async def test_missing_provider_returns_none(self, token_store: TokenStore):
        """Unknown providers have no record."""
        assert await token_store.get("unknown") is None
        assert await token_store.get_access_token("unknown") is None

    async def test_fresh_store_reloads_from_secret_storage(
        self, secret_storage: EncryptedSecretStore
    ):
        """A new store instance reads records persisted by another."""
        writer = TokenStore(secret_storage=secret_storage)
        await writer.save("vbank", OAuthTokens(access_token="persisted", expires_in=600))

        reader = TokenStore(secret_storage=secret_storage)

        assert await reader.get_access_token("vbank") == "persisted"

    async def test_record_is_encrypted_at_rest(
        self, token_store: TokenStore, secret_storage: EncryptedSecretStore
    ):
        """The raw blob does not contain the access token."""
        await token_store.save("vbank", OAuthTokens(access_token="very-secret-token"))

        blobs = b"".join(secret_storage._blobs.values())

        assert b"very-secret-token" not in blobs


@pytest.mark.unit
class TestNeedsRefresh:
    """Tests for the near-expiry window."""

    async def test_no_record_needs_refresh(self, token_store: TokenStore):
        """A provider without tokens needs a token exchange."""
        assert await token_store.needs_refresh("vbank") is True

    async def test_without_expiry_never_needs_refresh(self, token_store: TokenStore):
        """Records without expires_at never need refresh."""
        await token_store.save("vbank", OAuthTokens(access_token="abc"))

        assert await token_store.needs_refresh("vbank") is False

    async def test_expiring_within_five_minutes_needs_refresh(self, token_store: TokenStore):
        """A token with 4 minutes left needs refresh."""
        with freeze_time("2024-03-01 10:00:00"):
            await token_store.save("vbank", OAuthTokens(access_token="abc", expires_in=3600))
        with freeze_time("2024-03-01 10:56:00"):
            assert await token_store.needs_refresh("vbank") is True

    async def test_more_than_five_minutes_left_is_valid(self, token_store: TokenStore):
        """A token with 6 minutes left does not need refresh."""
        with freeze_time("2024-03-01 10:00:00"):
            await token_store.save("vbank", OAuthTokens(access_token="abc", expires_in=3600))
        with freeze_time("2024-03-01 10:54:00"):
            assert await token_store.needs_refresh("vbank") is False

    async def test_expired_token_needs_refresh(self, token_store: TokenStore):
        """A token past its expiry needs refresh."""
        with freeze_time("2024-03-01 10:00:00"):
            await token_store.save("vbank", OAuthTokens(access_token="abc", expires_in=60))
        with freeze_time("2024-03-01 12:00:00"):
            assert await token_store.needs_refresh("vbank") is True


@pytest.mark.unit
class TestDelete:
    """Tests for removing token records."""

    async def test_delete_removes_cached_and_durable_copy(
        self, token_store: TokenStore, secret_storage: EncryptedSecretStore
    ):
        """Deleted records are gone for every store instance."""
        await token_store.save("vbank", OAuthTokens(access_token="abc"))

        await token_store.delete("vbank")

        assert await token_store.get("vbank") is None
        assert await TokenStore(secret_storage=secret_storage).get("vbank") is None

    async def test_delete_all_clears_every_provider(self, token_store: TokenStore):
        """delete_all removes all providers' records."""
        await token_store.save("vbank", OAuthTokens(access_token="a"))
        await token_store.save("abank", OAuthTokens(access_token="b"))

        await token_store.delete_all()

        assert await token_store.get("vbank") is None
        assert await token_store.get("abank") is None

    async def test_delete_all_keeps_client_secrets(
        self, token_store: TokenStore, secret_storage: EncryptedSecretStore
    ):
        """Client secrets sharing the storage survive clearing tokens."""
        secret_storage.save("vbank_client_secret", b"s3cret")
        await token_store.save("vbank", OAuthTokens(access_token="a"))

        await token_store.delete_all()

        assert await TokenStore(secret_storage=secret_storage).get("vbank") is None
        assert secret_storage.get("vbank_client_secret") == Success(value=b"s3cret")


@pytest.mark.unit
class TestStorageFailures:
    """Tests for secret storage failures."""

    async def test_read_failure_treated_as_missing(self):
        """A failing secret store read yields no record instead of raising."""
        storage = MagicMock()
        storage.get.return_value = Failure(
            error=SecretsError(code=ErrorCode.SECRET_ACCESS_DENIED, message="locked")
        )
        store = TokenStore(secret_storage=storage)

        assert await store.get("vbank") is None
        assert await store.needs_refresh("vbank") is True

    async def test_cached_record_survives_expiry(self, token_store: TokenStore):
        """Expired records are still returned; callers check needs_refresh."""
        with freeze_time("2024-03-01 10:00:00"):
            await token_store.save("vbank", OAuthTokens(access_token="old", expires_in=60))
        with freeze_time("2024-03-02 10:00:00"):
            record = await token_store.get("vbank")

        assert record is not None
        assert record.is_expired(datetime(2024, 3, 2, tzinfo=UTC) + timedelta(hours=1))
