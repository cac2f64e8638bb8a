"""Per-provider OAuth token store.

In-memory cache of token records backed by durable secret storage.

Write path:
    save() computes the absolute expiry, writes through to secret storage,
    then updates the cache. Writers are serialized by an asyncio.Lock.

Read path:
    get() checks the cache first. On a miss it reads secret storage and
    repopulates the cache. Readers never take the lock on a cache hit, so
    concurrent provider syncs read in parallel.

Secret storage failures are logged and never fatal: a failed durable read
is a cache miss, a failed durable write still updates the cache.
"""

import asyncio
import json
from datetime import UTC, datetime, timedelta

import structlog

from src.core.constants import ACCESS_TOKEN_KEY_PREFIX, ACCESS_TOKEN_SECRET_KEY
from src.core.result import Failure
from src.domain.protocols import OAuthTokens, SecretStorageProtocol
from src.domain.value_objects import TokenRecord


class TokenStore:
    """Single-writer, multi-reader token cache.

    Example:
        >>> store = TokenStore(secret_storage=EncryptedSecretStore(...))
        >>> await store.save("vbank", OAuthTokens(access_token="abc", expires_in=3600))
        >>> await store.needs_refresh("vbank")
        False
    """

    def __init__(self, *, secret_storage: SecretStorageProtocol) -> None:
        """Initialize token store.

        Args:
            secret_storage: Durable encrypted storage for token records.
        """
        self._secret_storage = secret_storage
        self._cache: dict[str, TokenRecord] = {}
        self._write_lock = asyncio.Lock()
        self._logger = structlog.get_logger("token_store")

    @staticmethod
    def _secret_key(provider_id: str) -> str:
        return ACCESS_TOKEN_SECRET_KEY.format(provider_id=provider_id)

    async def save(self, provider_id: str, tokens: OAuthTokens) -> TokenRecord:
        """Store tokens returned by a token endpoint.

        Args:
            provider_id: Provider identifier.
            tokens: Token envelope. Missing expires_in means the token
                never expires.

        Returns:
            The stored record.
        """
        expires_at = (
            datetime.now(UTC) + timedelta(seconds=tokens.expires_in)
            if tokens.expires_in is not None
            else None
        )
        record = TokenRecord(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            id_token=tokens.id_token,
            token_type=tokens.token_type,
            expires_at=expires_at,
            scope=tokens.scope,
        )

        async with self._write_lock:
            payload = json.dumps(record.to_dict()).encode("utf-8")
            result = self._secret_storage.save(self._secret_key(provider_id), payload)
            if isinstance(result, Failure):
                self._logger.warning(
                    "token_persist_failed",
                    provider_id=provider_id,
                    error=str(result.error),
                )
            self._cache[provider_id] = record

        self._logger.info(
            "token_saved",
            provider_id=provider_id,
            expires_at=expires_at.isoformat() if expires_at else None,
            has_refresh_token=record.refresh_token is not None,
        )
        return record

    async def get(self, provider_id: str) -> TokenRecord | None:
        """Return the provider's token record, if any.

        Expired records are returned too; callers check needs_refresh().
        """
        cached = self._cache.get(provider_id)
        if cached is not None:
            return cached

        record = self._load(provider_id)
        if record is None:
            return None

        async with self._write_lock:
            current = self._cache.get(provider_id)
            # A concurrent save() wins over the durable copy we just read
            if current is None:
                self._cache[provider_id] = record
            else:
                record = current
        return record

    def _load(self, provider_id: str) -> TokenRecord | None:
        result = self._secret_storage.get(self._secret_key(provider_id))
        if isinstance(result, Failure):
            self._logger.warning(
                "token_load_failed",
                provider_id=provider_id,
                error=str(result.error),
            )
            return None
        if result.value is None:
            return None
        try:
            return TokenRecord.from_dict(json.loads(result.value))
        except (KeyError, ValueError, TypeError) as e:
            self._logger.warning(
                "token_record_corrupt",
                provider_id=provider_id,
                error=str(e),
            )
            return None

    async def get_access_token(self, provider_id: str) -> str | None:
        """Return the stored access token, if any."""
        record = await self.get(provider_id)
        return record.access_token if record else None

    async def get_refresh(self, provider_id: str) -> str | None:
        """Return the stored refresh token, if any."""
        record = await self.get(provider_id)
        return record.refresh_token if record else None

    async def needs_refresh(self, provider_id: str) -> bool:
        """Whether the provider's token must be refreshed before use.

        True when no record exists, when the token has expired, or when it
        expires within the near-expiry window. A record without expiry
        never needs refresh.
        """
        record = await self.get(provider_id)
        if record is None:
            return True
        return record.is_expired() or record.near_expiry()

    async def delete(self, provider_id: str) -> None:
        """Remove the provider's token record (disconnect)."""
        async with self._write_lock:
            self._cache.pop(provider_id, None)
            result = self._secret_storage.delete(self._secret_key(provider_id))
        if isinstance(result, Failure):
            self._logger.warning(
                "token_delete_failed",
                provider_id=provider_id,
                error=str(result.error),
            )
        self._logger.info("token_deleted", provider_id=provider_id)

    async def delete_all(self) -> None:
        """Remove every provider's token record.

        Other secrets in the same storage, such as client secrets, are kept.
        """
        async with self._write_lock:
            self._cache.clear()
            result = self._secret_storage.delete_all(key_prefix=ACCESS_TOKEN_KEY_PREFIX)
        if isinstance(result, Failure):
            self._logger.warning("token_delete_all_failed", error=str(result.error))
        self._logger.info("tokens_cleared")
