"""Environment variables secret store.

Read-only SecretStorageProtocol adapter for local development. Converts
secret keys to environment variable names:
    - 'vbank_client_secret' → VBANK_CLIENT_SECRET
    - 'gost-gw_client_secret' → GOST_GW_CLIENT_SECRET
"""

import os

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import SecretsError


class EnvSecretStore:
    """Resolves secrets from the process environment. Writes are refused."""

    @staticmethod
    def env_var_name(key: str) -> str:
        return key.replace("-", "_").replace("/", "_").upper()

    def get(self, key: str) -> Result[bytes | None, SecretsError]:
        value = os.getenv(self.env_var_name(key))
        return Success(value=value.encode("utf-8") if value is not None else None)

    def save(self, key: str, secret: bytes) -> Result[None, SecretsError]:
        return self._read_only(key)

    def delete(self, key: str) -> Result[None, SecretsError]:
        return self._read_only(key)

    def delete_all(self, key_prefix: str = "") -> Result[None, SecretsError]:
        return self._read_only(f"{key_prefix}*")

    @staticmethod
    def _read_only(key: str) -> Result[None, SecretsError]:
        return Failure(
            error=SecretsError(
                code=ErrorCode.SECRET_ACCESS_DENIED,
                message="Environment secret store is read-only",
                details={"key": key},
            )
        )
