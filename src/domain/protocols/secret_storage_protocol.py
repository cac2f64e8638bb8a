"""Secret storage protocol (port).

Durable, encrypted storage for small secrets: token records and OAuth client
secrets. The token store writes through to it and falls back to it on cache
misses.

Protocol Pattern:
    - Domain defines the PORT (this protocol)
    - Infrastructure implements ADAPTERS (EncryptedSecretStore, EnvSecretStore)
    - Failures are returned, never raised; callers treat them as non-fatal
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import SecretsError


class SecretStorageProtocol(Protocol):
    """Protocol for secret storage backends.

    Implementations must isolate secrets per application namespace and
    encrypt them at rest.
    """

    def save(self, key: str, secret: bytes) -> Result[None, SecretsError]:
        """Store (or overwrite) a secret.

        Args:
            key: Secret key, e.g. 'access_token_vbank'.
            secret: Raw secret bytes.

        Returns:
            Success(None) if stored.
            Failure(SecretsError) if the backend rejected the write.
        """
        ...

    def get(self, key: str) -> Result[bytes | None, SecretsError]:
        """Read a secret.

        Returns:
            Success(bytes) if found, Success(None) if absent.
            Failure(SecretsError) if the secret exists but cannot be read.
        """
        ...

    def delete(self, key: str) -> Result[None, SecretsError]:
        """Delete a secret (no-op when absent)."""
        ...

    def delete_all(self, key_prefix: str = "") -> Result[None, SecretsError]:
        """Delete every secret in this application's namespace.

        Args:
            key_prefix: Only keys starting with this prefix are deleted.
        """
        ...
