"""Encrypted in-process secret store.

Implements SecretStorageProtocol over a dict of AES-GCM blobs. Keys are
prefixed with the application namespace so that delete_all() only removes
this application's secrets, and each blob is bound to its full key.
"""

import structlog

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import SecretsError
from src.domain.protocols import EncryptionProtocol


class EncryptedSecretStore:
    """Namespaced, encrypted secret storage.

    Example:
        >>> store = EncryptedSecretStore(encryption=service, namespace="openbank-aggregator")
        >>> store.save("vbank_client_secret", b"s3cret")
        >>> store.get("vbank_client_secret")
        Success(value=b's3cret')
    """

    def __init__(
        self,
        *,
        encryption: EncryptionProtocol,
        namespace: str,
        backing: dict[str, bytes] | None = None,
    ) -> None:
        """Initialize secret store.

        Args:
            encryption: Cipher used for every stored blob.
            namespace: Application namespace (key prefix).
            backing: Shared blob map, e.g. to let two stores see the same data.
        """
        self._encryption = encryption
        self._prefix = f"{namespace}:"
        self._blobs: dict[str, bytes] = backing if backing is not None else {}
        self._logger = structlog.get_logger("secret_store")

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def save(self, key: str, secret: bytes) -> Result[None, SecretsError]:
        full_key = self._full_key(key)
        result = self._encryption.encrypt(secret, context=full_key.encode("utf-8"))
        if isinstance(result, Failure):
            return Failure(
                error=SecretsError(
                    code=ErrorCode.ENCRYPTION_FAILED,
                    message=f"Could not encrypt secret: {key}",
                    details={"cause": result.error.message},
                )
            )
        self._blobs[full_key] = result.value
        return Success(value=None)

    def get(self, key: str) -> Result[bytes | None, SecretsError]:
        full_key = self._full_key(key)
        blob = self._blobs.get(full_key)
        if blob is None:
            return Success(value=None)

        result = self._encryption.decrypt(blob, context=full_key.encode("utf-8"))
        if isinstance(result, Failure):
            self._logger.warning("secret_decrypt_failed", key=key)
            return Failure(
                error=SecretsError(
                    code=ErrorCode.SECRET_ACCESS_DENIED,
                    message=f"Stored secret could not be decrypted: {key}",
                )
            )
        return Success(value=result.value)

    def delete(self, key: str) -> Result[None, SecretsError]:
        self._blobs.pop(self._full_key(key), None)
        return Success(value=None)

    def delete_all(self, key_prefix: str = "") -> Result[None, SecretsError]:
        scope = self._full_key(key_prefix)
        for full_key in [k for k in self._blobs if k.startswith(scope)]:
            del self._blobs[full_key]
        return Success(value=None)
