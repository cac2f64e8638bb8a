"""Encryption protocol for secrets at rest.

Defines the port for encryption/decryption operations. Infrastructure
implements it with AES-256-GCM.
"""

from dataclasses import dataclass
from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result


# =============================================================================
# Encryption Error Types (Domain Layer)
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class EncryptionError(DomainError):
    """Base encryption error. Used in Result types, never raised."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class EncryptionKeyError(EncryptionError):
    """Key doesn't meet requirements (wrong length, etc.)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class DecryptionError(EncryptionError):
    """Decryption failure.

    Occurs when:
    - Wrong encryption key
    - Data has been tampered with
    - Ciphertext was bound to a different secret key
    """

    pass


# =============================================================================
# Encryption Protocol (Port)
# =============================================================================


class EncryptionProtocol(Protocol):
    """Protocol for authenticated encryption of secret bytes."""

    def encrypt(self, plaintext: bytes, *, context: bytes = b"") -> Result[bytes, EncryptionError]:
        """Encrypt bytes, authenticating the optional context.

        Args:
            plaintext: Bytes to protect.
            context: Associated data that must match on decrypt.

        Returns:
            Success(ciphertext) or Failure(EncryptionError).
        """
        ...

    def decrypt(self, ciphertext: bytes, *, context: bytes = b"") -> Result[bytes, EncryptionError]:
        """Decrypt bytes produced by encrypt() with the same context.

        Returns:
            Success(plaintext) or Failure(DecryptionError).
        """
        ...
