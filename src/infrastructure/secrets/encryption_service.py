"""Encryption service for secrets at rest.

Provides AES-256-GCM encryption for the token records and client secrets
kept by the secret store.

Security Properties:
    - Confidentiality: Only holder of key can decrypt
    - Integrity: Tampering is detected via GCM authentication tag
    - Binding: Ciphertext is bound to its context (the secret key name), so
      a blob copied under another key fails to decrypt

Architecture:
    - Infrastructure adapter (catches cryptography exceptions)
    - Implements EncryptionProtocol
    - Returns Result types (railway-oriented programming)
"""

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from src.core.constants import AES_KEY_LENGTH
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.protocols import (
    DecryptionError,
    EncryptionError,
    EncryptionKeyError,
)


class EncryptionService:
    """AES-256-GCM encryption service.

    Format:
        Encrypted bytes = IV (12 bytes) || ciphertext || auth_tag (16 bytes)

    Usage:
        >>> match EncryptionService.create(os.urandom(32)):
        ...     case Success(value=service):
        ...         blob = service.encrypt(b"secret", context=b"access_token_vbank")
        ...     case Failure(error=error):
        ...         ...

    Thread Safety:
        The AESGCM instance can be used concurrently.
    """

    IV_SIZE = 12  # 96 bits - NIST recommended for GCM
    MIN_ENCRYPTED_SIZE = 12 + 16  # IV + auth tag

    def __init__(self, aesgcm: AESGCM) -> None:
        """Initialize with pre-validated AESGCM instance.

        Use EncryptionService.create() factory instead of direct construction.
        """
        self._aesgcm = aesgcm

    @classmethod
    def create(cls, key: bytes) -> Result["EncryptionService", EncryptionKeyError]:
        """Create encryption service with validated key.

        Args:
            key: 32-byte (256-bit) encryption key.

        Returns:
            Success(EncryptionService) if key is valid.
            Failure(EncryptionKeyError) if key is invalid.
        """
        if len(key) != AES_KEY_LENGTH:
            return Failure(
                error=EncryptionKeyError(
                    code=ErrorCode.ENCRYPTION_KEY_INVALID,
                    message=(
                        f"Encryption key must be exactly {AES_KEY_LENGTH} bytes, "
                        f"got {len(key)} bytes"
                    ),
                    details={
                        "expected_length": str(AES_KEY_LENGTH),
                        "actual_length": str(len(key)),
                    },
                )
            )
        return Success(value=cls(AESGCM(key)))

    def encrypt(self, plaintext: bytes, *, context: bytes = b"") -> Result[bytes, EncryptionError]:
        """Encrypt bytes with a random IV.

        Args:
            plaintext: Bytes to encrypt.
            context: Associated data authenticated with the ciphertext.

        Returns:
            Success(IV || ciphertext || tag) or Failure(EncryptionError).
        """
        try:
            iv = os.urandom(self.IV_SIZE)
            ciphertext = self._aesgcm.encrypt(iv, plaintext, context or None)
        except (TypeError, ValueError, OverflowError) as e:
            return Failure(
                error=EncryptionError(
                    code=ErrorCode.ENCRYPTION_FAILED,
                    message=f"Encryption failed: {e}",
                )
            )
        return Success(value=iv + ciphertext)

    def decrypt(self, ciphertext: bytes, *, context: bytes = b"") -> Result[bytes, EncryptionError]:
        """Decrypt bytes produced by encrypt() with the same context.

        Returns:
            Success(plaintext).
            Failure(DecryptionError) if the data is short, tampered, bound to
            another context, or encrypted under another key.
        """
        if len(ciphertext) < self.MIN_ENCRYPTED_SIZE:
            return Failure(
                error=DecryptionError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message=(
                        f"Encrypted data too short: {len(ciphertext)} bytes "
                        f"(minimum {self.MIN_ENCRYPTED_SIZE} bytes)"
                    ),
                )
            )

        iv = ciphertext[: self.IV_SIZE]
        try:
            return Success(
                value=self._aesgcm.decrypt(iv, ciphertext[self.IV_SIZE :], context or None)
            )
        except InvalidTag:
            return Failure(
                error=DecryptionError(
                    code=ErrorCode.DECRYPTION_FAILED,
                    message="Failed to decrypt secret: invalid key or tampered data",
                )
            )
