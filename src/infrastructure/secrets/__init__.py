"""Secret storage adapters implementing SecretStorageProtocol.

Architecture:
- EncryptionService: AES-256-GCM cipher for secrets at rest
- EncryptedSecretStore: Namespaced, encrypted store (token records, client secrets)
- EnvSecretStore: Read-only store resolving secrets from environment variables
- Use src.core.container.get_secret_storage() for dependency injection
"""

from src.infrastructure.secrets.encrypted_secret_store import EncryptedSecretStore
from src.infrastructure.secrets.encryption_service import EncryptionService
from src.infrastructure.secrets.env_secret_store import EnvSecretStore

__all__ = [
    "EncryptedSecretStore",
    "EncryptionService",
    "EnvSecretStore",
]
