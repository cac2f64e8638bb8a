"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance
(PEP 544 structural typing).

Usage:
    from src.domain.protocols import BankAdapterProtocol, TransactionRepository
"""

from src.domain.protocols.account_repository import AccountRepository
from src.domain.protocols.bank_adapter_protocol import (
    BalanceData,
    BankAdapterProtocol,
    BankInfoData,
    CardData,
    OAuthTokens,
    ProviderAccountData,
    ProviderTransactionData,
)
from src.domain.protocols.budget_repository import BudgetRepository
from src.domain.protocols.connected_provider_repository import (
    ConnectedProviderRepository,
)
from src.domain.protocols.encryption_protocol import (
    DecryptionError,
    EncryptionError,
    EncryptionKeyError,
    EncryptionProtocol,
)
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_protocol import NotificationSinkProtocol
from src.domain.protocols.secret_storage_protocol import SecretStorageProtocol
from src.domain.protocols.transaction_repository import TransactionRepository

__all__ = [
    "AccountRepository",
    "BalanceData",
    "BankAdapterProtocol",
    "BankInfoData",
    "BudgetRepository",
    "CardData",
    "ConnectedProviderRepository",
    "DecryptionError",
    "EncryptionError",
    "EncryptionKeyError",
    "EncryptionProtocol",
    "LoggerProtocol",
    "NotificationSinkProtocol",
    "OAuthTokens",
    "ProviderAccountData",
    "ProviderTransactionData",
    "SecretStorageProtocol",
    "TransactionRepository",
]
