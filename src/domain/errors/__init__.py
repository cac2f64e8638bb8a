"""Domain error types.

Usage:
    from src.domain.errors import ProviderError, OAuthError, is_retryable
"""

from src.domain.errors.consent_error import ConsentError
from src.domain.errors.oauth_error import OAuthError
from src.domain.errors.provider_error import (
    ProviderAuthenticationError,
    ProviderConfigurationError,
    ProviderError,
    ProviderForbiddenError,
    ProviderHTTPError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderRequestEncodeError,
    ProviderResourceNotFoundError,
    ProviderUnavailableError,
    is_retryable,
)
from src.domain.errors.secrets_error import SecretsError
from src.domain.errors.user_messages import user_message

__all__ = [
    "ConsentError",
    "OAuthError",
    "ProviderAuthenticationError",
    "ProviderConfigurationError",
    "ProviderError",
    "ProviderForbiddenError",
    "ProviderHTTPError",
    "ProviderInvalidResponseError",
    "ProviderRateLimitError",
    "ProviderRequestEncodeError",
    "ProviderResourceNotFoundError",
    "ProviderUnavailableError",
    "SecretsError",
    "is_retryable",
    "user_message",
]
