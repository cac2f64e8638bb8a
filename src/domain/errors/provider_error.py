"""Provider error types for the HTTP and adapter contracts.

These errors define every failure a provider interaction can produce, from
transport problems to unexpected payloads. They flow back to callers inside
Failure results.

Architecture:
- Domain layer errors (part of protocol contract)
- Inherit from DomainError (core layer)
- Infrastructure (HTTP client, gateways, adapters) returns these errors

Usage:
    from src.domain.errors import ProviderError, ProviderAuthenticationError
    from src.core.result import Result, Success, Failure

    async def list_accounts(self) -> Result[list[Account], ProviderError]:
        if response.status_code == 401:
            return Failure(ProviderAuthenticationError(...))
        return Success(accounts)
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode
from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderError(DomainError):
    """Base banking provider error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        provider_name: Identifier of the provider (vbank, gost, etc.).
        status_code: HTTP status when the failure came from a response.
        details: Additional context (request path, provider error payload).
    """

    provider_name: str
    status_code: int | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderConfigurationError(ProviderError):
    """Provider descriptor or request URL is unusable.

    Raised when:
    - A base URL or endpoint is not an absolute http(s) URL
    - A gateway provider is missing its client secret

    Recovery: Fix the provider configuration.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderAuthenticationError(ProviderError):
    """Provider rejected our credentials (HTTP 401).

    Recovery: Refresh the token, or re-run the authorization flow.

    Attributes:
        is_token_expired: Whether the error is due to token expiration.
    """

    is_token_expired: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderForbiddenError(ProviderError):
    """Provider refused access (HTTP 403).

    On data endpoints this usually means the account consent is missing or
    was not approved yet.

    Attributes:
        consent_required: True when the request was a consent-scoped data call.
    """

    consent_required: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderResourceNotFoundError(ProviderError):
    """Provider answered 404 for a path.

    Absorbed by path probing; surfaced only once every candidate is exhausted.

    Attributes:
        path: Request path that was not found.
    """

    path: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderUnavailableError(ProviderError):
    """Provider could not be reached or failed on its side.

    Raised when:
    - Provider API returns 5xx errors
    - Connection timeout occurs
    - DNS resolution or TLS handshake fails

    Recovery: Retry with exponential backoff.

    Attributes:
        is_transient: Whether the error is likely transient (True = retry).
        retry_after: Suggested retry delay in seconds (from provider).
    """

    is_transient: bool = True
    retry_after: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderRateLimitError(ProviderError):
    """Provider rate limit exceeded (HTTP 429).

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header).
    """

    retry_after: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderHTTPError(ProviderError):
    """Any other non-2xx status (400, 405, 409, 422, ...).

    Attributes:
        response_body: Truncated raw body for debugging.
    """

    response_body: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderInvalidResponseError(ProviderError):
    """Provider returned a body we could not interpret.

    Raised when:
    - Response is not JSON
    - Required fields are missing
    - Response doesn't match the expected schema

    Recovery: Log for investigation, may need code update.

    Attributes:
        response_body: Truncated raw body for debugging.
    """

    response_body: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderRequestEncodeError(ProviderError):
    """Request body could not be serialized. Nothing was sent."""

    pass


RETRYABLE_ERROR_CODES: frozenset[ErrorCode] = frozenset(
    {
        ErrorCode.PROVIDER_UNAVAILABLE,
        ErrorCode.PROVIDER_TIMEOUT,
        ErrorCode.PROVIDER_SERVER_ERROR,
        ErrorCode.PROVIDER_RATE_LIMITED,
    }
)


def is_retryable(error: ProviderError) -> bool:
    """Whether the HTTP client may re-issue the request after this error.

    Transport failures, timeouts, 5xx and 429 are retried. Everything else
    (other 4xx, decode and encode errors) propagates immediately.

    Args:
        error: Error returned by a request attempt.

    Returns:
        True if the error is retryable.
    """
    return error.code in RETRYABLE_ERROR_CODES
