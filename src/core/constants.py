"""Centralized constants for protocol and implementation details.

This module contains constants that are fixed by provider protocols or are
internal implementation details, NOT environment-specific configuration. For
environment-specific settings, use `src/core/config.py` instead.

Categories:
- Token lifecycle: Expiry windows and secret storage keys
- Headers: Names of provider-specific HTTP headers
- Paths: Candidate endpoint paths probed across providers
- Consent: Requested permission scopes
- Limits: Truncation and safety limits

Example:
    >>> from src.core.constants import BEARER_PREFIX
    >>> header = f"{BEARER_PREFIX}{access_token}"
"""

# =============================================================================
# Token Lifecycle
# =============================================================================

TOKEN_NEAR_EXPIRY_SECONDS: int = 300
"""A token expiring within this many seconds needs refresh."""

ACCESS_TOKEN_SECRET_KEY: str = "access_token_{provider_id}"
"""Secret storage key template for a provider's token record."""

ACCESS_TOKEN_KEY_PREFIX: str = "access_token_"
"""Common prefix of every token record key."""

CLIENT_SECRET_KEY: str = "{provider_id}_client_secret"
"""Secret storage key template for a provider's OAuth client secret."""

AES_KEY_LENGTH: int = 32
"""AES-256 encryption key length in bytes."""

PKCE_VERIFIER_BYTES: int = 32
"""Random bytes behind a PKCE code verifier (43 characters once encoded)."""


# =============================================================================
# Timeouts
# =============================================================================

PROVIDER_TIMEOUT_DEFAULT: float = 30.0
"""Default timeout for external provider API calls in seconds."""

RETRY_MAX_ATTEMPTS_DEFAULT: int = 3
"""Retries after the first attempt for retryable failures."""

RETRY_BASE_DELAY_DEFAULT: float = 2.0
"""Backoff base delay in seconds."""


# =============================================================================
# Headers
# =============================================================================

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""

HEADER_REQUESTING_BANK: str = "X-Requesting-Bank"
"""Identifies the requesting party to standard providers."""

HEADER_CONSENT_ID: str = "X-Consent-Id"
"""Carries the granted consent identifier on data requests."""

HEADER_SIGNATURE: str = "X-Signature"
"""Request signature attached by the gateway signer."""

HEADER_TIMESTAMP: str = "X-Timestamp"
"""Unix timestamp covered by the gateway signature."""

SENSITIVE_HEADER_MARKERS: tuple[str, ...] = ("authorization", "secret")
"""Header names containing any of these are truncated before logging."""


# =============================================================================
# Paths
# =============================================================================

CONSENT_CANDIDATE_PATHS: tuple[str, ...] = (
    "/account-consents/request",
    "/api/v1/account-consents/request",
    "/api/v1/consents",
    "/consents",
)
"""Consent creation routes, probed in order until one answers."""

CONSENT_DETAIL_PATH: str = "/api/v1/account-consents/{consent_id}"
"""Fixed route for consent status and revocation."""

ACCOUNT_CANDIDATE_PATHS: tuple[str, ...] = (
    "/accounts",
    "/api/v1/accounts",
    "/api/accounts",
)
"""Account listing routes on standard providers, probed in order."""

STANDARD_BANK_TOKEN_PATH: str = "/auth/bank-token"
"""Client-credentials route on standard providers (credentials as query)."""

GATEWAY_API_PREFIX: str = "/api/rb/rewardsPay/hackathon/v1"
"""Path prefix for every gateway API call."""


# =============================================================================
# Consent
# =============================================================================

CONSENT_PERMISSIONS: tuple[str, ...] = (
    "ReadAccountsDetail",
    "ReadBalances",
    "ReadTransactionsDetail",
)
"""Permission scopes requested with every account consent."""

CONSENT_REASON: str = "Account aggregation for personal finance management"
"""Human-readable reason sent with consent requests."""


# =============================================================================
# Response Limits
# =============================================================================

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum length for response bodies in logs and error details."""

SENSITIVE_HEADER_VISIBLE_CHARS: int = 20
"""Characters of a sensitive header value kept in logs."""
