"""Machine-readable error codes.

Error codes follow ENTITY_ACTION_REASON naming convention and are carried by
every DomainError flowing through Result types.

Categories:
- Configuration errors (INVALID_*)
- Transport and HTTP errors (PROVIDER_*)
- Payload errors (*_DECODE_FAILED, *_ENCODE_FAILED)
- OAuth errors (AUTHORIZATION_*, NO_*_TOKEN)
- Consent errors (CONSENT_*)
- Resource errors (*_NOT_FOUND)
- Sync errors (SYNC_FAILED)
- Secrets and encryption errors (SECRET_*, ENCRYPTION_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Configuration errors
    INVALID_URL = "invalid_url"
    INVALID_PROVIDER_CONFIGURATION = "invalid_provider_configuration"

    # Transport and HTTP errors
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PROVIDER_TIMEOUT = "provider_timeout"
    PROVIDER_AUTHENTICATION_FAILED = "provider_authentication_failed"
    PROVIDER_FORBIDDEN = "provider_forbidden"
    PROVIDER_RESOURCE_NOT_FOUND = "provider_resource_not_found"
    PROVIDER_RATE_LIMITED = "provider_rate_limited"
    PROVIDER_SERVER_ERROR = "provider_server_error"
    PROVIDER_HTTP_ERROR = "provider_http_error"
    PROVIDER_INVALID_RESPONSE = "provider_invalid_response"

    # Payload errors
    RESPONSE_DECODE_FAILED = "response_decode_failed"
    REQUEST_ENCODE_FAILED = "request_encode_failed"

    # OAuth errors
    AUTHORIZATION_CANCELLED = "authorization_cancelled"
    AUTHORIZATION_CALLBACK_INVALID = "authorization_callback_invalid"
    NO_REFRESH_TOKEN = "no_refresh_token"
    NO_ACCESS_TOKEN = "no_access_token"

    # Consent errors
    CONSENT_NEGOTIATION_EXHAUSTED = "consent_negotiation_exhausted"
    CONSENT_REQUIRED = "consent_required"

    # Resource errors
    PROVIDER_NOT_FOUND = "provider_not_found"
    ACCOUNT_NOT_FOUND = "account_not_found"
    BUDGET_NOT_FOUND = "budget_not_found"

    # Sync errors
    SYNC_FAILED = "sync_failed"

    # Secrets management errors
    SECRET_NOT_FOUND = "secret_not_found"
    SECRET_ACCESS_DENIED = "secret_access_denied"
    SECRET_INVALID_JSON = "secret_invalid_json"

    # Encryption errors
    ENCRYPTION_KEY_INVALID = "encryption_key_invalid"
    ENCRYPTION_FAILED = "encryption_failed"
    DECRYPTION_FAILED = "decryption_failed"
