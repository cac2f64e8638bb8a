"""Friendly, non-technical descriptions of error codes.

Cosmetic translation layer for whatever surface shows errors to people.
"""

from src.core.enums import ErrorCode
from src.core.errors import DomainError

DEFAULT_USER_MESSAGE = "Something went wrong. Please try again later."

USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_URL: "The bank address is misconfigured.",
    ErrorCode.INVALID_PROVIDER_CONFIGURATION: "This bank connection is misconfigured.",
    ErrorCode.PROVIDER_UNAVAILABLE: "Cannot reach the bank. Check your internet connection.",
    ErrorCode.PROVIDER_TIMEOUT: "The bank took too long to respond. Please try again.",
    ErrorCode.PROVIDER_AUTHENTICATION_FAILED: "Your session has expired. Please reconnect this bank.",
    ErrorCode.PROVIDER_FORBIDDEN: "Access denied. Please grant the bank permission to share your data.",
    ErrorCode.PROVIDER_RESOURCE_NOT_FOUND: "The requested data was not found at the bank.",
    ErrorCode.PROVIDER_RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ErrorCode.PROVIDER_SERVER_ERROR: "The bank is having problems. Please try again later.",
    ErrorCode.PROVIDER_HTTP_ERROR: "The bank rejected the request.",
    ErrorCode.PROVIDER_INVALID_RESPONSE: "The bank sent an unexpected response.",
    ErrorCode.RESPONSE_DECODE_FAILED: "The bank sent data we could not read.",
    ErrorCode.REQUEST_ENCODE_FAILED: "The request could not be prepared.",
    ErrorCode.AUTHORIZATION_CANCELLED: "Bank connection was cancelled.",
    ErrorCode.AUTHORIZATION_CALLBACK_INVALID: "The bank returned an invalid authorization response.",
    ErrorCode.NO_REFRESH_TOKEN: "Please reconnect this bank.",
    ErrorCode.NO_ACCESS_TOKEN: "Please reconnect this bank.",
    ErrorCode.CONSENT_NEGOTIATION_EXHAUSTED: "The bank did not accept the data sharing request.",
    ErrorCode.CONSENT_REQUIRED: "Please grant the bank permission to share your data.",
    ErrorCode.PROVIDER_NOT_FOUND: "This bank is not connected.",
    ErrorCode.ACCOUNT_NOT_FOUND: "Account not found.",
    ErrorCode.BUDGET_NOT_FOUND: "Budget not found.",
    ErrorCode.SYNC_FAILED: "Syncing this bank failed. Please try again later.",
}


def user_message(error: DomainError | ErrorCode) -> str:
    """Translate an error (or bare code) to a user-facing description.

    Args:
        error: Error value or its code.

    Returns:
        Localizable description, or a generic message for unmapped codes.

    Example:
        >>> user_message(ErrorCode.PROVIDER_AUTHENTICATION_FAILED)
        'Your session has expired. Please reconnect this bank.'
    """
    code = error if isinstance(error, ErrorCode) else error.code
    return USER_MESSAGES.get(code, DEFAULT_USER_MESSAGE)
