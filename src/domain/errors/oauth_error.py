"""OAuth error types.

Covers token lifecycle failures that are not plain HTTP errors: missing
tokens, invalid authorization callbacks, and user cancellation.

Cancellation is modelled as AuthorizationCancelled, a distinct outcome of the
interactive flow, not an OAuthError.
"""

from dataclasses import dataclass

from src.domain.errors.provider_error import ProviderError


@dataclass(frozen=True, slots=True, kw_only=True)
class OAuthError(ProviderError):
    """Token lifecycle failure.

    Codes:
        NO_REFRESH_TOKEN: Refresh requested but no refresh token is stored.
        NO_ACCESS_TOKEN: No usable access token even after refreshing.
        AUTHORIZATION_CALLBACK_INVALID: Redirect lacked a code or state mismatched.
    """

    pass
