"""Interactive authorization session.

One authorization-code attempt: the URL to open in a user agent, the PKCE
verifier and state, and a future that resolves exactly once with the
callback URL, a cancellation, or a failure. Whichever of complete(),
cancel() or fail() runs first wins; later calls are ignored and return
False.
"""

import asyncio
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import OAuthError


@dataclass(frozen=True, kw_only=True)
class AuthorizationCancelled:
    """Terminal outcome: the user aborted the authorization flow."""

    provider_id: str


@dataclass(frozen=True, kw_only=True)
class _Callback:
    url: str


type _Resolution = _Callback | AuthorizationCancelled | OAuthError


class AuthorizationSession:
    """Single-shot authorization attempt.

    Attributes:
        provider_id: Provider being connected.
        authorization_url: URL the user agent must open.
        state: Expected state value on callback.
        code_verifier: PKCE verifier sent with the code exchange.
        redirect_uri: Redirect URI sent with the code exchange.
    """

    def __init__(
        self,
        *,
        provider_id: str,
        authorization_url: str,
        state: str,
        code_verifier: str,
        redirect_uri: str,
    ) -> None:
        self.provider_id = provider_id
        self.authorization_url = authorization_url
        self.state = state
        self.code_verifier = code_verifier
        self.redirect_uri = redirect_uri
        self._future: asyncio.Future[_Resolution] = asyncio.get_running_loop().create_future()

    @property
    def is_resolved(self) -> bool:
        return self._future.done()

    def _resolve(self, resolution: _Resolution) -> bool:
        if self._future.done():
            return False
        self._future.set_result(resolution)
        return True

    def complete(self, callback_url: str) -> bool:
        """Deliver the redirect URL received by the user agent."""
        return self._resolve(_Callback(url=callback_url))

    def cancel(self) -> bool:
        """Record that the user aborted the flow."""
        return self._resolve(AuthorizationCancelled(provider_id=self.provider_id))

    def fail(self, error: OAuthError) -> bool:
        """Record that the user agent could not run the flow."""
        return self._resolve(error)

    async def wait(self) -> _Resolution:
        """Wait for the first resolution.

        If the waiting task itself is cancelled the session is resolved as
        cancelled before the CancelledError propagates.
        """
        try:
            return await asyncio.shield(self._future)
        except asyncio.CancelledError:
            self.cancel()
            raise

    def extract_code(self, callback_url: str) -> Result[str, OAuthError]:
        """Validate a callback URL and pull the authorization code from it.

        Args:
            callback_url: Redirect URL including the query string.

        Returns:
            Success(code) or Failure(OAuthError) when the provider reported
            an error, the state does not match, or no code is present.
        """
        query = parse_qs(urlsplit(callback_url).query)

        def first(name: str) -> str | None:
            values = query.get(name)
            return values[0] if values else None

        provider_error = first("error")
        if provider_error is not None:
            return Failure(
                error=self._callback_error(
                    f"Provider returned error: {provider_error}",
                    {"error": provider_error, "error_description": first("error_description") or ""},
                )
            )
        if first("state") != self.state:
            return Failure(error=self._callback_error("State mismatch in authorization callback"))
        code = first("code")
        if not code:
            return Failure(error=self._callback_error("Authorization callback carries no code"))
        return Success(value=code)

    def _callback_error(self, message: str, details: dict[str, str] | None = None) -> OAuthError:
        return OAuthError(
            code=ErrorCode.AUTHORIZATION_CALLBACK_INVALID,
            message=message,
            provider_name=self.provider_id,
            details=details,
        )
