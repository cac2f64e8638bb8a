"""OAuth gateway for banking providers.

Token exchange and refresh against provider token endpoints. Successful
exchanges are written to the TokenStore.

Supported flows:
    - Client credentials: gateway providers POST a form to the well-known
      token endpoint; standard providers pass credentials as query
      parameters on {base_url}/auth/bank-token.
    - Authorization code with PKCE (S256): interactive, standard providers.
    - Refresh token.

Architecture:
    - Infrastructure layer (adapter for provider token endpoints)
    - Uses HTTPClient (retry/backoff, error mapping)
    - Returns Result types (no exceptions for business errors)
"""

from collections.abc import Awaitable, Callable
from urllib.parse import urlencode

import structlog

from src.core.constants import STANDARD_BANK_TOKEN_PATH
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import OAuthError, ProviderConfigurationError, ProviderError
from src.domain.value_objects import ProviderDescriptor, TokenRecord
from src.infrastructure.auth.authorization_session import (
    AuthorizationCancelled,
    AuthorizationSession,
)
from src.infrastructure.auth.pkce import (
    code_challenge_s256,
    generate_code_verifier,
    generate_state,
)
from src.infrastructure.auth.schemas import TokenResponse
from src.infrastructure.auth.token_store import TokenStore
from src.infrastructure.http import HTTPClient

logger = structlog.get_logger(__name__)

type AuthorizationOutcome = (
    Success[TokenRecord] | Failure[ProviderError] | AuthorizationCancelled
)
type UserAgentLauncher = Callable[[AuthorizationSession], Awaitable[None]]


class OAuthGateway:
    """Token exchange, refresh and validity checks for providers.

    Attributes:
        token_store: Store updated by every successful exchange.

    Example:
        >>> gateway = OAuthGateway(http_client=HTTPClient(), token_store=store)
        >>> match await gateway.get_valid_access_token(descriptor):
        ...     case Success(value=access_token):
        ...         headers = {"Authorization": f"Bearer {access_token}"}
        ...     case Failure(error=error):
        ...         logger.warning("no_token", error=str(error))
    """

    def __init__(self, *, http_client: HTTPClient, token_store: TokenStore) -> None:
        """Initialize OAuth gateway.

        Args:
            http_client: Client used for token endpoint calls.
            token_store: Store receiving exchanged tokens.
        """
        self._http_client = http_client
        self.token_store = token_store

    # =========================================================================
    # Client credentials
    # =========================================================================

    async def client_credentials(
        self, descriptor: ProviderDescriptor
    ) -> Result[TokenRecord, ProviderError]:
        """Obtain a token with the client-credentials grant.

        Args:
            descriptor: Provider to authenticate against. Requires a client secret.

        Returns:
            Success(TokenRecord) after storing the new token.
            Failure(ProviderConfigurationError) without a client secret.
            Failure(ProviderError) if the exchange fails.
        """
        oauth = descriptor.oauth
        if not oauth.client_secret:
            return Failure(
                error=ProviderConfigurationError(
                    code=ErrorCode.INVALID_PROVIDER_CONFIGURATION,
                    message=f"Provider {descriptor.id} has no client secret for client credentials",
                    provider_name=descriptor.id,
                    field="client_secret",
                )
            )

        logger.info(
            "oauth_client_credentials_started",
            provider=descriptor.id,
            gateway=descriptor.is_gateway,
        )
        client = self._http_client.for_provider(descriptor.id)
        credentials = {
            "grant_type": "client_credentials",
            "client_id": oauth.client_id,
            "client_secret": oauth.client_secret,
        }
        if descriptor.is_gateway:
            result = await client.execute_and_decode(
                "POST",
                oauth.token_endpoint,
                TokenResponse,
                form=credentials,
                headers={"Accept": "application/json"},
                operation="client_credentials",
            )
        else:
            result = await client.execute_and_decode(
                "POST",
                f"{descriptor.base_url}{STANDARD_BANK_TOKEN_PATH}",
                TokenResponse,
                params={"client_id": oauth.client_id, "client_secret": oauth.client_secret},
                headers={"Accept": "application/json"},
                operation="client_credentials",
            )
        return await self._store(descriptor, result, "client_credentials")

    # =========================================================================
    # Authorization code (interactive)
    # =========================================================================

    def start_authorization(self, descriptor: ProviderDescriptor) -> AuthorizationSession:
        """Prepare an interactive authorization attempt.

        Must be called from a running event loop.

        Args:
            descriptor: Provider to connect.

        Returns:
            Session holding the authorization URL, state and PKCE verifier.
        """
        oauth = descriptor.oauth
        verifier = generate_code_verifier()
        state = generate_state()
        query = urlencode(
            {
                "client_id": oauth.client_id,
                "redirect_uri": oauth.redirect_uri,
                "response_type": "code",
                "scope": " ".join(oauth.scopes),
                "state": state,
                "code_challenge": code_challenge_s256(verifier),
                "code_challenge_method": "S256",
            }
        )
        separator = "&" if "?" in oauth.authorization_endpoint else "?"
        return AuthorizationSession(
            provider_id=descriptor.id,
            authorization_url=f"{oauth.authorization_endpoint}{separator}{query}",
            state=state,
            code_verifier=verifier,
            redirect_uri=oauth.redirect_uri,
        )

    async def authenticate(
        self,
        descriptor: ProviderDescriptor,
        launcher: UserAgentLauncher,
    ) -> AuthorizationOutcome:
        """Run the interactive authorization-code flow.

        The launcher opens session.authorization_url in a user agent and
        arranges for session.complete(callback_url) or session.cancel() to
        be called. Nothing is written to the token store unless the code
        exchange succeeds.

        Args:
            descriptor: Provider to connect.
            launcher: Starts the user-agent flow.

        Returns:
            Success(TokenRecord), Failure(ProviderError), or
            AuthorizationCancelled when the user aborted.
        """
        session = self.start_authorization(descriptor)
        logger.info("oauth_authorization_started", provider=descriptor.id)
        await launcher(session)

        resolution = await session.wait()
        if isinstance(resolution, AuthorizationCancelled):
            logger.info("oauth_authorization_cancelled", provider=descriptor.id)
            return resolution
        if isinstance(resolution, OAuthError):
            logger.warning(
                "oauth_authorization_failed",
                provider=descriptor.id,
                error=str(resolution),
            )
            return Failure(error=resolution)

        code_result = session.extract_code(resolution.url)
        if isinstance(code_result, Failure):
            logger.warning(
                "oauth_callback_invalid",
                provider=descriptor.id,
                error=str(code_result.error),
            )
            return code_result

        return await self.exchange_code(descriptor, code_result.value, session.code_verifier)

    async def exchange_code(
        self,
        descriptor: ProviderDescriptor,
        code: str,
        code_verifier: str | None = None,
    ) -> Result[TokenRecord, ProviderError]:
        """Exchange an authorization code for tokens.

        Args:
            descriptor: Provider that issued the code.
            code: Authorization code from the callback.
            code_verifier: PKCE verifier matching the challenge sent.

        Returns:
            Success(TokenRecord) after storing, or Failure(ProviderError).
        """
        oauth = descriptor.oauth
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": oauth.redirect_uri,
            "client_id": oauth.client_id,
        }
        if code_verifier:
            form["code_verifier"] = code_verifier
        if oauth.client_secret:
            form["client_secret"] = oauth.client_secret

        logger.info("oauth_token_exchange_started", provider=descriptor.id)
        result = await self._http_client.for_provider(descriptor.id).execute_and_decode(
            "POST",
            oauth.token_endpoint,
            TokenResponse,
            form=form,
            headers={"Accept": "application/json"},
            operation="token_exchange",
        )
        return await self._store(descriptor, result, "exchange")

    # =========================================================================
    # Refresh
    # =========================================================================

    async def refresh_token(
        self, descriptor: ProviderDescriptor
    ) -> Result[TokenRecord, ProviderError]:
        """Refresh the provider's access token.

        Gateway providers never issue refresh tokens; for them a refresh is
        a new client-credentials exchange.

        Args:
            descriptor: Provider whose token is refreshed.

        Returns:
            Success(TokenRecord) after overwriting the store.
            Failure(OAuthError) with NO_REFRESH_TOKEN if none is stored.
            Failure(ProviderError) if the refresh call fails.
        """
        if descriptor.is_gateway:
            return await self.client_credentials(descriptor)

        refresh_token = await self.token_store.get_refresh(descriptor.id)
        if refresh_token is None:
            logger.info("oauth_refresh_skipped_no_refresh_token", provider=descriptor.id)
            return Failure(
                error=OAuthError(
                    code=ErrorCode.NO_REFRESH_TOKEN,
                    message=f"No refresh token stored for {descriptor.id}",
                    provider_name=descriptor.id,
                )
            )

        oauth = descriptor.oauth
        form = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": oauth.client_id,
            "redirect_uri": oauth.redirect_uri,
        }
        if oauth.client_secret:
            form["client_secret"] = oauth.client_secret

        logger.info("oauth_token_refresh_started", provider=descriptor.id)
        result = await self._http_client.for_provider(descriptor.id).execute_and_decode(
            "POST",
            oauth.token_endpoint,
            TokenResponse,
            form=form,
            headers={"Accept": "application/json"},
            operation="token_refresh",
        )
        return await self._store(descriptor, result, "refresh")

    async def get_valid_access_token(
        self, descriptor: ProviderDescriptor
    ) -> Result[str, ProviderError]:
        """Return an access token that is not about to expire.

        Refreshes once when the store says the token needs refresh. A
        standard provider without a refresh token but with a client secret
        falls back to the bank-token client-credentials exchange.

        Args:
            descriptor: Provider whose token is needed.

        Returns:
            Success(access_token).
            Failure(OAuthError) with NO_ACCESS_TOKEN if no usable token
            exists after the refresh attempt.
        """
        if await self.token_store.needs_refresh(descriptor.id):
            refreshed = await self.refresh_token(descriptor)
            if isinstance(refreshed, Success):
                return Success(value=refreshed.value.access_token)

            error = refreshed.error
            logger.warning(
                "oauth_refresh_failed",
                provider=descriptor.id,
                error=str(error),
            )
            if error.code == ErrorCode.NO_REFRESH_TOKEN and descriptor.oauth.client_secret:
                fallback = await self.client_credentials(descriptor)
                if isinstance(fallback, Success):
                    return Success(value=fallback.value.access_token)

        record = await self.token_store.get(descriptor.id)
        if record is None or record.is_expired():
            return Failure(
                error=OAuthError(
                    code=ErrorCode.NO_ACCESS_TOKEN,
                    message=f"No valid access token for {descriptor.id}",
                    provider_name=descriptor.id,
                )
            )
        return Success(value=record.access_token)

    async def disconnect(self, provider_id: str) -> None:
        """Forget the provider's tokens."""
        await self.token_store.delete(provider_id)

    async def _store(
        self,
        descriptor: ProviderDescriptor,
        result: Result[TokenResponse, ProviderError],
        operation: str,
    ) -> Result[TokenRecord, ProviderError]:
        if isinstance(result, Failure):
            logger.warning(
                f"oauth_token_{operation}_failed",
                provider=descriptor.id,
                error=str(result.error),
            )
            return result

        record = await self.token_store.save(descriptor.id, result.value.to_tokens())
        logger.info(
            f"oauth_token_{operation}_succeeded",
            provider=descriptor.id,
            expires_at=record.expires_at.isoformat() if record.expires_at else None,
        )
        return Success(value=record)
