"""OAuth token lifecycle: token store, exchanges, interactive sessions."""

from src.infrastructure.auth.authorization_session import (
    AuthorizationCancelled,
    AuthorizationSession,
)
from src.infrastructure.auth.oauth_gateway import AuthorizationOutcome, OAuthGateway
from src.infrastructure.auth.token_store import TokenStore

__all__ = [
    "AuthorizationCancelled",
    "AuthorizationOutcome",
    "AuthorizationSession",
    "OAuthGateway",
    "TokenStore",
]
