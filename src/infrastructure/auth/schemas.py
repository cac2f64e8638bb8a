"""Token endpoint wire schema.

Token envelopes use snake_case field names (access_token, expires_in, ...).
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.protocols import OAuthTokens


class TokenResponse(BaseModel):
    """OAuth token envelope as returned by a token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1, description="Bearer access token")
    refresh_token: str | None = Field(None, description="Refresh token, if issued")
    id_token: str | None = Field(None, description="OpenID identity token")
    token_type: str = Field("Bearer", description="Token type")
    expires_in: int | None = Field(None, ge=0, description="Lifetime in seconds")
    scope: str | None = Field(None, description="Granted scope")

    def to_tokens(self) -> OAuthTokens:
        """Convert to the domain token envelope."""
        return OAuthTokens(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            id_token=self.id_token,
            token_type=self.token_type,
            expires_in=self.expires_in,
            scope=self.scope,
        )
