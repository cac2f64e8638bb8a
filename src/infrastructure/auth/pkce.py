"""PKCE (RFC 7636) helpers for the authorization-code flow."""

import base64
import hashlib
import secrets

from src.core.constants import PKCE_VERIFIER_BYTES


def generate_code_verifier() -> str:
    """Random URL-safe verifier (43 characters)."""
    return secrets.token_urlsafe(PKCE_VERIFIER_BYTES)


def code_challenge_s256(verifier: str) -> str:
    """S256 challenge: base64url(sha256(verifier)) without padding.

    Example:
        >>> code_challenge_s256("dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk")
        'E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM'
    """
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_state() -> str:
    """Random opaque state value for CSRF protection."""
    return secrets.token_urlsafe(16)
