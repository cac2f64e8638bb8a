"""Gateway request signing.

Signing string:

    {METHOD}\\n{URL}\\n{UNIX_TIMESTAMP}
    \\n{name}: {value}      one line per header, sorted by name,
                           any existing X-Signature excluded
    \\n{body}               only when a body is present

The SHA-256 hex digest of the UTF-8 signing string is sent as X-Signature
together with the timestamp in X-Timestamp.
"""

import hashlib
import time
from collections.abc import Callable, Mapping

from src.core.constants import HEADER_SIGNATURE, HEADER_TIMESTAMP


class RequestSigner:
    """Signs gateway requests.

    Example:
        >>> signer = RequestSigner(clock=lambda: 1700000000)
        >>> headers = signer.sign("GET", "https://gw.example/accounts", {"Accept": "application/json"})
        >>> headers["X-Timestamp"]
        '1700000000'
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    @staticmethod
    def signing_string(
        method: str,
        url: str,
        timestamp: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> str:
        """Build the canonical string covered by the signature."""
        parts = [f"{method.upper()}\n{url}\n{timestamp}"]
        for name in sorted(headers):
            if name.lower() == HEADER_SIGNATURE.lower():
                continue
            parts.append(f"\n{name}: {headers[name]}")
        if body:
            parts.append(f"\n{body.decode('utf-8', errors='replace')}")
        return "".join(parts)

    def sign(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> dict[str, str]:
        """Return a copy of headers with X-Signature and X-Timestamp set.

        Args:
            method: HTTP method.
            url: Absolute URL including the query string.
            headers: Headers that will be sent.
            body: Raw body bytes, if any.
        """
        timestamp = str(int(self._clock()))
        payload = self.signing_string(method, url, timestamp, headers, body)
        signed = {k: v for k, v in headers.items() if k.lower() != HEADER_SIGNATURE.lower()}
        signed[HEADER_SIGNATURE] = hashlib.sha256(payload.encode("utf-8")).hexdigest()
        signed[HEADER_TIMESTAMP] = timestamp
        return signed
