"""Result types for railway-oriented programming.

Every fallible operation in the aggregator (HTTP calls, token exchange,
consent negotiation, adapter fetches, repository lookups that can fail)
returns a Result instead of raising. Errors travel as data and the caller
decides what to do with them.

Usage:
    async def fetch(url: str) -> Result[dict[str, Any], ProviderError]:
        ...

    match await fetch(url):
        case Success(value=payload):
            accounts = payload["accounts"]
        case Failure(error=error):
            logger.warning("fetch_failed", error=str(error))
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
