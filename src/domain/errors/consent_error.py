"""Consent negotiation error types."""

from dataclasses import dataclass, field

from src.domain.errors.provider_error import ProviderError


@dataclass(frozen=True, slots=True, kw_only=True)
class ConsentError(ProviderError):
    """Consent could not be created on any candidate path.

    Attributes:
        attempted_paths: Paths tried, in order.
    """

    attempted_paths: tuple[str, ...] = field(default_factory=tuple)
