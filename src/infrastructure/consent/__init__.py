"""Account consent negotiation."""

from src.infrastructure.consent.consent_gateway import ConsentGateway

__all__ = ["ConsentGateway"]
