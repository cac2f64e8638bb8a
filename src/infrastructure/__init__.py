"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- Provider HTTP access (retrying client, OAuth, consent, bank adapters)
- Encrypted secret and token storage
- Database repositories (SQLAlchemy async)
- Logging and notification sinks

Structure:
- http/: Retrying HTTP client with error classification
- auth/: Token store, OAuth gateway, PKCE authorization sessions
- consent/: Consent negotiation against candidate routes
- adapters/: Standard and signed gateway bank adapters
- secrets/: AES-256-GCM secret storage
- persistence/: Database, models and repositories
- logging/, notifications/: structlog adapter and log-backed notifications

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
