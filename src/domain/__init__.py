"""Domain layer - Pure business logic.

Entities, value objects, enums, errors and protocols (ports) of the
aggregator. The domain layer has NO dependencies on any framework or
infrastructure - it is pure Python.

Structure:
- entities/: ConnectedProvider, Account, Transaction, Budget
- value_objects/: ProviderDescriptor, TokenRecord, Consent, Forecast
- protocols/: Repository, adapter, secret storage and notification ports
- errors/: Provider, OAuth, consent and secrets errors
"""
