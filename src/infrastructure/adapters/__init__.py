"""Bank adapters: standard and signed gateway variants."""

from src.infrastructure.adapters.adapter_factory import AdapterFactory
from src.infrastructure.adapters.gateway_adapter import GatewayAdapter
from src.infrastructure.adapters.request_signer import RequestSigner
from src.infrastructure.adapters.standard_adapter import StandardAdapter

__all__ = [
    "AdapterFactory",
    "GatewayAdapter",
    "RequestSigner",
    "StandardAdapter",
]
