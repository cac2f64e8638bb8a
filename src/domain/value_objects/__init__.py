"""Domain value objects (immutable, no identity)."""

from src.domain.value_objects.consent import Consent, ConsentDetails
from src.domain.value_objects.forecast import Forecast
from src.domain.value_objects.provider_descriptor import (
    OAuthConfig,
    ProviderDescriptor,
)
from src.domain.value_objects.token_record import TokenRecord

__all__ = [
    "Consent",
    "ConsentDetails",
    "Forecast",
    "OAuthConfig",
    "ProviderDescriptor",
    "TokenRecord",
]
