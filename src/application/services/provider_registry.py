"""Provider registry.

Single lookup point for configured provider descriptors. Descriptors are
immutable and built once from configuration by the container; the registry
only answers "which descriptor belongs to this provider id".
"""

from collections.abc import Iterable

from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.value_objects import ProviderDescriptor


class ProviderRegistry:
    """In-memory catalog of provider descriptors keyed by id.

    Example:
        >>> registry = ProviderRegistry([vbank, gost])
        >>> match registry.get("vbank"):
        ...     case Success(value=descriptor):
        ...         ...
    """

    def __init__(self, descriptors: Iterable[ProviderDescriptor] = ()) -> None:
        self._descriptors: dict[str, ProviderDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in self._descriptors:
                raise ValueError(f"Duplicate provider id: {descriptor.id}")
            self._descriptors[descriptor.id] = descriptor

    def get(self, provider_id: str) -> Result[ProviderDescriptor, NotFoundError]:
        """Find the descriptor of one provider."""
        descriptor = self._descriptors.get(provider_id)
        if descriptor is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.PROVIDER_NOT_FOUND,
                    message=f"Provider '{provider_id}' is not configured",
                    resource_type="ProviderDescriptor",
                    resource_id=provider_id,
                )
            )
        return Success(value=descriptor)

    def all(self) -> list[ProviderDescriptor]:
        """Every configured descriptor, in configuration order."""
        return list(self._descriptors.values())

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
