"""Common error classes used across all layers.

Error Types:
- NotFoundError: Resource not found

Usage:
    from src.core.errors import NotFoundError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(NotFoundError(
        code=ErrorCode.PROVIDER_NOT_FOUND,
        message="Provider 'vbank' is not connected",
        resource_type="ConnectedProvider",
        resource_id="vbank",
    ))
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        resource_type: Type of resource (ConnectedProvider, Account, Budget).
        resource_id: ID of the resource that was not found.
        details: Additional context.
    """

    resource_type: str
    resource_id: str
