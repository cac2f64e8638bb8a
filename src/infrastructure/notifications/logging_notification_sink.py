"""Notification sink that emits structured log events.

Stands in for push/local notification delivery. Never raises.
"""

from decimal import Decimal

from src.domain.protocols import LoggerProtocol


class LoggingNotificationSink:
    """NotificationSinkProtocol implementation backed by a logger."""

    def __init__(self, *, logger: LoggerProtocol) -> None:
        self._logger = logger.bind(component="notifications")

    async def notify_sync_success(self, provider_name: str) -> None:
        self._logger.info("notification_sync_success", provider_name=provider_name)

    async def notify_sync_error(self, provider_name: str, message: str | None = None) -> None:
        self._logger.warning(
            "notification_sync_error",
            provider_name=provider_name,
            reason=message,
        )

    async def notify_budget_exceeded(self, budget_name: str, exceeded_by: Decimal) -> None:
        self._logger.warning(
            "notification_budget_exceeded",
            budget_name=budget_name,
            exceeded_by=str(exceeded_by),
        )

    async def notify_budget_warning(self, budget_name: str, percentage: float) -> None:
        self._logger.info(
            "notification_budget_warning",
            budget_name=budget_name,
            percentage=round(percentage, 1),
        )

    async def notify_category_exceeded(self, category_name: str, budget_name: str) -> None:
        self._logger.warning(
            "notification_category_exceeded",
            category_name=category_name,
            budget_name=budget_name,
        )
