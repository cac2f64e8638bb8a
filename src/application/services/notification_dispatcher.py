"""Fail-open notification dispatch.

Wraps a NotificationSinkProtocol so that a failing or slow sink can never
break or stall a sync or budget recomputation. Each delivery runs as a
tracked background task; sink exceptions are logged at warning level and
swallowed.

Usage:
    dispatcher = NotificationDispatcher(sink=sink, logger=logger)
    await dispatcher.notify_sync_success("Virtual Bank")  # returns at once
    await dispatcher.drain()  # wait for in-flight deliveries (shutdown, tests)
"""

import asyncio
from collections.abc import Awaitable, Callable
from decimal import Decimal

from src.domain.protocols import LoggerProtocol, NotificationSinkProtocol


class NotificationDispatcher:
    """NotificationSinkProtocol implementation with a fail-open guarantee.

    Attributes:
        _sink: Underlying notification sink.
        _logger: Logger for sink failures.
        _pending: Deliveries still in flight.
    """

    def __init__(self, *, sink: NotificationSinkProtocol, logger: LoggerProtocol) -> None:
        self._sink = sink
        self._logger = logger
        self._pending: set[asyncio.Task[None]] = set()

    async def notify_sync_success(self, provider_name: str) -> None:
        self._dispatch("sync_success", lambda: self._sink.notify_sync_success(provider_name))

    async def notify_sync_error(self, provider_name: str, message: str | None = None) -> None:
        self._dispatch(
            "sync_error",
            lambda: self._sink.notify_sync_error(provider_name, message),
        )

    async def notify_budget_exceeded(self, budget_name: str, exceeded_by: Decimal) -> None:
        self._dispatch(
            "budget_exceeded",
            lambda: self._sink.notify_budget_exceeded(budget_name, exceeded_by),
        )

    async def notify_budget_warning(self, budget_name: str, percentage: float) -> None:
        self._dispatch(
            "budget_warning",
            lambda: self._sink.notify_budget_warning(budget_name, percentage),
        )

    async def notify_category_exceeded(self, category_name: str, budget_name: str) -> None:
        self._dispatch(
            "category_exceeded",
            lambda: self._sink.notify_category_exceeded(category_name, budget_name),
        )

    async def drain(self) -> None:
        """Wait until every dispatched notification has been delivered or failed."""
        while self._pending:
            await asyncio.gather(*self._pending)

    def _dispatch(self, notification: str, call: Callable[[], Awaitable[None]]) -> None:
        task = asyncio.create_task(self._guard(notification, call))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _guard(self, notification: str, call: Callable[[], Awaitable[None]]) -> None:
        try:
            await call()
        except Exception as e:
            self._logger.warning(
                "notification_delivery_failed",
                notification=notification,
                error_type=type(e).__name__,
                error_message=str(e),
                exc_info=e,
            )
