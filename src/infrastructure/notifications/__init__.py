"""Notification sink adapters."""

from src.infrastructure.notifications.logging_notification_sink import LoggingNotificationSink

__all__ = ["LoggingNotificationSink"]
