"""Notification adapters."""

from .email_notification_dispatcher import EmailNotificationDispatcher

__all__ = ["EmailNotificationDispatcher"]
