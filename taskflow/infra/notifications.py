from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from taskflow.config import Settings

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def send(self, recipient_email: str, subject: str, body: str) -> None: ...


class LoggingNotificationSink:
    """Writes notifications to the log instead of delivering them."""

    def __init__(self, sender: str) -> None:
        self._sender = sender

    def send(self, recipient_email: str, subject: str, body: str) -> None:
        if not recipient_email:
            logger.info("Notification skipped, no recipient (subject=%r)", subject[:80])
            return
        logger.info(
            "Notification from %s to %s (subject=%r)",
            self._sender,
            recipient_email,
            subject[:80],
        )
        logger.debug("Notification body: %s", body[:500])


class NullNotificationSink:
    def send(self, recipient_email: str, subject: str, body: str) -> None:
        logger.debug("Notifications disabled, dropping message to %s", recipient_email)


class BackgroundNotificationSink:
    """Hands every message to a worker thread and returns at once.

    Delivery errors are logged on the worker; the caller never sees them.
    """

    def __init__(self, inner: NotificationSink, max_workers: int = 1) -> None:
        self._inner = inner
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def send(self, recipient_email: str, subject: str, body: str) -> None:
        future = self._executor.submit(self._inner.send, recipient_email, subject, body)
        future.add_done_callback(lambda f: _log_failure(f, recipient_email))

    def close(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _log_failure(future: Future, recipient_email: str) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Notification to %s failed", recipient_email, exc_info=exc)


def build_notification_sink(settings: Settings) -> NotificationSink:
    if not settings.notifications_enabled:
        return NullNotificationSink()
    return BackgroundNotificationSink(LoggingNotificationSink(settings.notification_sender))
