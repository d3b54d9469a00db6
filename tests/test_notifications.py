from __future__ import annotations

import logging
import threading

from taskflow.config import Settings
from taskflow.infra.notifications import (
    BackgroundNotificationSink,
    LoggingNotificationSink,
    NullNotificationSink,
    build_notification_sink,
)

from fakes import FailingSink, RecordingSink


def test_logging_sink_records_recipient(caplog) -> None:
    sink = LoggingNotificationSink("bot@example.com")

    with caplog.at_level(logging.INFO, logger="taskflow.infra.notifications"):
        sink.send("owner@example.com", "Task status updated", "Task 'x' was moved.")

    assert "owner@example.com" in caplog.text
    assert "bot@example.com" in caplog.text


def test_sink_follows_settings() -> None:
    disabled = Settings(database_url="sqlite://", notifications_enabled=False)
    assert isinstance(build_notification_sink(disabled), NullNotificationSink)

    sink = build_notification_sink(Settings(database_url="sqlite://"))
    try:
        assert isinstance(sink, BackgroundNotificationSink)
    finally:
        sink.close()


def test_background_sink_returns_before_delivery() -> None:
    release = threading.Event()
    inner = RecordingSink()

    class SlowSink:
        def send(self, recipient_email: str, subject: str, body: str) -> None:
            release.wait(timeout=5)
            inner.send(recipient_email, subject, body)

    sink = BackgroundNotificationSink(SlowSink())
    sink.send("owner@example.com", "Task status updated", "moved")

    assert inner.sent == []
    release.set()
    sink.close()
    assert [n.recipient_email for n in inner.sent] == ["owner@example.com"]


def test_background_sink_logs_delivery_failure(caplog) -> None:
    sink = BackgroundNotificationSink(FailingSink())

    with caplog.at_level(logging.ERROR, logger="taskflow.infra.notifications"):
        sink.send("owner@example.com", "Task status updated", "moved")
        sink.close()

    assert "Notification to owner@example.com failed" in caplog.text
