"""
Unit tests for status reporting and error log rate limiting
"""

import logging
from unittest.mock import MagicMock

from lol_autopilot.models.automation import StatusEvent, StatusKind
from lol_autopilot.services.automation.status import ErrorRateLimiter, StatusReporter


class TestStatusReporter:

    def test_forwards_events_to_callback(self):
        callback = MagicMock()
        reporter = StatusReporter(callback)

        event = reporter.success("ready-check", "Match accepted automatically.")

        callback.assert_called_once_with(event)
        assert event.kind is StatusKind.SUCCESS
        assert event.account_id is None

    def test_logs_without_callback(self, caplog):
        caplog.set_level(logging.INFO)
        reporter = StatusReporter()

        reporter.error("error", "Something broke", account_id=3)

        assert "[error] Something broke" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING

    def test_callback_failure_is_contained(self, caplog):
        reporter = StatusReporter(MagicMock(side_effect=RuntimeError("ui gone")))

        event = reporter.info("launch-client", "Launching the Riot Client…")

        assert event.step == "launch-client"
        assert "Status callback failed" in caplog.text

    def test_set_callback_replaces(self):
        first, second = MagicMock(), MagicMock()
        reporter = StatusReporter(first)
        reporter.set_callback(second)

        reporter.info("x", "y")

        first.assert_not_called()
        second.assert_called_once()


class TestStatusEvent:

    def test_to_dict(self):
        event = StatusEvent("completed", "Done", StatusKind.SUCCESS, account_id=4, timestamp=12.5)

        assert event.to_dict() == {
            "step": "completed",
            "kind": "success",
            "message": "Done",
            "timestamp": 12500,
            "accountId": 4,
        }

    def test_to_dict_without_account(self):
        assert "accountId" not in StatusEvent("a", "b").to_dict()


class TestErrorRateLimiter:

    def test_one_log_per_interval(self):
        now = [0.0]
        limiter = ErrorRateLimiter(5.0, clock=lambda: now[0])

        assert limiter.should_log() is True
        now[0] = 3.0
        assert limiter.should_log() is False
        now[0] = 5.5
        assert limiter.should_log() is True
