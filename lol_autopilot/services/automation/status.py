"""
Status reporting shared by all automations
"""

import logging
import time
from typing import Any, Callable, Optional

from ...models.automation import StatusEvent, StatusKind

StatusCallback = Callable[[StatusEvent], None]


class StatusReporter:
    """Logs status events and forwards them to the front-end callback"""

    def __init__(self, callback: Optional[StatusCallback] = None, logger: Optional[logging.Logger] = None):
        self.callback = callback
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def set_callback(self, callback: Optional[StatusCallback]):
        self.callback = callback

    def emit(self, step: str, message: str, kind: StatusKind = StatusKind.INFO, account_id: Any = None) -> StatusEvent:
        event = StatusEvent(step=step, message=message, kind=kind, account_id=account_id)
        level = logging.WARNING if kind is StatusKind.ERROR else logging.INFO
        self.logger.log(level, f"[{step}] {message}")

        if self.callback:
            try:
                self.callback(event)
            except Exception as e:
                self.logger.warning(f"Status callback failed: {e}")
        return event

    def info(self, step: str, message: str, account_id: Any = None) -> StatusEvent:
        return self.emit(step, message, StatusKind.INFO, account_id)

    def success(self, step: str, message: str, account_id: Any = None) -> StatusEvent:
        return self.emit(step, message, StatusKind.SUCCESS, account_id)

    def error(self, step: str, message: str, account_id: Any = None) -> StatusEvent:
        return self.emit(step, message, StatusKind.ERROR, account_id)


class ErrorRateLimiter:
    """Lets at most one error log through per interval"""

    def __init__(self, interval: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self._last_logged_at: Optional[float] = None

    def should_log(self) -> bool:
        now = self._clock()
        if self._last_logged_at is None or now - self._last_logged_at > self.interval:
            self._last_logged_at = now
            return True
        return False
