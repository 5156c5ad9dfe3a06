"""
Single-flight guard for login automations
"""

import threading
from contextlib import contextmanager
from typing import Any, Optional

from ...exceptions import LoginInProgressError


class LoginGuard:
    """
    Token owned by the caller and shared by every LoginAutomator that must not
    type at the same time

    Only one login may hold the guard; a second request is refused
    immediately, whichever account it is for.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active_account_id: Optional[Any] = None

    @property
    def active_account_id(self) -> Optional[Any]:
        return self._active_account_id

    @property
    def is_held(self) -> bool:
        return self._active_account_id is not None

    def acquire(self, account_id: Any):
        with self._lock:
            if self._active_account_id is not None:
                raise LoginInProgressError(self._active_account_id)
            self._active_account_id = account_id

    def release(self, account_id: Any):
        with self._lock:
            if self._active_account_id == account_id:
                self._active_account_id = None

    @contextmanager
    def hold(self, account_id: Any):
        self.acquire(account_id)
        try:
            yield self
        finally:
            self.release(account_id)
