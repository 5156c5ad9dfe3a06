"""
Abstract base class for polling automatons

Defines the fixed-interval loop shared by the ready-check, champion select
and account watchers: one tick runs to completion before the next one is
scheduled, ``start`` is idempotent and ``stop`` lets an in-flight tick finish.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ...exceptions import ServiceError, UnauthorizedError
from ..credential_provider import CredentialProvider
from ..service_client import ServiceClient
from .status import ErrorRateLimiter, StatusReporter


class PollingAutomaton(ABC):
    """Abstract base class for timer-driven automatons"""

    def __init__(self,
                 credentials: CredentialProvider,
                 client: ServiceClient,
                 interval: float,
                 reporter: Optional[StatusReporter] = None,
                 error_log_interval: float = 5.0):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.credentials = credentials
        self.client = client
        self.interval = interval
        self.reporter = reporter or StatusReporter()
        self.error_limiter = ErrorRateLimiter(error_log_interval)

        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and self._stop_event is not None and not self._stop_event.is_set()

    def start(self) -> bool:
        """Start polling; return False if already running"""
        if self.is_running:
            return False

        previous = self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event, previous))
        self.logger.debug(f"Polling started (every {self.interval:g}s)")
        return True

    def stop(self) -> bool:
        """Stop polling after the current tick; return False if not running"""
        if not self.is_running:
            return False

        self._stop_event.set()
        self.logger.debug("Polling stopped")
        return True

    async def wait_closed(self):
        """Wait for the loop, including a tick in flight, to finish"""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def run_once(self):
        """Run a single tick, absorbing any error"""
        try:
            await self.tick()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._handle_error("tick failure", e)

    @abstractmethod
    async def tick(self):
        """Perform one polling step"""
        pass

    async def _run(self, stop_event: asyncio.Event, previous: Optional[asyncio.Task]):
        if previous is not None:
            # a restarted loop never overlaps the tick of the loop it replaces
            await asyncio.gather(previous, return_exceptions=True)

        while not stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    def _handle_error(self, context: str, error: Exception):
        """Invalidate stale credentials and log at a limited rate"""
        if isinstance(error, UnauthorizedError):
            self.credentials.invalidate()
        if isinstance(error, ServiceError) and error.body:
            self.logger.debug(f"Client service error body: {error.body!r}")
        if self.error_limiter.should_log():
            self.logger.warning(f"{context}: {error}")
