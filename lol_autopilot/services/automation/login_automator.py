"""
Riot Client login automation using the transitions framework

State Flow:
===========

    [idle]
      │ close_clients        "close-clients"      kill known processes, delete lockfile
      ▼
    [closing_clients]
      │ launch_client        "launch-client"      spawn the client detached, settle
      ▼
    [launching_client]
      │ wait_window          "wait-login-window"  poll for the login window (hard timeout)
      ▼
    [waiting_window]
      │ focus_window         "focus-window"       bring to front, bounded retries
      ▼
    [focusing_window]
      │ confirm_visual                            optional template match (tolerated)
      ▼
    [confirming_visual]
      │ type_credentials     "type-credentials"   clear + type username, tab, clear + type password
      ▼
    [typing_credentials]
      │ submit               "confirm-login"      Enter
      ▼
    [submitting] ── complete ──► [completed]

    any state ── fail ──► [failed]

Each trigger runs its ``on_enter_*`` callback to completion before
returning, and an exception from a callback propagates out of the trigger,
so the pipeline stops at the first unrecoverable step.
"""

import asyncio
import logging
import os
import time
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from transitions.extensions.asyncio import AsyncMachine

from ...config import LoginTimings
from ...exceptions import (
    AutomationError, AutomationPreconditionError, FocusNotConfirmedError,
    VisualConfirmationTimeoutError, WindowNotFoundError
)
from ...models.automation import LoginRequest
from ..desktop.base import KeyboardDriver, ProcessInspector, ScreenMatcher, WindowInfo, WindowLocator
from .login_guard import LoginGuard
from .login_helpers import (
    RiotClient, default_template_path, find_login_window, is_client_foreground,
    normalize_client_path, resolve_lockfile_path
)
from .status import StatusReporter

VALIDATION_MESSAGES = {
    "account_id": "Missing account identifier.",
    "credentials": "Missing Riot credentials for this account.",
    "client_path": "League of Legends path is not configured. Set it before starting a login.",
}


class FocusPolicy(Enum):
    """What to do when the login window cannot be confirmed in the foreground"""
    LENIENT = "lenient"
    STRICT = "strict"


class LoginRun:
    """
    One login attempt, driven by a transitions AsyncMachine
    """

    states = [
        'idle',
        'closing_clients',
        'launching_client',
        'waiting_window',
        'focusing_window',
        'confirming_visual',
        'typing_credentials',
        'submitting',
        'completed',
        'failed'
    ]

    def __init__(self, automator: "LoginAutomator", request: LoginRequest):
        self.automator = automator
        self.request = request
        self.client_path = normalize_client_path(request.client_path)
        self.window: Optional[WindowInfo] = None
        self.logger = automator.logger

        self.machine = AsyncMachine(
            model=self,
            states=LoginRun.states,
            initial='idle',
            auto_transitions=False,
            ignore_invalid_triggers=True
        )
        self.machine.add_transitions([
            ['close_clients', 'idle', 'closing_clients'],
            ['launch_client', 'closing_clients', 'launching_client'],
            ['wait_window', 'launching_client', 'waiting_window'],
            ['focus_window', 'waiting_window', 'focusing_window'],
            ['confirm_visual', 'focusing_window', 'confirming_visual'],
            ['type_credentials', 'confirming_visual', 'typing_credentials'],
            ['submit', 'typing_credentials', 'submitting'],
            ['complete', 'submitting', 'completed'],
            ['fail', '*', 'failed'],
        ])

    async def execute(self):
        """Walk the whole pipeline; raises on the first unrecoverable step"""
        await self.close_clients()
        await self.launch_client()
        await self.wait_window()
        await self.focus_window()
        await self.confirm_visual()
        await self.type_credentials()
        await self.submit()
        await self.complete()

    def _status(self, step: str, message: str):
        self.automator.reporter.info(step, message, self.request.account_id)

    # =================== state handlers ===================

    async def on_enter_closing_clients(self):
        self._status("close-clients", "Closing existing Riot/League clients…")
        await self.automator.close_existing_clients()
        await self.automator.remove_lockfile(resolve_lockfile_path(self.client_path))

    async def on_enter_launching_client(self):
        self._status("launch-client", "Launching the Riot Client…")
        await self.automator.launch_client(self.client_path)

    async def on_enter_waiting_window(self):
        self._status("wait-login-window", "Looking for the Riot Client window…")
        self.window = await self.automator.wait_for_login_window()
        self.logger.info(f"Window detected: {self.window.title!r}")

    async def on_enter_focusing_window(self):
        self._status("focus-window", "Bringing the Riot Client to the foreground…")
        await self.automator.bring_window_to_front(self.window)

    async def on_enter_confirming_visual(self):
        await self.automator.ensure_visual_focus()

    async def on_enter_typing_credentials(self):
        self._status("type-credentials", "Typing credentials…")
        await self.automator.type_credentials(self.request.username, self.request.password)

    async def on_enter_submitting(self):
        self._status("confirm-login", "Confirming the login…")
        await self.automator.submit_login()


class LoginAutomator:
    """Launches the Riot Client and fills its login form"""

    def __init__(self,
                 processes: ProcessInspector,
                 windows: WindowLocator,
                 keyboard: KeyboardDriver,
                 guard: LoginGuard,
                 reporter: Optional[StatusReporter] = None,
                 screen: Optional[ScreenMatcher] = None,
                 timings: Optional[LoginTimings] = None,
                 focus_policy: FocusPolicy = FocusPolicy.LENIENT,
                 template_path: Optional[Path] = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.processes = processes
        self.windows = windows
        self.keyboard = keyboard
        self.guard = guard
        self.reporter = reporter or StatusReporter()
        self.screen = screen
        self.timings = timings or LoginTimings()
        self.focus_policy = focus_policy
        self.template_path = Path(template_path) if template_path else default_template_path()
        self._sleep = sleep
        self._clock = clock

        self.last_run: Optional[LoginRun] = None

    async def login(self, request: LoginRequest) -> LoginRun:
        """
        Run the whole login pipeline for one account

        Args:
            request: Account id, credentials and client path

        Returns:
            The completed run

        Raises:
            AutomationPreconditionError: missing field or another login in progress
            AutomationError: the first unrecoverable step failure
        """
        self.logger.info(f"Trigger login for account {request.account_id}")
        try:
            self.validate(request)
            self.guard.acquire(request.account_id)
        except AutomationPreconditionError as e:
            self.reporter.error("error", str(e), request.account_id)
            raise

        run = LoginRun(self, request)
        self.last_run = run
        try:
            await run.execute()
        except Exception as e:
            await run.fail()
            message = str(e) or "Unknown error while automating the login."
            self.reporter.error("error", message, request.account_id)
            if isinstance(e, AutomationError):
                raise
            raise AutomationError(message, "LOGIN_FAILED") from e
        finally:
            self.guard.release(request.account_id)

        self.reporter.success(
            "completed",
            "Credentials sent. Check the client to confirm the login.",
            request.account_id
        )
        return run

    def validate(self, request: LoginRequest):
        missing = request.missing_field()
        if missing:
            raise AutomationPreconditionError(missing, VALIDATION_MESSAGES[missing])

    # =================== pipeline steps ===================

    async def close_existing_clients(self):
        self.logger.info(f"Closing known Riot processes: {', '.join(RiotClient.PROCESS_NAMES)}")
        results = await asyncio.gather(
            *(asyncio.to_thread(self.processes.terminate, name) for name in RiotClient.PROCESS_NAMES),
            return_exceptions=True
        )
        for name, result in zip(RiotClient.PROCESS_NAMES, results):
            if isinstance(result, Exception):
                self.logger.debug(f"Could not terminate {name}: {result}")

    async def remove_lockfile(self, lockfile_path: Path):
        try:
            lockfile_path.unlink()
            self.logger.info(f"Removed lockfile {lockfile_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove lockfile {lockfile_path}: {e}")

    async def launch_client(self, client_path: str):
        if not os.path.isfile(client_path):
            raise AutomationError(f"Riot Client executable not found: {client_path}", "LAUNCH_FAILED",
                                  {"client_path": client_path})

        self.logger.info(f"Spawning Riot client at {client_path}")
        try:
            await asyncio.to_thread(self.processes.spawn_detached, client_path, RiotClient.LAUNCH_ARGS)
        except OSError as e:
            raise AutomationError(f"Could not launch the Riot Client: {e}", "LAUNCH_FAILED",
                                  {"client_path": client_path}) from e

        await self._sleep(self.timings.launch_settle)

    async def wait_for_login_window(self) -> WindowInfo:
        timeout = self.timings.window_poll_timeout
        deadline = self._clock() + timeout
        while True:
            try:
                windows = await asyncio.to_thread(self.windows.list_windows)
            except Exception as e:
                self.logger.debug(f"Window enumeration failed: {e}")
                windows = []

            window = find_login_window(windows)
            if window is not None:
                return window
            if self._clock() >= deadline:
                raise WindowNotFoundError(timeout)
            await self._sleep(self.timings.window_poll_interval)

    async def bring_window_to_front(self, window: WindowInfo) -> bool:
        attempts = self.timings.focus_attempts
        for attempt in range(attempts):
            try:
                await asyncio.to_thread(self.windows.bring_to_front, window)
                self.logger.debug(f"Foreground request sent (attempt {attempt})")
            except Exception as e:
                self.logger.warning(f"Could not focus the Riot window: {e}")

            await self._sleep(self.timings.post_focus_settle)
            if await self._is_foreground(window):
                self.logger.info("Riot window confirmed in foreground")
                return True

        if self.focus_policy is FocusPolicy.STRICT:
            raise FocusNotConfirmedError(window.title, attempts)

        self.logger.warning("Could not confirm automatic focus, continuing anyway")
        return False

    async def _is_foreground(self, window: WindowInfo) -> bool:
        try:
            active = await asyncio.to_thread(self.windows.active_window)
        except Exception as e:
            self.logger.warning(f"Could not determine the active window: {e}")
            return False
        return is_client_foreground(active, window)

    async def ensure_visual_focus(self) -> bool:
        """Wait for the username field template; never fails the login"""
        if self.screen is None or not self.template_path.exists():
            self.logger.debug("Visual check skipped (no template or matcher)")
            await self._sleep(self.timings.post_focus_settle)
            return False

        if not await asyncio.to_thread(self.screen.is_available):
            self.logger.warning("No image matcher available, skipping visual check")
            await self._sleep(self.timings.post_focus_settle)
            return False

        try:
            await self._wait_for_template()
            return True
        except VisualConfirmationTimeoutError as e:
            self.logger.warning(f"Could not visually confirm focus on the login field: {e}")
            return False
        finally:
            await self._sleep(self.timings.post_focus_settle)

    async def _wait_for_template(self):
        timeout = self.timings.visual_timeout
        deadline = self._clock() + timeout
        while True:
            try:
                if await asyncio.to_thread(self.screen.locate, str(self.template_path)):
                    return
            except Exception as e:
                self.logger.debug(f"Template match failed: {e}")
            if self._clock() >= deadline:
                raise VisualConfirmationTimeoutError(self.template_path.name, timeout)
            await self._sleep(self.timings.visual_poll_interval)

    async def type_credentials(self, username: str, password: str):
        await self._replace_current_field(username)
        await self._press_tabs(1)
        await self._replace_current_field(password)

    async def _replace_current_field(self, text: str):
        await asyncio.to_thread(self.keyboard.hotkey, 'ctrl', 'a')
        await asyncio.to_thread(self.keyboard.press, 'delete')
        await self._sleep(self.timings.after_clear)
        await asyncio.to_thread(self.keyboard.type_text, text)
        await self._sleep(self.timings.after_type)

    async def _press_tabs(self, count: int):
        for _ in range(count):
            await asyncio.to_thread(self.keyboard.press, 'tab')
            await self._sleep(self.timings.after_tab)

    async def submit_login(self):
        await asyncio.to_thread(self.keyboard.press, 'enter')
        await self._sleep(self.timings.after_submit)
