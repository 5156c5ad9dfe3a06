"""
Automation service coordinator

Owns the shared credential provider and service client, the two polling
automatons, the account watcher and the login automator, and routes their
status events to the front-end callbacks. This service only orchestrates;
every automation decision lives in the automaton it belongs to.
"""

import logging
from typing import Callable, Optional

from ...config import AutomationConfig
from ...models.automation import AutomationSettings, LoginRequest, StatusEvent
from ..credential_provider import CredentialProvider
from ..desktop.base import KeyboardDriver, ProcessInspector, ScreenMatcher, WindowLocator
from ..service_client import ServiceClient
from ..summoner_service import AccountWatcher, DecayInfo, SummonerService
from .login_automator import FocusPolicy, LoginAutomator, LoginRun
from .login_guard import LoginGuard
from .ready_check_machine import ReadyCheckAutomaton
from .selection_machine import SelectionAutomaton
from .status import StatusReporter


class CallbackManager:
    """Manages callbacks for UI updates"""

    def __init__(self):
        self.on_status: Optional[Callable[[StatusEvent], None]] = None
        self.on_decay_update: Optional[Callable[[DecayInfo], None]] = None

    def set_callbacks(self,
                      on_status: Callable[[StatusEvent], None] = None,
                      on_decay_update: Callable[[DecayInfo], None] = None):
        """Set callback functions for UI updates"""
        self.on_status = on_status
        self.on_decay_update = on_decay_update


class AutomationService:
    """
    Automation service coordinator

    Desktop capabilities are injected so that the same coordinator drives the
    real client or test fakes.
    """

    def __init__(self,
                 processes: ProcessInspector,
                 windows: WindowLocator,
                 keyboard: KeyboardDriver,
                 screen: Optional[ScreenMatcher] = None,
                 config: Optional[AutomationConfig] = None,
                 client: Optional[ServiceClient] = None,
                 guard: Optional[LoginGuard] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config = config or AutomationConfig()
        polling = self.config.polling

        # Callback management
        self._callbacks = CallbackManager()
        self.reporter = StatusReporter(self._forward_status)

        # Shared client service access
        self.credentials = CredentialProvider(processes, ttl=polling.credential_ttl)
        self.client = client or ServiceClient(timeout=polling.request_timeout)
        self.summoner = SummonerService(self.credentials, self.client)

        self.client_path = ""
        self.ready_check = ReadyCheckAutomaton(
            self.credentials, self.client, self.reporter,
            interval=polling.ready_check_interval,
            error_log_interval=polling.error_log_interval
        )
        self.selection = SelectionAutomaton(
            self.credentials, self.client, self.reporter,
            interval=polling.selection_interval,
            settle_delay=polling.pick_settle_delay,
            error_log_interval=polling.error_log_interval
        )
        self.account_watcher = AccountWatcher(
            self.credentials, self.client, self._forward_decay_update, self.reporter,
            interval=polling.account_check_interval
        )

        self.login_automator = LoginAutomator(
            processes, windows, keyboard,
            guard=guard or LoginGuard(),
            reporter=self.reporter,
            screen=screen if self.config.visual_check else None,
            timings=self.config.login,
            focus_policy=FocusPolicy.STRICT if self.config.strict_focus else FocusPolicy.LENIENT
        )

    # Callback management
    def set_callbacks(self,
                      on_status: Callable[[StatusEvent], None] = None,
                      on_decay_update: Callable[[DecayInfo], None] = None):
        """Set callback functions for UI updates"""
        self._callbacks.set_callbacks(on_status, on_decay_update)

    def _forward_status(self, event: StatusEvent):
        if self._callbacks.on_status:
            self._callbacks.on_status(event)

    def _forward_decay_update(self, info: DecayInfo):
        if self._callbacks.on_decay_update:
            self._callbacks.on_decay_update(info)

    # Configuration
    def set_client_path(self, client_path: Optional[str]):
        client_path = client_path or ""
        if client_path != self.client_path:
            self.credentials.invalidate()
        self.client_path = client_path
        self.ready_check.set_client_path(client_path)
        self.selection.set_client_path(client_path)
        self.logger.info(f"Client path set to: {client_path or '(none)'}")

    def get_auto_accept_enabled(self) -> bool:
        return self.ready_check.enabled

    def set_auto_accept_enabled(self, enabled: bool) -> bool:
        self.ready_check.set_enabled(enabled)
        self.logger.info(f"Auto-accept {'enabled' if self.ready_check.enabled else 'disabled'}")
        return self.ready_check.enabled

    def get_pick_ban_settings(self) -> AutomationSettings:
        return self.selection.settings

    def set_pick_ban_settings(self, enabled, pick_champion_id=None, ban_champion_id=None) -> AutomationSettings:
        settings = AutomationSettings.from_values(enabled, pick_champion_id, ban_champion_id)
        self.selection.set_settings(settings)
        return settings

    # Lifecycle
    def start(self) -> bool:
        """Start the polling loops; return False if they were all already running"""
        started = [
            self.ready_check.start(),
            self.selection.start(),
            self.account_watcher.start(),
        ]
        if any(started):
            self.logger.info("Client automations started")
        return any(started)

    def stop(self) -> bool:
        stopped = [
            self.ready_check.stop(),
            self.selection.stop(),
            self.account_watcher.stop(),
        ]
        if any(stopped):
            self.logger.info("Client automations stopped")
        return any(stopped)

    @property
    def is_running(self) -> bool:
        return self.ready_check.is_running or self.selection.is_running or self.account_watcher.is_running

    async def login(self, account_id, username: str, password: str,
                    client_path: Optional[str] = None) -> LoginRun:
        """Log an account in, using the configured client path unless one is given"""
        request = LoginRequest(
            account_id=account_id,
            username=username,
            password=password,
            client_path=client_path if client_path is not None else self.client_path
        )
        return await self.login_automator.login(request)

    async def aclose(self):
        """Stop everything and release the HTTP client"""
        self.stop()
        for automaton in (self.ready_check, self.selection, self.account_watcher):
            await automaton.wait_closed()
        await self.client.aclose()
