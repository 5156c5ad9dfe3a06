"""
Ready-check auto-accept automaton using the transitions framework

State Flow:
===========

    [idle] ── check in progress, not yet accepted ──► [pending]
      ▲                                                  │
      ├──────────── accept sent (accepted=True) ─────────┤
      └──────────── accept failed (retry next tick) ─────┘

The ``accepted`` flag lives in an immutable ``ReadyCheckState`` that each
tick replaces. It is cleared whenever the check disappears or leaves the
in-progress state, so one accept call is sent per ready-check.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from transitions.extensions.asyncio import AsyncMachine

from ...exceptions import AutomationError, ResourceAbsentError
from ..credential_provider import Credential, CredentialProvider
from ..service_client import Endpoints, ServiceClient
from .base_automaton import PollingAutomaton
from .status import StatusReporter

STEP_NAME = "ready-check"


@dataclass(frozen=True)
class ReadyCheckState:
    """Whether the currently pending check has already been accepted"""
    accepted: bool = False
    version: int = 0

    def with_accepted(self, accepted: bool) -> "ReadyCheckState":
        if accepted == self.accepted:
            return self
        return replace(self, accepted=accepted, version=self.version + 1)


def normalize(value: Any) -> str:
    if not value:
        return ""
    return str(value).strip().lower()


def local_player_response(payload: dict) -> str:
    """The local player's answer, wherever this client version puts it"""
    local_player = payload.get("localPlayer") or {}
    return normalize(
        payload.get("playerResponse")
        or local_player.get("response")
        or local_player.get("playerResponse")
    )


class ReadyCheckAutomaton(PollingAutomaton):
    """Accepts a pending matchmaking ready-check exactly once"""

    states = ['idle', 'pending']

    def __init__(self,
                 credentials: CredentialProvider,
                 client: ServiceClient,
                 reporter: Optional[StatusReporter] = None,
                 interval: float = 4.0,
                 error_log_interval: float = 5.0):
        super().__init__(credentials, client, interval, reporter, error_log_interval)

        self.client_path = ""
        self.enabled = False
        self.check_state = ReadyCheckState()

        self.machine = AsyncMachine(
            model=self,
            states=ReadyCheckAutomaton.states,
            initial='idle',
            auto_transitions=False,
            ignore_invalid_triggers=True
        )
        self.machine.add_transitions([
            ['check_detected', 'idle', 'pending'],
            ['accept_sent', 'pending', 'idle'],
            ['accept_failed', 'pending', 'idle'],
        ])

    def set_enabled(self, enabled: bool):
        self.enabled = bool(enabled)

    def set_client_path(self, client_path: Optional[str]):
        self.client_path = client_path or ""

    async def tick(self):
        if not self.client_path or not self.enabled:
            return

        credential = self.credentials.acquire()
        if credential is None:
            return

        try:
            payload = await self.client.call(credential, "GET", Endpoints.READY_CHECK)
        except ResourceAbsentError:
            self.check_state = self.check_state.with_accepted(False)
            return
        except AutomationError as e:
            self._handle_error("ready-check polling failed", e)
            return

        self.check_state = await self.evaluate(credential, payload, self.check_state)

    async def evaluate(self, credential: Credential, payload: Any, state: ReadyCheckState) -> ReadyCheckState:
        """
        Decide on one ready-check read and return the next state

        Args:
            credential: Credential used for the accept call
            payload: Decoded ready-check resource (None when empty)
            state: State left by the previous tick

        Returns:
            The state for the next tick
        """
        if not isinstance(payload, dict):
            self.logger.debug("Ready-check empty response")
            return state.with_accepted(False)

        check_state = normalize(payload.get("state"))
        if check_state != "inprogress":
            return state.with_accepted(False)

        response = local_player_response(payload)
        self.logger.debug(f"Ready-check in progress, local response: {response or 'none'}")
        if response == "accepted":
            return state.with_accepted(True)
        if state.accepted:
            # service read model has not caught up with our accept yet
            return state

        await self.check_detected()
        try:
            await self.client.call(credential, "POST", Endpoints.READY_CHECK_ACCEPT)
        except AutomationError as e:
            await self.accept_failed()
            self._handle_error("ready-check accept failed", e)
            return state

        await self.accept_sent()
        self.reporter.success(STEP_NAME, "Match accepted automatically.")
        return state.with_accepted(True)
