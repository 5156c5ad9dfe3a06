"""
Champion select auto-pick / auto-ban automaton

Each tick reads the session and walks three sub-steps in order:

1. **Ban**: on the local player's open ban action, PATCH the champion and
   POST complete. Fire-and-forget; the complete call is sent once per session.
2. **Pre-pick**: hover the pick target through ``my-selection`` (best effort).
3. **Pick and lock**: set the champion on the open pick action, let the
   service settle, read the session back and lock only once the champion is
   confirmed on the action. Locking falls back to ``POST .../complete`` if
   the combined PATCH is refused.

Sub-step failures leave their flags untouched so the next tick retries from
the same place. Progress made earlier in a tick is kept even if a later
sub-step fails.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from ...exceptions import AutomationError, ResourceAbsentError
from ...models.automation import AutomationSettings
from ..credential_provider import Credential, CredentialProvider
from ..service_client import Endpoints, ServiceClient
from .base_automaton import PollingAutomaton
from .selection_state import (
    Phase, SelectionAction, SelectionSession, champion_on_action, confirm_pick,
    find_local_seat, find_open_action, mark_banned, mark_locked, mark_picked,
    mark_pre_picked, normalize_phase, observe, parse_actions, reset_session,
    session_identity
)
from .status import StatusReporter

STEP_NAME = "champion-select"


class SelectionAutomaton(PollingAutomaton):
    """Bans and picks the configured champions once per champion select"""

    def __init__(self,
                 credentials: CredentialProvider,
                 client: ServiceClient,
                 reporter: Optional[StatusReporter] = None,
                 interval: float = 1.0,
                 settle_delay: float = 0.5,
                 error_log_interval: float = 5.0,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        super().__init__(credentials, client, interval, reporter, error_log_interval)

        self.client_path = ""
        self.settings = AutomationSettings()
        self.session = SelectionSession()
        self.settle_delay = settle_delay
        self._sleep = sleep

    def set_client_path(self, client_path: Optional[str]):
        self.client_path = client_path or ""

    def set_settings(self, settings: AutomationSettings):
        self.settings = settings
        self.logger.info(
            f"Settings updated: enabled={settings.enabled}, "
            f"pick={settings.pick_champion_id}, ban={settings.ban_champion_id}"
        )

    async def tick(self):
        settings = self.settings
        if not self.client_path or not settings.enabled:
            return

        credential = self.credentials.acquire()
        if credential is None:
            return

        try:
            payload = await self.client.call(credential, "GET", Endpoints.CHAMP_SELECT_SESSION)
            await self.step(credential, settings, payload)
        except ResourceAbsentError:
            self.session = self._ended(self.session)
        except AutomationError as e:
            self._handle_error("champion-select polling failed", e)

    async def step(self, credential: Credential, settings: AutomationSettings, payload: Any):
        """
        Advance ``self.session`` from one session read

        ``self.session`` is replaced after every completed sub-step, never
        mutated, so a failure part-way keeps earlier progress.
        """
        if not isinstance(payload, dict):
            self.session = self._ended(self.session)
            return

        previous = self.session
        phase_name = (payload.get("timer") or {}).get("phase") or ""
        self.session = observe(previous, session_identity(payload), phase_name, settings)
        if self.session.session_id != previous.session_id:
            self.logger.info("New champion select session detected")

        local_cell_id = payload.get("localPlayerCellId")
        if find_local_seat(payload) is None:
            self.logger.debug("Local player cell not found")
            return

        phase = normalize_phase(self.session.phase)
        actions = parse_actions(payload)

        if phase == Phase.BAN_PICK and settings.ban_champion_id and not self.session.has_banned:
            action = find_open_action(actions, local_cell_id, "ban")
            if action is not None:
                self.session = await self._perform_ban(credential, self.session, action, settings.ban_champion_id)

        if phase in (Phase.PLANNING, Phase.BAN_PICK) and settings.pick_champion_id and not self.session.has_pre_picked:
            self.session = await self._perform_pre_pick(credential, self.session, settings.pick_champion_id)

        if phase == Phase.BAN_PICK and settings.pick_champion_id and not self.session.has_locked:
            action = find_open_action(actions, local_cell_id, "pick")
            if action is not None:
                self.session = await self._pick_and_lock(credential, self.session, action, settings.pick_champion_id)

    async def _perform_ban(self, credential: Credential, session: SelectionSession,
                           action: SelectionAction, champion_id: int) -> SelectionSession:
        try:
            await self.client.call(credential, "PATCH", Endpoints.champ_select_action(action.action_id),
                                   {"championId": champion_id})
        except AutomationError as e:
            self._handle_error("ban selection failed", e)
            self.reporter.error(STEP_NAME, "Automatic ban failed.")
            return session

        # the complete call is never repeated for this session, whatever its outcome
        session = mark_banned(session)
        try:
            await self.client.call(credential, "POST", Endpoints.champ_select_action_complete(action.action_id))
        except AutomationError as e:
            self._handle_error("ban completion failed", e)
            self.reporter.error(STEP_NAME, "Automatic ban failed.")
            return session

        self.logger.info(f"Champion {champion_id} banned automatically")
        self.reporter.success(STEP_NAME, "Champion banned automatically.")
        return session

    async def _perform_pre_pick(self, credential: Credential, session: SelectionSession,
                                champion_id: int) -> SelectionSession:
        try:
            await self.client.call(credential, "PATCH", Endpoints.CHAMP_SELECT_MY_SELECTION,
                                   {"championId": champion_id})
        except AutomationError as e:
            self._handle_error("pre-pick failed", e)
            return session

        self.logger.info(f"Champion {champion_id} pre-picked")
        return mark_pre_picked(session)

    async def _pick_and_lock(self, credential: Credential, session: SelectionSession,
                             action: SelectionAction, champion_id: int) -> SelectionSession:
        self.logger.debug(
            f"Pick action {action.action_id} open, current champion {action.champion_id}, wanted {champion_id}"
        )

        if action.champion_id != champion_id:
            try:
                await self.client.call(credential, "PATCH", Endpoints.champ_select_action(action.action_id),
                                       {"championId": champion_id})
            except AutomationError as e:
                self._handle_error("champion selection failed, will retry next tick", e)
                return session

            session = mark_picked(session)
            await self._sleep(self.settle_delay)

            try:
                refreshed = await self.client.call(credential, "GET", Endpoints.CHAMP_SELECT_SESSION)
            except ResourceAbsentError:
                raise
            except AutomationError as e:
                self._handle_error("pick verification failed", e)
                return session

            current = champion_on_action(refreshed, action.action_id)
            if current != champion_id:
                self.logger.debug(f"Champion not yet on action (found {current}), waiting")
                return session

        session = confirm_pick(session)
        if await self._lock_in(credential, action.action_id, champion_id):
            session = mark_locked(session)
        return session

    async def _lock_in(self, credential: Credential, action_id: Any, champion_id: int) -> bool:
        try:
            await self.client.call(credential, "PATCH", Endpoints.champ_select_action(action_id),
                                   {"championId": champion_id, "completed": True})
        except AutomationError as e:
            self.logger.info(f"Lock via PATCH refused ({e}), trying complete endpoint")
            try:
                await self.client.call(credential, "POST", Endpoints.champ_select_action_complete(action_id))
            except AutomationError as fallback_error:
                self._handle_error("champion lock failed", fallback_error)
                return False

        self.logger.info(f"Champion {champion_id} locked in")
        self.reporter.success(STEP_NAME, "Champion picked and locked automatically.")
        return True

    def _ended(self, session: SelectionSession) -> SelectionSession:
        if session.session_id is not None or session.flags != (False, False, False, False):
            self.logger.info("Exited champion select, resetting state")
        return reset_session(session)
