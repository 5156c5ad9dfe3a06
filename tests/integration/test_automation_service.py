"""
Integration tests for the automation service coordinator
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from fakes import CLIENT_COMMAND_LINE, FakeProcessInspector, FakeWindowLocator, RecordingKeyboard, ScriptedClient
from lol_autopilot.config import AutomationConfig, LoginTimings, PollingConfig
from lol_autopilot.exceptions import AutomationPreconditionError
from lol_autopilot.models.automation import AutomationSettings, StatusKind
from lol_autopilot.services import AutomationService
from lol_autopilot.services.automation.login_automator import FocusPolicy
from lol_autopilot.services.desktop.base import WindowInfo
from lol_autopilot.services.service_client import Endpoints

SUMMONER = {"gameName": "Faker", "tagLine": "KR1", "puuid": "puuid-1"}
CLIENT_PATH_NAME = "RiotClientServices.exe"


class TestAutomationService:

    def setup_method(self):
        self.processes = FakeProcessInspector([CLIENT_COMMAND_LINE])
        self.window = WindowInfo("Riot Client")
        self.windows = FakeWindowLocator([self.window], active=self.window)
        self.keyboard = RecordingKeyboard()
        self.client = ScriptedClient({
            ("GET", Endpoints.READY_CHECK): {"state": "InProgress", "playerResponse": "None"},
            ("POST", Endpoints.READY_CHECK_ACCEPT): None,
            ("GET", Endpoints.CURRENT_SUMMONER): SUMMONER,
            ("GET", Endpoints.CURRENT_RANKED_STATS): {"queueMap": {}},
        })
        config = AutomationConfig(
            polling=PollingConfig(ready_check_interval=60, selection_interval=60, account_check_interval=60),
            login=LoginTimings.instant(),
        )
        self.service = AutomationService(self.processes, self.windows, self.keyboard,
                                         config=config, client=self.client)

        self.on_status = MagicMock()
        self.on_decay = MagicMock()
        self.service.set_callbacks(on_status=self.on_status, on_decay_update=self.on_decay)

    def test_settings_round_trip(self):
        assert self.service.get_auto_accept_enabled() is False
        assert self.service.set_auto_accept_enabled(True) is True

        settings = self.service.set_pick_ban_settings(True, "103", 0)

        assert settings == AutomationSettings(enabled=True, pick_champion_id=103, ban_champion_id=None)
        assert self.service.get_pick_ban_settings() == settings

    def test_client_path_is_shared(self):
        self.service.set_client_path("C:/Riot/RiotClientServices.exe")

        assert self.service.ready_check.client_path == "C:/Riot/RiotClientServices.exe"
        assert self.service.selection.client_path == "C:/Riot/RiotClientServices.exe"

    def test_client_path_change_drops_credential(self):
        self.service.credentials.acquire()
        self.service.set_client_path("C:/other/RiotClientServices.exe")

        assert self.service.credentials.cached is None

    def test_focus_policy_from_config(self):
        strict = AutomationService(self.processes, self.windows, self.keyboard,
                                   config=AutomationConfig(strict_focus=True), client=self.client)

        assert strict.login_automator.focus_policy is FocusPolicy.STRICT
        assert self.service.login_automator.focus_policy is FocusPolicy.LENIENT

    @pytest.mark.asyncio
    async def test_polling_loops_accept_and_report_account(self):
        self.service.set_client_path("C:/Riot/RiotClientServices.exe")
        self.service.set_auto_accept_enabled(True)

        assert self.service.start() is True
        assert self.service.start() is False
        await asyncio.sleep(0.05)
        await self.service.aclose()

        assert self.service.is_running is False
        assert len(self.client.calls_to("POST", Endpoints.READY_CHECK_ACCEPT)) == 1
        event = self.on_status.call_args_list[0][0][0]
        assert event.step == "ready-check"
        assert event.kind is StatusKind.SUCCESS
        self.on_decay.assert_called_once()
        assert self.on_decay.call_args[0][0].summoner.game_name == "Faker"

    @pytest.mark.asyncio
    async def test_login_uses_configured_client_path(self, tmp_path):
        executable = tmp_path / "Riot Client" / CLIENT_PATH_NAME
        executable.parent.mkdir()
        executable.write_text("")
        self.service.set_client_path(str(executable))

        run = await self.service.login(5, "summoner01", "hunter2-pass")

        assert run.state == 'completed'
        assert self.processes.spawned[0][0] == str(executable)
        assert ("type", "hunter2-pass") in self.keyboard.events
        assert self.on_status.call_args[0][0].step == "completed"
        assert self.on_status.call_args[0][0].account_id == 5

    @pytest.mark.asyncio
    async def test_login_without_client_path(self):
        with pytest.raises(AutomationPreconditionError):
            await self.service.login(5, "summoner01", "hunter2-pass")

        assert self.processes.terminated == []
        assert self.on_status.call_args[0][0].kind is StatusKind.ERROR

    @pytest.mark.asyncio
    async def test_concurrent_logins_are_single_flight(self, tmp_path):
        executable = tmp_path / "Riot Client" / CLIENT_PATH_NAME
        executable.parent.mkdir()
        executable.write_text("")
        self.service.set_client_path(str(executable))

        results = await asyncio.gather(
            self.service.login(1, "first", "pw1"),
            self.service.login(2, "second", "pw2"),
            return_exceptions=True
        )

        failures = [r for r in results if isinstance(r, AutomationPreconditionError)]
        assert len(failures) == 1
        typed = [e[1] for e in self.keyboard.events if e[0] == "type"]
        assert len(typed) == 2
