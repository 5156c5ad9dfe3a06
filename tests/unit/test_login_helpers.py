"""
Unit tests for login window matching, path helpers and the login guard
"""

import pytest

from lol_autopilot.exceptions import LoginInProgressError
from lol_autopilot.models.automation import LoginRequest
from lol_autopilot.services.automation.login_guard import LoginGuard
from lol_autopilot.services.automation.login_helpers import (
    default_template_path, find_login_window, is_client_foreground, is_login_window,
    normalize_client_path, resolve_lockfile_path
)
from lol_autopilot.services.desktop.base import WindowInfo


class TestWindowMatching:

    @pytest.mark.parametrize("title", ["Riot Client", "League of Legends", "Connexion", "Riot Client - Login"])
    def test_title_markers(self, title):
        assert is_login_window(WindowInfo(title))

    def test_module_path(self):
        assert is_login_window(WindowInfo("", module_path=r"C:\Riot Games\Riot Client\Riot Client.exe"))

    def test_unrelated_window(self):
        assert not is_login_window(WindowInfo("Discord", module_path="C:/Discord/Discord.exe"))

    def test_find_first_match(self):
        windows = [WindowInfo("Discord"), WindowInfo("Riot Client"), WindowInfo("League of Legends")]

        assert find_login_window(windows).title == "Riot Client"
        assert find_login_window([]) is None

    def test_foreground(self):
        target = WindowInfo("Riot Client Main")

        assert is_client_foreground(WindowInfo("riot client main"), target)
        assert is_client_foreground(WindowInfo("League of Legends"), target)
        assert not is_client_foreground(WindowInfo("Notepad"), target)
        assert not is_client_foreground(None, target)


class TestPaths:

    def test_normalize_client_path(self):
        assert normalize_client_path('  "C:\\Riot Games\\Riot Client\\RiotClientServices.exe" ') == \
            "C:\\Riot Games\\Riot Client\\RiotClientServices.exe"

    def test_lockfile_is_next_to_client_dir(self, tmp_path):
        client = tmp_path / "Riot Client" / "RiotClientServices.exe"

        assert resolve_lockfile_path(str(client)) == (tmp_path / "League of Legends" / "lockfile").resolve()

    def test_default_template_lives_in_package_resources(self):
        path = default_template_path()

        assert path.name == "riot-login-username.png"
        assert path.parent.name == "resources"
        assert path.parent.parent.name == "lol_autopilot"


class TestLoginRequest:

    def test_missing_fields_in_order(self):
        assert LoginRequest(None, "", "", "").missing_field() == "account_id"
        assert LoginRequest(1, "user", "", "C:/x.exe").missing_field() == "credentials"
        assert LoginRequest(1, "user", "pw", " ").missing_field() == "client_path"
        assert LoginRequest(1, "user", "pw", "C:/x.exe").missing_field() is None


class TestLoginGuard:

    def test_single_flight(self):
        guard = LoginGuard()
        guard.acquire(1)

        with pytest.raises(LoginInProgressError):
            guard.acquire(1)
        with pytest.raises(LoginInProgressError):
            guard.acquire(2)

        guard.release(1)
        assert guard.is_held is False

    def test_release_by_other_account_is_ignored(self):
        guard = LoginGuard()
        guard.acquire(1)
        guard.release(2)

        assert guard.active_account_id == 1

    def test_hold_releases_on_error(self):
        guard = LoginGuard()

        with pytest.raises(RuntimeError):
            with guard.hold(5):
                assert guard.active_account_id == 5
                raise RuntimeError("boom")

        assert guard.is_held is False
