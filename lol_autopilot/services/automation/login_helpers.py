"""
Login window helpers for the login automator

Common process names, window matchers and path utilities for driving the
Riot Client login form.
"""

from pathlib import Path
from typing import Iterable, Optional

from ..desktop.base import WindowInfo


class RiotClient:
    """Known names and launch arguments of the Riot/League client"""

    PROCESS_NAMES = [
        "LeagueClient.exe",
        "LeagueClientUx.exe",
        "LeagueClientUxRender.exe",
        "LeagueClientOptimus.exe",
        "RiotClientServices.exe",
        "RiotClientCrashHandler.exe",
    ]

    LAUNCH_ARGS = [
        "--launch-product=league_of_legends",
        "--launch-patchline=live",
    ]

    LOCKFILE_NAME = "lockfile"
    LEAGUE_DIR_NAME = "League of Legends"


class LoginWindowMatchers:
    """Substrings identifying the login window (lower case)"""

    LOGIN_TITLES = [
        'riot client',
        'league of legends',
        'connexion',
        'login',
    ]

    LOGIN_MODULE_SUFFIXES = [
        'riot client.exe',
    ]

    FOREGROUND_TITLES = [
        'riot client',
        'league of legends',
        'connexion',
    ]

    FOCUS_TEMPLATE = "riot-login-username.png"


def normalize_client_path(raw_path: str) -> str:
    """Strip quotes and surrounding whitespace from a user supplied path"""
    return raw_path.replace('"', '').strip()


def resolve_lockfile_path(client_path: str) -> Path:
    """``<client dir>/../League of Legends/lockfile``"""
    client_dir = Path(client_path).parent
    league_dir = (client_dir / ".." / RiotClient.LEAGUE_DIR_NAME).resolve()
    return league_dir / RiotClient.LOCKFILE_NAME


def default_template_path() -> Path:
    return Path(__file__).resolve().parent.parent.parent / "resources" / LoginWindowMatchers.FOCUS_TEMPLATE


def is_login_window(window: WindowInfo) -> bool:
    title = (window.title or "").lower()
    module = (window.module_path or "").lower()
    return (
        any(marker in title for marker in LoginWindowMatchers.LOGIN_TITLES)
        or any(module.endswith(suffix) for suffix in LoginWindowMatchers.LOGIN_MODULE_SUFFIXES)
    )


def find_login_window(windows: Iterable[WindowInfo]) -> Optional[WindowInfo]:
    for window in windows:
        if is_login_window(window):
            return window
    return None


def is_client_foreground(active: Optional[WindowInfo], target: Optional[WindowInfo]) -> bool:
    """True when the active window is the target, or at least a Riot/League window"""
    if active is None:
        return False
    active_title = (active.title or "").lower()
    if target is not None and active_title == (target.title or "").lower():
        return True
    return any(marker in active_title for marker in LoginWindowMatchers.FOREGROUND_TITLES)
