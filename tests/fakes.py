"""
Fakes of the desktop capabilities and the client service
"""

from collections import deque
from typing import List, Optional

from lol_autopilot.exceptions import ServiceError
from lol_autopilot.services.desktop.base import (
    KeyboardDriver, ProcessInspector, ScreenMatcher, WindowInfo, WindowLocator
)

CLIENT_COMMAND_LINE = (
    '"C:/Riot Games/League of Legends/LeagueClientUx.exe" '
    '"--remoting-auth-token=s3cr3t-T0ken_x" "--app-port=51234" --locale=en_US'
)


class FakeProcessInspector(ProcessInspector):
    def __init__(self, command_lines: Optional[List[str]] = None, spawn_error: Optional[Exception] = None):
        self.command_lines = list(command_lines or [])
        self.spawn_error = spawn_error
        self.scans = 0
        self.terminated: List[str] = []
        self.spawned: List[tuple] = []

    def find_command_lines(self, process_name: str) -> List[str]:
        self.scans += 1
        return list(self.command_lines)

    def terminate(self, process_name: str) -> int:
        self.terminated.append(process_name)
        return 0

    def spawn_detached(self, executable: str, args):
        if self.spawn_error:
            raise self.spawn_error
        self.spawned.append((executable, list(args)))


class FakeWindowLocator(WindowLocator):
    def __init__(self, windows: Optional[List[WindowInfo]] = None, active: Optional[WindowInfo] = None,
                 appear_after: int = 0):
        self.windows = list(windows or [])
        self.active = active
        self.appear_after = appear_after
        self.listings = 0
        self.focused: List[WindowInfo] = []

    def list_windows(self) -> List[WindowInfo]:
        self.listings += 1
        if self.listings <= self.appear_after:
            return []
        return list(self.windows)

    def bring_to_front(self, window: WindowInfo) -> None:
        self.focused.append(window)

    def active_window(self) -> Optional[WindowInfo]:
        return self.active


class RecordingKeyboard(KeyboardDriver):
    def __init__(self):
        self.events: List[tuple] = []

    def hotkey(self, *keys: str) -> None:
        self.events.append(("hotkey",) + keys)

    def press(self, key: str) -> None:
        self.events.append(("press", key))

    def type_text(self, text: str) -> None:
        self.events.append(("type", text))


class FakeScreenMatcher(ScreenMatcher):
    def __init__(self, available: bool = True, found: bool = True):
        self.available = available
        self.found = found
        self.lookups: List[str] = []

    def is_available(self) -> bool:
        return self.available

    def locate(self, template_path: str) -> bool:
        self.lookups.append(template_path)
        return self.found


class ScriptedClient:
    """
    Stand-in for ServiceClient answering from a script keyed by (method, path)

    A scripted value may be a single response, an exception instance to raise,
    or a list consumed one entry per call (the last entry repeats).
    Unscripted requests answer 404.
    """

    def __init__(self, script: Optional[dict] = None):
        self.script = {}
        self.calls: List[tuple] = []
        for key, value in (script or {}).items():
            self.on(key[0], key[1], value)

    def on(self, method: str, path: str, value):
        self.script[(method, path)] = deque(value) if isinstance(value, list) else deque([value])
        return self

    def calls_to(self, method: str, path: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == method and c[1] == path]

    async def call(self, credential, method: str, path: str, body=None):
        self.calls.append((method, path, body))
        entries = self.script.get((method, path))
        if entries is None:
            raise ServiceError.from_status(404, None, method, path)
        value = entries.popleft() if len(entries) > 1 else entries[0]
        if isinstance(value, Exception):
            raise value
        return value

    async def aclose(self):
        pass
