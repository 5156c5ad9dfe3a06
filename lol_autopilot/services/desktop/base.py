"""
Abstract desktop capabilities used by the client automations

Credential discovery and the login pipeline only talk to the operating
system through these interfaces, so tests can substitute scripted fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence


@dataclass
class WindowInfo:
    """A top-level window as seen by a WindowLocator"""
    title: str
    module_path: str = ""
    handle: Any = field(default=None, compare=False, repr=False)


class ProcessInspector(ABC):
    """Process enumeration, termination and launch"""

    @abstractmethod
    def find_command_lines(self, process_name: str) -> List[str]:
        """
        Return the command line of every running process with this executable name

        Args:
            process_name: Executable name, compared case-insensitively

        Returns:
            One joined command line string per matching process
        """
        pass

    @abstractmethod
    def terminate(self, process_name: str) -> int:
        """Kill every process with this name and its children; return how many were killed"""
        pass

    @abstractmethod
    def spawn_detached(self, executable: str, args: Sequence[str]) -> Any:
        """Start an executable detached from this process"""
        pass


class WindowLocator(ABC):
    """Window enumeration and focus"""

    @abstractmethod
    def list_windows(self) -> List[WindowInfo]:
        pass

    @abstractmethod
    def bring_to_front(self, window: WindowInfo) -> None:
        pass

    @abstractmethod
    def active_window(self) -> Optional[WindowInfo]:
        pass


class KeyboardDriver(ABC):
    """Synthetic keyboard input"""

    @abstractmethod
    def hotkey(self, *keys: str) -> None:
        """Press keys in order and release them in reverse order"""
        pass

    @abstractmethod
    def press(self, key: str) -> None:
        pass

    @abstractmethod
    def type_text(self, text: str) -> None:
        pass


class ScreenMatcher(ABC):
    """On-screen image template matching"""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if template matching can run on this system"""
        pass

    @abstractmethod
    def locate(self, template_path: str) -> bool:
        """Return True when the template is currently visible on screen"""
        pass
