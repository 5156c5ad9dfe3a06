"""
pygetwindow based window locator

pygetwindow and pywin32 only import on Windows, so they are imported when a
method actually runs rather than at module import.
"""

import logging
from typing import List, Optional

import psutil

from .base import WindowInfo, WindowLocator


class PyGetWindowLocator(WindowLocator):
    """Window locator backed by pygetwindow, with owning module lookup through pywin32"""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _module_path(self, hwnd) -> str:
        if hwnd is None:
            return ""
        try:
            import win32process

            _, pid = win32process.GetWindowThreadProcessId(hwnd)
            return psutil.Process(pid).exe() or ""
        except (psutil.NoSuchProcess, psutil.AccessDenied, ImportError, OSError) as e:
            self.logger.debug(f"Could not resolve module for window {hwnd}: {e}")
            return ""

    def _to_info(self, window) -> WindowInfo:
        hwnd = getattr(window, "_hWnd", None)
        return WindowInfo(
            title=window.title or "",
            module_path=self._module_path(hwnd),
            handle=window,
        )

    def list_windows(self) -> List[WindowInfo]:
        import pygetwindow as gw

        return [self._to_info(window) for window in gw.getAllWindows()]

    def bring_to_front(self, window: WindowInfo) -> None:
        target = window.handle
        if target is None:
            return
        if getattr(target, "isMinimized", False):
            target.restore()
        target.activate()

    def active_window(self) -> Optional[WindowInfo]:
        import pygetwindow as gw

        active = gw.getActiveWindow()
        if active is None:
            return None
        return WindowInfo(title=active.title or "", handle=active)
