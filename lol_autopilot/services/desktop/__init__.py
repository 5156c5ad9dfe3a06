"""
Desktop capabilities: processes, windows, keyboard and screen

The abstract interfaces in ``base`` are what the automations depend on; the
psutil, pygetwindow and pyautogui implementations are the production
backends.
"""

from .base import KeyboardDriver, ProcessInspector, ScreenMatcher, WindowInfo, WindowLocator
from .psutil_backend import PsutilProcessInspector
from .pyautogui_backend import PyAutoGuiKeyboard, PyAutoGuiScreenMatcher
from .window_backend import PyGetWindowLocator

__all__ = [
    'KeyboardDriver',
    'ProcessInspector',
    'ScreenMatcher',
    'WindowInfo',
    'WindowLocator',
    'PsutilProcessInspector',
    'PyAutoGuiKeyboard',
    'PyAutoGuiScreenMatcher',
    'PyGetWindowLocator',
]
