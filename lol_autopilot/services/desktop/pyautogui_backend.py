"""
pyautogui based keyboard driver and screen matcher

pyautogui needs a display at import time, so it is loaded on first use.
"""

import logging
import time
from pathlib import Path

import pyperclip

from .base import KeyboardDriver, ScreenMatcher


def _pyautogui():
    import pyautogui

    pyautogui.FAILSAFE = False
    return pyautogui


class PyAutoGuiKeyboard(KeyboardDriver):
    """Keyboard driver backed by pyautogui"""

    def __init__(self, key_delay: float = 0.06, paste_settle: float = 0.15):
        self.key_delay = key_delay
        self.paste_settle = paste_settle

    def hotkey(self, *keys: str) -> None:
        _pyautogui().hotkey(*keys, interval=self.key_delay)

    def press(self, key: str) -> None:
        _pyautogui().press(key)

    def type_text(self, text: str) -> None:
        """Paste text through the clipboard, then put the previous clipboard back.

        pyautogui.write() silently skips characters missing from its key map,
        so accented or symbol passwords would arrive truncated.
        """
        try:
            previous = pyperclip.paste()
        except pyperclip.PyperclipException:
            previous = None

        pyperclip.copy(text)
        try:
            time.sleep(self.paste_settle)
            _pyautogui().hotkey("ctrl", "v", interval=self.key_delay)
            # the target window reads the clipboard asynchronously
            time.sleep(self.paste_settle)
        finally:
            pyperclip.copy(previous if previous is not None else "")


class PyAutoGuiScreenMatcher(ScreenMatcher):
    """Screen matcher backed by pyautogui.locateOnScreen"""

    def __init__(self, grayscale: bool = True):
        self.grayscale = grayscale
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def is_available(self) -> bool:
        """Check if pyautogui can load and grab the screen"""
        try:
            _pyautogui()
            return True
        except Exception as e:
            self.logger.debug(f"Screen matching unavailable: {e}")
            return False

    def locate(self, template_path: str) -> bool:
        pyautogui = _pyautogui()
        try:
            box = pyautogui.locateOnScreen(str(Path(template_path)), grayscale=self.grayscale)
        except pyautogui.ImageNotFoundException:
            return False
        return box is not None
