"""
psutil based process inspector
"""

import logging
import os
import subprocess
import sys
from typing import List, Sequence

import psutil

from .base import ProcessInspector


class PsutilProcessInspector(ProcessInspector):
    """Process inspector backed by psutil and subprocess"""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _matching(self, process_name: str):
        wanted = process_name.lower()
        for proc in psutil.process_iter(['name', 'pid']):
            try:
                if proc.info['name'] and proc.info['name'].lower() == wanted:
                    yield proc
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

    def find_command_lines(self, process_name: str) -> List[str]:
        command_lines = []
        for proc in self._matching(process_name):
            try:
                parts = proc.cmdline()
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            if parts:
                command_lines.append(" ".join(parts))
        return command_lines

    def terminate(self, process_name: str) -> int:
        killed = 0
        for proc in self._matching(process_name):
            try:
                children = proc.children(recursive=True)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                children = []

            for target in [*children, proc]:
                try:
                    self.logger.debug(f"Killing PID {target.pid} ({process_name})")
                    target.kill()
                    killed += 1
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    continue
        return killed

    def spawn_detached(self, executable: str, args: Sequence[str]) -> subprocess.Popen:
        kwargs = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
            "close_fds": True,
            "cwd": os.path.dirname(executable) or None,
        }
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True

        return subprocess.Popen([executable, *args], **kwargs)
