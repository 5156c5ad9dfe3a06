"""
Credential discovery for the local client service

The client exposes its HTTPS port and a per-launch auth token only on the
command line of ``LeagueClientUx.exe``. Both change every time the client
restarts, so the result is cached for a few seconds at most and dropped on
any 401.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..exceptions import CredentialUnavailableError
from .desktop.base import ProcessInspector

CLIENT_PROCESS_NAME = "LeagueClientUx.exe"
LOOPBACK_HOST = "127.0.0.1"

PORT_PATTERN = re.compile(r"--app-port=(\d+)")
TOKEN_PATTERN = re.compile(r"--remoting-auth-token=([\w-]+)")


@dataclass(frozen=True)
class Credential:
    """Port and token of the running client service"""
    port: int
    token: str = field(repr=False)
    acquired_at: float = 0.0
    host: str = LOOPBACK_HOST

    @property
    def base_url(self) -> str:
        return f"https://{self.host}:{self.port}"

    def age(self, now: float) -> float:
        return now - self.acquired_at


def parse_command_line(command_line: str, acquired_at: float = 0.0) -> Optional[Credential]:
    """Extract port and token from a client command line, or None if either is missing"""
    port_match = PORT_PATTERN.search(command_line)
    token_match = TOKEN_PATTERN.search(command_line)
    if not port_match or not token_match:
        return None

    token = token_match.group(1).replace('"', '').replace("'", '')
    return Credential(port=int(port_match.group(1)), token=token, acquired_at=acquired_at)


class CredentialProvider:
    """
    Discovers and caches the client service credential

    Concurrent callers may both refresh an expired cache; the re-derived value
    is the same, so no lock is taken.
    """

    def __init__(self,
                 inspector: ProcessInspector,
                 ttl: float = 5.0,
                 process_name: str = CLIENT_PROCESS_NAME,
                 clock: Callable[[], float] = time.monotonic):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.inspector = inspector
        self.ttl = ttl
        self.process_name = process_name
        self._clock = clock
        self._cached: Optional[Credential] = None

    @property
    def cached(self) -> Optional[Credential]:
        return self._cached

    def acquire(self) -> Optional[Credential]:
        """
        Return a fresh enough credential, re-deriving it from the process list when stale

        Returns:
            The credential, or None when no client process exposes one
        """
        now = self._clock()
        if self._cached is not None and self._cached.age(now) < self.ttl:
            return self._cached

        credential = self._read_from_process(now)
        if credential is None:
            if self._cached is not None:
                self.logger.info("Client service no longer available")
            self._cached = None
            return None

        if self._cached is None or self._cached.port != credential.port:
            self.logger.info(f"Client service found on port {credential.port}")
        self._cached = credential
        return credential

    def require(self) -> Credential:
        """Like acquire(), but raise CredentialUnavailableError when the client is not running"""
        credential = self.acquire()
        if credential is None:
            raise CredentialUnavailableError(self.process_name)
        return credential

    def invalidate(self):
        """Drop the cached credential so the next acquire() rescans processes"""
        if self._cached is not None:
            self.logger.debug("Credential invalidated")
        self._cached = None

    def _read_from_process(self, now: float) -> Optional[Credential]:
        try:
            command_lines = self.inspector.find_command_lines(self.process_name)
        except Exception as e:
            self.logger.debug(f"Process scan failed: {e}")
            return None

        for command_line in command_lines:
            credential = parse_command_line(command_line, acquired_at=now)
            if credential is not None:
                return credential
        return None
