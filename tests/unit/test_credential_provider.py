"""
Unit tests for credential discovery and caching
"""

from unittest.mock import MagicMock

import pytest

from fakes import CLIENT_COMMAND_LINE, FakeProcessInspector
from lol_autopilot.exceptions import CredentialUnavailableError
from lol_autopilot.services.credential_provider import CredentialProvider, parse_command_line


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestParseCommandLine:

    def test_extracts_port_and_token(self):
        credential = parse_command_line(CLIENT_COMMAND_LINE, acquired_at=3.0)

        assert credential.port == 51234
        assert credential.token == "s3cr3t-T0ken_x"
        assert credential.acquired_at == 3.0
        assert credential.base_url == "https://127.0.0.1:51234"

    def test_missing_token_returns_none(self):
        assert parse_command_line("LeagueClientUx.exe --app-port=51234") is None

    def test_missing_port_returns_none(self):
        assert parse_command_line("LeagueClientUx.exe --remoting-auth-token=abc") is None

    def test_token_not_in_repr(self):
        credential = parse_command_line(CLIENT_COMMAND_LINE)

        assert "s3cr3t" not in repr(credential)


class TestCredentialProvider:

    def setup_method(self):
        self.clock = FakeClock()
        self.inspector = FakeProcessInspector([CLIENT_COMMAND_LINE])
        self.provider = CredentialProvider(self.inspector, ttl=5.0, clock=self.clock)

    def test_caches_within_ttl(self):
        first = self.provider.acquire()
        self.clock.now += 4.9
        second = self.provider.acquire()

        assert first is second
        assert self.inspector.scans == 1

    def test_rescans_after_ttl(self):
        self.provider.acquire()
        self.clock.now += 5.0
        self.provider.acquire()

        assert self.inspector.scans == 2

    def test_invalidate_forces_rescan(self):
        self.provider.acquire()
        self.provider.invalidate()

        assert self.provider.cached is None
        self.provider.acquire()
        assert self.inspector.scans == 2

    def test_no_client_process(self):
        self.inspector.command_lines = []

        assert self.provider.acquire() is None
        with pytest.raises(CredentialUnavailableError):
            self.provider.require()

    def test_client_disappears_clears_cache(self):
        self.provider.acquire()
        self.inspector.command_lines = []
        self.clock.now += 10

        assert self.provider.acquire() is None
        assert self.provider.cached is None

    def test_skips_unparseable_command_lines(self):
        self.inspector.command_lines = ["LeagueClientUx.exe --type=renderer", CLIENT_COMMAND_LINE]

        assert self.provider.acquire().port == 51234

    def test_scan_failure_is_treated_as_absent(self):
        inspector = MagicMock()
        inspector.find_command_lines.side_effect = PermissionError("access denied")
        provider = CredentialProvider(inspector)

        assert provider.acquire() is None

    def test_token_never_logged(self, caplog):
        caplog.set_level("DEBUG")
        self.provider.acquire()
        self.provider.invalidate()

        assert "s3cr3t" not in caplog.text
