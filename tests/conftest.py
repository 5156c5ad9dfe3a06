import pytest

from lol_autopilot.services.credential_provider import CredentialProvider
from lol_autopilot.services.desktop.base import WindowInfo

from fakes import CLIENT_COMMAND_LINE, FakeProcessInspector


@pytest.fixture
def inspector():
    return FakeProcessInspector([CLIENT_COMMAND_LINE])


@pytest.fixture
def credentials(inspector):
    return CredentialProvider(inspector, ttl=5.0)


@pytest.fixture
def login_window():
    return WindowInfo(title="Riot Client", module_path="C:/Riot Games/Riot Client/Riot Client.exe")
