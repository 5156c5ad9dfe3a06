"""
Unit tests for the client service HTTP client
"""

import base64
import json

import httpx
import pytest

from lol_autopilot.exceptions import ResourceAbsentError, ServiceError, TransportFailureError, UnauthorizedError
from lol_autopilot.services.credential_provider import Credential
from lol_autopilot.services.service_client import Endpoints, ServiceClient, decode_body

CREDENTIAL = Credential(port=51234, token="tok-123")


def make_client(handler) -> ServiceClient:
    return ServiceClient(transport=httpx.MockTransport(handler))


class TestDecodeBody:

    def test_empty_is_none(self):
        assert decode_body("") is None

    def test_json(self):
        assert decode_body('{"state": "InProgress"}') == {"state": "InProgress"}

    def test_raw_text(self):
        assert decode_body("not json") == "not json"


class TestEndpoints:

    def test_action_paths(self):
        assert Endpoints.champ_select_action(4) == "/lol-champ-select/v1/session/actions/4"
        assert Endpoints.champ_select_action_complete(4) == "/lol-champ-select/v1/session/actions/4/complete"


class TestServiceClient:

    @pytest.mark.asyncio
    async def test_sends_basic_auth_to_loopback(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["method"] = request.method
            seen["body"] = request.content
            return httpx.Response(200, json={"ok": True})

        async with make_client(handler) as client:
            result = await client.call(CREDENTIAL, "PATCH", "/lol-champ-select/v1/session/actions/1", {"championId": 103})

        assert result == {"ok": True}
        assert seen["url"] == "https://127.0.0.1:51234/lol-champ-select/v1/session/actions/1"
        assert seen["method"] == "PATCH"
        assert seen["auth"] == "Basic " + base64.b64encode(b"riot:tok-123").decode()
        assert json.loads(seen["body"]) == {"championId": 103}

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self):
        async with make_client(lambda request: httpx.Response(204)) as client:
            assert await client.call(CREDENTIAL, "POST", Endpoints.READY_CHECK_ACCEPT) is None

    @pytest.mark.asyncio
    async def test_non_json_body_returns_text(self):
        async with make_client(lambda request: httpx.Response(200, text="plain")) as client:
            assert await client.call(CREDENTIAL, "GET", "/x") == "plain"

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        async with make_client(lambda request: httpx.Response(401, text="denied")) as client:
            with pytest.raises(UnauthorizedError) as exc_info:
                await client.call(CREDENTIAL, "GET", Endpoints.READY_CHECK)

        assert exc_info.value.body == "denied"
        assert exc_info.value.path == Endpoints.READY_CHECK

    @pytest.mark.asyncio
    async def test_not_found(self):
        async with make_client(lambda request: httpx.Response(404, json={"message": "No session"})) as client:
            with pytest.raises(ResourceAbsentError) as exc_info:
                await client.call(CREDENTIAL, "GET", Endpoints.CHAMP_SELECT_SESSION)

        assert exc_info.value.body == {"message": "No session"}

    @pytest.mark.asyncio
    async def test_other_status(self):
        async with make_client(lambda request: httpx.Response(500, json={"error": "x"})) as client:
            with pytest.raises(ServiceError) as exc_info:
                await client.call(CREDENTIAL, "POST", Endpoints.READY_CHECK_ACCEPT)

        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, (UnauthorizedError, ResourceAbsentError))

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(TransportFailureError) as exc_info:
                await client.call(CREDENTIAL, "GET", Endpoints.READY_CHECK)

        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_token_not_logged(self, caplog):
        caplog.set_level("DEBUG")
        async with make_client(lambda request: httpx.Response(500, text="oops")) as client:
            with pytest.raises(ServiceError):
                await client.call(CREDENTIAL, "GET", "/x")

        assert "tok-123" not in caplog.text
