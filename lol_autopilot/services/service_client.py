"""
Authenticated HTTP client for the local client service

The service listens on loopback only and presents a self-signed
certificate, so certificate verification is disabled for this client and
nothing else. The client is not state-aware: callers decide what a 401 or a
404 means for them.
"""

import json
import logging
from typing import Any, Optional

import httpx

from ..exceptions import ServiceError, TransportFailureError
from .credential_provider import Credential

SERVICE_USERNAME = "riot"


class Endpoints:
    """Client service paths used by the automations"""

    READY_CHECK = "/lol-matchmaking/v1/ready-check"
    READY_CHECK_ACCEPT = "/lol-matchmaking/v1/ready-check/accept"

    CHAMP_SELECT_SESSION = "/lol-champ-select/v1/session"
    CHAMP_SELECT_MY_SELECTION = "/lol-champ-select/v1/session/my-selection"

    CURRENT_SUMMONER = "/lol-summoner/v1/current-summoner"
    CURRENT_RANKED_STATS = "/lol-ranked/v1/current-ranked-stats"
    CHAT_ME = "/lol-chat/v1/me"

    @staticmethod
    def champ_select_action(action_id: Any) -> str:
        return f"/lol-champ-select/v1/session/actions/{action_id}"

    @staticmethod
    def champ_select_action_complete(action_id: Any) -> str:
        return f"/lol-champ-select/v1/session/actions/{action_id}/complete"


def decode_body(text: str) -> Any:
    """JSON when it parses, the raw text otherwise, None when empty"""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class ServiceClient:
    """Issues Basic-Auth requests against the client service"""

    def __init__(self, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._client = httpx.AsyncClient(
            verify=False,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def call(self, credential: Credential, method: str, path: str, body: Any = None) -> Any:
        """
        Send one request to the client service

        Args:
            credential: Port and token of the running client
            method: HTTP method
            path: Service path, e.g. ``Endpoints.READY_CHECK``
            body: JSON-serializable payload, omitted when None

        Returns:
            Decoded JSON, the raw text for non-JSON payloads, or None for an empty body

        Raises:
            ServiceError: status >= 400 (UnauthorizedError / ResourceAbsentError for 401 / 404)
            TransportFailureError: the service could not be reached
        """
        url = f"{credential.base_url}{path}"
        self.logger.debug(f"{method} {path} (port {credential.port})")

        try:
            response = await self._client.request(
                method,
                url,
                json=body,
                auth=httpx.BasicAuth(SERVICE_USERNAME, credential.token),
            )
        except httpx.TransportError as e:
            raise TransportFailureError(method, path, str(e) or e.__class__.__name__) from e

        text = response.text
        if response.status_code >= 400:
            error_body = decode_body(text)
            self.logger.debug(f"{method} {path} -> {response.status_code} {error_body!r}")
            raise ServiceError.from_status(response.status_code, error_body, method, path)

        self.logger.debug(f"{method} {path} -> {response.status_code}")
        return decode_body(text)
