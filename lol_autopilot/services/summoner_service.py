"""
Summoner identity, rank decay and chat availability of the connected account
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..exceptions import UnauthorizedError
from .automation.base_automaton import PollingAutomaton
from .automation.status import StatusReporter
from .credential_provider import CredentialProvider
from .service_client import Endpoints, ServiceClient

AVAILABILITY_STATUSES = ("chat", "away", "offline", "mobile", "dnd")

SOLO_QUEUE = "RANKED_SOLO_5x5"
FLEX_QUEUE = "RANKED_FLEX_SR"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class SummonerInfo:
    """Identity of the account logged into the client"""
    game_name: str = ""
    tag_line: str = ""
    summoner_name: str = ""
    puuid: str = ""
    summoner_id: int = 0
    account_id: int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> "SummonerInfo":
        data = payload if isinstance(payload, dict) else {}
        return cls(
            game_name=data.get("gameName") or data.get("displayName") or "",
            tag_line=data.get("tagLine") or "",
            summoner_name=data.get("displayName") or "",
            puuid=data.get("puuid") or "",
            summoner_id=data.get("summonerId") or 0,
            account_id=data.get("accountId") or 0,
        )


def days_until_decay(ranked_stats: Any, queue: str) -> int:
    """``queueMap.<queue>.warnings.daysUntilDecay``, -1 when absent"""
    if not isinstance(ranked_stats, dict):
        return -1
    queue_stats = (ranked_stats.get("queueMap") or {}).get(queue) or {}
    days = (queue_stats.get("warnings") or {}).get("daysUntilDecay")
    return -1 if days is None else days


@dataclass(frozen=True)
class DecayInfo:
    """Days before solo and flex ranks start decaying (-1 when not applicable)"""
    solo_decay_days: int = -1
    flex_decay_days: int = -1
    summoner: Optional[SummonerInfo] = None
    timestamp: str = field(default_factory=_now_iso)

    @classmethod
    def from_payload(cls, ranked_stats: Any, summoner: Optional[SummonerInfo] = None) -> "DecayInfo":
        return cls(
            solo_decay_days=days_until_decay(ranked_stats, SOLO_QUEUE),
            flex_decay_days=days_until_decay(ranked_stats, FLEX_QUEUE),
            summoner=summoner,
        )

    def to_dict(self) -> dict:
        payload = {}
        if self.summoner is not None:
            payload.update({
                "gameName": self.summoner.game_name,
                "tagLine": self.summoner.tag_line,
                "summonerName": self.summoner.summoner_name,
                "puuid": self.summoner.puuid,
            })
        payload.update({
            "soloDecayDays": self.solo_decay_days,
            "flexDecayDays": self.flex_decay_days,
            "timestamp": self.timestamp,
        })
        return payload


class SummonerService:
    """One-shot reads and writes against the connected account"""

    def __init__(self, credentials: CredentialProvider, client: ServiceClient):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.credentials = credentials
        self.client = client

    async def _get(self, path: str) -> Any:
        credential = self.credentials.require()
        try:
            return await self.client.call(credential, "GET", path)
        except UnauthorizedError:
            self.credentials.invalidate()
            raise

    async def current_summoner(self) -> SummonerInfo:
        summoner = SummonerInfo.from_payload(await self._get(Endpoints.CURRENT_SUMMONER))
        self.logger.info(f"Current summoner: {summoner.game_name}#{summoner.tag_line}")
        return summoner

    async def decay_info(self) -> DecayInfo:
        info = DecayInfo.from_payload(await self._get(Endpoints.CURRENT_RANKED_STATS))
        self.logger.info(f"Decay info: solo={info.solo_decay_days}, flex={info.flex_decay_days}")
        return info

    async def decay_info_with_summoner(self) -> DecayInfo:
        """Summoner and ranked stats fetched concurrently"""
        summoner_payload, ranked_stats = await asyncio.gather(
            self._get(Endpoints.CURRENT_SUMMONER),
            self._get(Endpoints.CURRENT_RANKED_STATS),
        )
        return DecayInfo.from_payload(ranked_stats, SummonerInfo.from_payload(summoner_payload))

    async def set_availability(self, status: str) -> str:
        """
        Set the chat availability of the connected account

        Args:
            status: One of ``chat``, ``away``, ``offline``, ``mobile``, ``dnd``

        Raises:
            ValueError: unknown status
            CredentialUnavailableError: client not running
            ServiceError: the client refused the change
        """
        if status not in AVAILABILITY_STATUSES:
            raise ValueError(f"Unknown availability '{status}', expected one of {', '.join(AVAILABILITY_STATUSES)}")

        credential = self.credentials.require()
        try:
            await self.client.call(credential, "PUT", Endpoints.CHAT_ME, {"availability": status})
        except UnauthorizedError:
            self.credentials.invalidate()
            raise

        self.logger.info(f"Availability set to: {status}")
        return status


DecayCallback = Callable[[DecayInfo], None]


class AccountWatcher(PollingAutomaton):
    """Reports decay info once each time a different account connects"""

    def __init__(self,
                 credentials: CredentialProvider,
                 client: ServiceClient,
                 on_account_changed: Optional[DecayCallback] = None,
                 reporter: Optional[StatusReporter] = None,
                 interval: float = 10.0):
        super().__init__(credentials, client, interval, reporter)
        self.on_account_changed = on_account_changed
        self.last_puuid: Optional[str] = None

    async def tick(self):
        credential = self.credentials.acquire()
        if credential is None:
            if self.last_puuid is not None:
                self.logger.info("Client disconnected, resetting account tracking")
                self.last_puuid = None
            return

        try:
            summoner = SummonerInfo.from_payload(
                await self.client.call(credential, "GET", Endpoints.CURRENT_SUMMONER)
            )
            if not summoner.puuid or summoner.puuid == self.last_puuid:
                return

            self.logger.info(f"New account detected: {summoner.game_name}")
            ranked_stats = await self.client.call(credential, "GET", Endpoints.CURRENT_RANKED_STATS)
            self.last_puuid = summoner.puuid
        except UnauthorizedError:
            # client is probably restarting
            self.credentials.invalidate()
            return
        except Exception as e:
            self.logger.debug(f"Account check failed: {e}")
            return

        info = DecayInfo.from_payload(ranked_stats, summoner)
        self.logger.debug(f"Sending decay update: {info.to_dict()}")
        if self.on_account_changed:
            try:
                self.on_account_changed(info)
            except Exception as e:
                self.logger.warning(f"Decay callback failed: {e}")
