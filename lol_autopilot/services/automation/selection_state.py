"""
Champion select session state

State Flow Diagram:
===================

    [NO_SESSION] ──── session observed ────► [PLANNING] / [BANNING] / [PICKING]
         ▲                                          │
         │                                          ▼
         │                                     [PICKING] ◄──── not converged ────┐
         │                                          │                           │
         │                          pick read back == target                    │
         │                                          ▼                           │
         │                                  [PICK_CONFIRMED] ───────────────────┘
         │                                          │
         │                                     lock accepted
         │                                          ▼
         └──────── session ended / new id ──── [LOCKED]

``SelectionSession`` values are immutable. Every helper in this module
returns a new value with ``version`` bumped, and every stage change goes
through ``transition`` so that LOCKED can only follow PICK_CONFIRMED.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from ...exceptions import InvalidTransitionError
from ...models.automation import AutomationSettings


class SelectionStage(Enum):
    """Where the local player stands in the current champion select"""
    NO_SESSION = "no_session"
    PLANNING = "planning"
    BANNING = "banning"
    PICKING = "picking"
    PICK_CONFIRMED = "pick_confirmed"
    LOCKED = "locked"


_ANY_OPEN = frozenset({
    SelectionStage.NO_SESSION,
    SelectionStage.PLANNING,
    SelectionStage.BANNING,
    SelectionStage.PICKING,
})

ALLOWED_TRANSITIONS: Dict[SelectionStage, FrozenSet[SelectionStage]] = {
    SelectionStage.NO_SESSION: _ANY_OPEN,
    SelectionStage.PLANNING: _ANY_OPEN,
    SelectionStage.BANNING: _ANY_OPEN,
    SelectionStage.PICKING: _ANY_OPEN | {SelectionStage.PICK_CONFIRMED},
    SelectionStage.PICK_CONFIRMED: _ANY_OPEN | {SelectionStage.LOCKED},
    SelectionStage.LOCKED: frozenset({SelectionStage.LOCKED, SelectionStage.NO_SESSION}),
}


class Phase:
    """Normalized champion select phase names"""
    PLANNING = "PLANNING"
    BAN_PICK = "BANPICK"
    FINALIZATION = "FINALIZATION"


def normalize_phase(phase: Any) -> str:
    """``BAN_PICK``, ``BanPick`` and ``ban-pick`` all normalize to ``BANPICK``"""
    if not phase:
        return ""
    return re.sub(r"[^A-Za-z0-9]", "", str(phase)).upper()


@dataclass(frozen=True)
class SelectionAction:
    """One ban or pick action read from the session"""
    action_id: Any
    actor_cell_id: Any
    kind: str
    completed: bool
    in_progress: bool
    champion_id: int = 0

    @classmethod
    def from_payload(cls, data: dict) -> "SelectionAction":
        return cls(
            action_id=data.get("id"),
            actor_cell_id=data.get("actorCellId"),
            kind=str(data.get("type") or "").lower(),
            completed=bool(data.get("completed")),
            in_progress=bool(data.get("isInProgress")),
            champion_id=int(data.get("championId") or 0),
        )

    def is_open_for(self, cell_id: Any, kind: str) -> bool:
        return (
            self.actor_cell_id == cell_id
            and self.kind == kind
            and not self.completed
            and self.in_progress
        )


@dataclass(frozen=True)
class SelectionSession:
    """Progress of the local player through one champion select"""
    session_id: Optional[Any] = None
    phase: str = ""
    stage: SelectionStage = SelectionStage.NO_SESSION
    has_banned: bool = False
    has_pre_picked: bool = False
    has_picked: bool = False
    has_locked: bool = False
    version: int = 0

    @property
    def flags(self) -> tuple:
        return (self.has_banned, self.has_pre_picked, self.has_picked, self.has_locked)

    def _bump(self, **changes) -> "SelectionSession":
        return replace(self, version=self.version + 1, **changes)


def parse_actions(payload: dict) -> List[SelectionAction]:
    """Flatten the nested action groups of a session payload"""
    actions = []
    for group in payload.get("actions") or []:
        entries: Iterable = group if isinstance(group, list) else [group]
        for entry in entries:
            if isinstance(entry, dict):
                actions.append(SelectionAction.from_payload(entry))
    return actions


def find_open_action(actions: Iterable[SelectionAction], cell_id: Any, kind: str) -> Optional[SelectionAction]:
    for action in actions:
        if action.is_open_for(cell_id, kind):
            return action
    return None


def champion_on_action(payload: Any, action_id: Any) -> int:
    """Champion currently set on an action, 0 when absent"""
    if not isinstance(payload, dict):
        return 0
    for action in parse_actions(payload):
        if action.action_id == action_id:
            return action.champion_id
    return 0


def find_local_seat(payload: dict) -> Optional[dict]:
    local_cell_id = payload.get("localPlayerCellId")
    for cell in payload.get("myTeam") or []:
        if isinstance(cell, dict) and cell.get("cellId") == local_cell_id:
            return cell
    return None


def session_identity(payload: dict) -> Optional[Any]:
    """Server clock value identifying the session, None while the timer is not running"""
    timer = payload.get("timer") or {}
    if not timer.get("adjustedTimeLeftInPhase"):
        return None
    return timer.get("internalNowInEpochMs")


def transition(session: SelectionSession, stage: SelectionStage) -> SelectionSession:
    """Move to another stage, refusing transitions outside ALLOWED_TRANSITIONS"""
    if stage not in ALLOWED_TRANSITIONS[session.stage]:
        raise InvalidTransitionError(session.stage.value, stage.value)
    if stage is session.stage:
        return session
    return session._bump(stage=stage)


def reset_session(session: SelectionSession) -> SelectionSession:
    """Forget the session and every completion flag"""
    if session == SelectionSession(version=session.version):
        return session
    return SelectionSession(version=session.version + 1)


def stage_for_phase(session: SelectionSession, phase: str, settings: AutomationSettings) -> SelectionStage:
    if session.has_locked:
        return SelectionStage.LOCKED
    if normalize_phase(phase) == Phase.BAN_PICK:
        if settings.ban_champion_id and not session.has_banned:
            return SelectionStage.BANNING
        return SelectionStage.PICKING
    return SelectionStage.PLANNING


def observe(session: SelectionSession, identity: Optional[Any], phase: str,
            settings: AutomationSettings) -> SelectionSession:
    """
    Fold a fresh session read into the state

    A new identity resets all four completion flags before anything else is
    evaluated. A missing identity keeps the stored one.
    """
    if identity is not None and identity != session.session_id:
        session = SelectionSession(session_id=identity, version=session.version + 1)

    if phase != session.phase:
        session = session._bump(phase=phase)

    return transition(session, stage_for_phase(session, phase, settings))


def mark_banned(session: SelectionSession) -> SelectionSession:
    return session._bump(has_banned=True)


def mark_pre_picked(session: SelectionSession) -> SelectionSession:
    return session._bump(has_pre_picked=True)


def mark_picked(session: SelectionSession) -> SelectionSession:
    return session._bump(has_picked=True)


def confirm_pick(session: SelectionSession) -> SelectionSession:
    if session.stage is not SelectionStage.PICK_CONFIRMED:
        session = transition(session, SelectionStage.PICKING)
    return transition(session, SelectionStage.PICK_CONFIRMED)


def mark_locked(session: SelectionSession) -> SelectionSession:
    session = transition(session, SelectionStage.LOCKED)
    return session._bump(has_locked=True)
