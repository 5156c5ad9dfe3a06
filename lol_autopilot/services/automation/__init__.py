"""
Automation module for the League of Legends client

Three automations share one credential provider and one service client.
The two polling automatons talk to the local client service over HTTPS;
the login automator drives the Riot Client window through the desktop
capabilities.

Architecture Overview:
======================

    Front-end (CLI)
          │
          ▼
    ┌───────────────────────────────────────────────────┐
    │            AutomationService                      │ ← Main coordinator
    │     (Lifecycle + Settings + Callbacks)            │
    └──────┬──────────────┬──────────────┬──────────────┘
           │              │              │
           ▼              ▼              ▼
    ┌─────────────┐ ┌─────────────┐ ┌──────────────────┐
    │ ReadyCheck  │ │ Selection   │ │ LoginAutomator   │
    │ Automaton   │ │ Automaton   │ │ (LoginRun FSM)   │
    └──────┬──────┘ └──────┬──────┘ └────────┬─────────┘
           │               │                 │
           ▼               ▼                 ▼
    ┌─────────────────────────────┐ ┌──────────────────┐
    │ CredentialProvider +        │ │ Desktop          │
    │ ServiceClient (httpx)       │ │ capabilities     │
    └─────────────────────────────┘ └──────────────────┘

    Supporting Components:
    ├── PollingAutomaton  ← Fixed-interval loop, error rate limiting
    ├── StatusReporter    ← Status events to logs and the front-end
    ├── LoginGuard        ← Single-flight token for logins
    ├── LoginHelpers      ← Process names, window matchers, paths
    └── SelectionState    ← Immutable champion select state and transitions

Usage Patterns:
===============

    service = AutomationService(processes, windows, keyboard, screen)
    service.set_client_path(r"C:\\Riot Games\\Riot Client\\RiotClientServices.exe")
    service.set_auto_accept_enabled(True)
    service.set_pick_ban_settings(True, pick_champion_id=103, ban_champion_id=157)
    service.start()

    await service.login(account_id=1, username="name", password="secret")

``AutomationService`` itself is exported from ``lol_autopilot.services``.
"""

from .base_automaton import PollingAutomaton
from .login_automator import FocusPolicy, LoginAutomator, LoginRun
from .login_guard import LoginGuard
from .ready_check_machine import ReadyCheckAutomaton, ReadyCheckState
from .selection_machine import SelectionAutomaton
from .selection_state import SelectionSession, SelectionStage
from .status import ErrorRateLimiter, StatusReporter

__all__ = [
    'PollingAutomaton',
    'FocusPolicy',
    'LoginAutomator',
    'LoginRun',
    'LoginGuard',
    'ReadyCheckAutomaton',
    'ReadyCheckState',
    'SelectionAutomaton',
    'SelectionSession',
    'SelectionStage',
    'ErrorRateLimiter',
    'StatusReporter',
]
