"""
Services layer: client service access, automations and desktop capabilities
"""

from .automation.automation_service import AutomationService, CallbackManager
from .credential_provider import Credential, CredentialProvider
from .service_client import Endpoints, ServiceClient
from .summoner_service import AccountWatcher, DecayInfo, SummonerInfo, SummonerService

__all__ = [
    'AutomationService',
    'CallbackManager',
    'Credential',
    'CredentialProvider',
    'Endpoints',
    'ServiceClient',
    'AccountWatcher',
    'DecayInfo',
    'SummonerInfo',
    'SummonerService',
]
