from .automation import AutomationSettings, LoginRequest, StatusEvent, StatusKind

__all__ = [
    'AutomationSettings',
    'LoginRequest',
    'StatusEvent',
    'StatusKind',
]
