"""
Custom exceptions for client automation error handling
"""

from typing import Any, Optional


class AutomationError(Exception):
    """Base exception class for all automation-related errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "AUTOMATION_ERROR"
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} (Code: {self.error_code}, Details: {self.details})"
        return f"{self.message} (Code: {self.error_code})"


class CredentialUnavailableError(AutomationError):
    """Exception raised when no running client process exposes credentials"""

    def __init__(self, process_name: str = "LeagueClientUx.exe"):
        message = "League client not connected"
        super().__init__(message, "CREDENTIAL_UNAVAILABLE", {"process_name": process_name})
        self.process_name = process_name


class ServiceError(AutomationError):
    """Exception raised when the client service answers with a status >= 400"""

    def __init__(self, status_code: int, body: Any = None, method: str = "", path: str = ""):
        message = f"Client service request failed ({status_code}) on {method} {path}".rstrip()
        details = {
            "status_code": status_code,
            "method": method,
            "path": path
        }
        super().__init__(message, "SERVICE_ERROR", details)
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path

    @classmethod
    def from_status(cls, status_code: int, body: Any = None, method: str = "", path: str = "") -> "ServiceError":
        """Build the most specific error for a response status"""
        if status_code == 401:
            return UnauthorizedError(body, method, path)
        if status_code == 404:
            return ResourceAbsentError(body, method, path)
        return cls(status_code, body, method, path)


class UnauthorizedError(ServiceError):
    """Exception raised on 401; the cached credential is stale"""

    def __init__(self, body: Any = None, method: str = "", path: str = ""):
        super().__init__(401, body, method, path)
        self.error_code = "UNAUTHORIZED"


class ResourceAbsentError(ServiceError):
    """Exception raised on 404; the phase or session does not currently exist"""

    def __init__(self, body: Any = None, method: str = "", path: str = ""):
        super().__init__(404, body, method, path)
        self.error_code = "RESOURCE_ABSENT"


class TransportFailureError(AutomationError):
    """Exception raised when the client service cannot be reached at all"""

    def __init__(self, method: str, path: str, last_error: Optional[str] = None):
        message = f"Transport failure on {method} {path}"
        if last_error:
            message += f": {last_error}"

        details = {
            "method": method,
            "path": path,
            "last_error": last_error
        }
        super().__init__(message, "TRANSPORT_ERROR", details)
        self.method = method
        self.path = path
        self.last_error = last_error


class AutomationPreconditionError(AutomationError):
    """Exception raised when a login request is missing required configuration"""

    def __init__(self, field: str, reason: str):
        super().__init__(reason, "PRECONDITION_FAILED", {"field": field})
        self.field = field
        self.reason = reason

    def __str__(self):
        return self.reason


class LoginInProgressError(AutomationPreconditionError):
    """Exception raised when another login automation is already running"""

    def __init__(self, active_account_id: Any):
        super().__init__(
            "account_id",
            "Another login is already in progress. Wait for it to finish."
        )
        self.error_code = "LOGIN_IN_PROGRESS"
        self.active_account_id = active_account_id


class AutomationTimeoutError(AutomationError):
    """Exception raised when UI automation waits out its timeout"""

    def __init__(self, operation: str, timeout: float, message: Optional[str] = None):
        message = message or f"Operation '{operation}' timed out after {timeout:g} seconds"
        details = {
            "operation": operation,
            "timeout": timeout
        }
        super().__init__(message, "TIMEOUT_ERROR", details)
        self.operation = operation
        self.timeout = timeout

    def __str__(self):
        return self.message


class WindowNotFoundError(AutomationTimeoutError):
    """Exception raised when the login window never appears"""

    def __init__(self, timeout: float):
        super().__init__(
            "wait-login-window",
            timeout,
            "Could not detect the Riot Client login window. Check that the client actually started."
        )


class VisualConfirmationTimeoutError(AutomationTimeoutError):
    """Exception raised when the login field template is not seen on screen"""

    def __init__(self, template: str, timeout: float):
        super().__init__("visual-confirmation", timeout)
        self.template = template


class FocusNotConfirmedError(AutomationError):
    """Exception raised under the strict focus policy when foreground is never confirmed"""

    def __init__(self, window_title: str, attempts: int):
        message = f"Could not bring '{window_title}' to the foreground after {attempts} attempts"
        super().__init__(message, "FOCUS_NOT_CONFIRMED", {"window_title": window_title, "attempts": attempts})
        self.window_title = window_title
        self.attempts = attempts

    def __str__(self):
        return self.message


class InvalidTransitionError(AutomationError):
    """Exception raised when a selection state transition is not allowed"""

    def __init__(self, from_stage: str, to_stage: str):
        message = f"Illegal selection transition: {from_stage} -> {to_stage}"
        super().__init__(message, "INVALID_TRANSITION", {"from": from_stage, "to": to_stage})
        self.from_stage = from_stage
        self.to_stage = to_stage
