"""
Timing and polling configuration for the client automations

All delays are in seconds. The defaults reproduce the behaviour of the
desktop application; tests inject ``LoginTimings.instant()`` and a zeroed
``PollingConfig`` so that nothing actually waits.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PollingConfig:
    """Intervals shared by the polling automatons"""
    ready_check_interval: float = 4.0
    selection_interval: float = 1.0
    account_check_interval: float = 10.0
    credential_ttl: float = 5.0
    error_log_interval: float = 5.0
    # pause between a pick write and the verification re-read
    pick_settle_delay: float = 0.5
    request_timeout: float = 10.0


@dataclass(frozen=True)
class LoginTimings:
    """Delays and timeouts of the login pipeline"""
    launch_settle: float = 2.0
    window_poll_timeout: float = 90.0
    window_poll_interval: float = 1.0
    focus_attempts: int = 4
    post_focus_settle: float = 2.0
    visual_timeout: float = 6.0
    visual_poll_interval: float = 0.5
    key_delay: float = 0.06
    after_clear: float = 0.15
    after_type: float = 0.2
    after_tab: float = 0.12
    after_submit: float = 0.5

    @classmethod
    def instant(cls) -> "LoginTimings":
        """Zero-duration timings, keeping the retry counts and timeouts meaningful"""
        return cls(
            launch_settle=0.0,
            window_poll_timeout=0.05,
            window_poll_interval=0.0,
            post_focus_settle=0.0,
            visual_timeout=0.05,
            visual_poll_interval=0.0,
            key_delay=0.0,
            after_clear=0.0,
            after_type=0.0,
            after_tab=0.0,
            after_submit=0.0,
        )


@dataclass(frozen=True)
class AutomationConfig:
    """Aggregate configuration handed to the automation service"""
    polling: PollingConfig = field(default_factory=PollingConfig)
    login: LoginTimings = field(default_factory=LoginTimings)
    strict_focus: bool = False
    visual_check: bool = True
