"""
Output: 알림 및 일일 요약
"""
from src.output.alert_coordinator import (
    AlertCoordinator,
    AlertMessage,
    RECOMMENDATIONS,
    format_alert_message,
    format_daily_digest,
    get_recommendation,
    should_alert,
)
from src.output.notifier import EmailServiceChannel, LogChannel

__all__ = [
    "AlertCoordinator",
    "AlertMessage",
    "RECOMMENDATIONS",
    "format_alert_message",
    "format_daily_digest",
    "get_recommendation",
    "should_alert",
    "EmailServiceChannel",
    "LogChannel",
]
