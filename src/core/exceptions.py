"""
커스텀 예외 클래스 정의

스코어링 코어는 예외를 던지지 않는다. 아래 예외는 설정/수집/알림 계층에서만 사용
"""
from typing import Any


class BaseError(Exception):
    """모든 커스텀 예외의 기본 클래스"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ============================================
# Configuration Errors
# ============================================
class ConfigError(BaseError):
    """설정 관련 오류"""
    pass


class ConfigNotFoundError(ConfigError):
    """설정 파일을 찾을 수 없음"""
    pass


class ConfigValidationError(ConfigError):
    """설정 값 유효성 검증 실패"""
    pass


# ============================================
# Data Ingest Errors
# ============================================
class IngestError(BaseError):
    """시세 데이터 수집 관련 오류"""
    pass


class APIError(IngestError):
    """외부 API 호출 실패"""
    pass


class RateLimitError(APIError):
    """API Rate Limit 초과"""

    def __init__(self, message: str, retry_after: int | None = None):
        super().__init__(message, {"retry_after": retry_after})
        self.retry_after = retry_after


# ============================================
# Notification Errors
# ============================================
class NotificationError(BaseError):
    """알림 전송 실패 (채널 내부에서만 발생, 외부로는 bool 반환)"""
    pass
