"""
핵심 인터페이스 정의

모든 레이어에서 사용하는 표준 인터페이스
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


# ============================================
# Enums
# ============================================
class DecayTier(Enum):
    """부실 징후 등급 (총점 기준)"""
    NORMAL = "NORMAL"        # 0-24
    ATTENTION = "ATTENTION"  # 25-49
    WARNING = "WARNING"      # 50-74
    CRITICAL = "CRITICAL"    # 75-100

    @property
    def glyph(self) -> str:
        """표시용 마커 (로직에는 사용하지 않음)"""
        return _TIER_GLYPHS[self]

    @property
    def severity(self) -> int:
        """NORMAL < ATTENTION < WARNING < CRITICAL"""
        return _TIER_ORDER.index(self)


_TIER_ORDER = [
    DecayTier.NORMAL,
    DecayTier.ATTENTION,
    DecayTier.WARNING,
    DecayTier.CRITICAL,
]

_TIER_GLYPHS = {
    DecayTier.NORMAL: "🟢",
    DecayTier.ATTENTION: "🟡",
    DecayTier.WARNING: "🟠",
    DecayTier.CRITICAL: "🔴",
}


# ============================================
# Data Classes
# ============================================
@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    수집 결과 (성공 | 실패(사유))

    수집기는 예외 대신 이 값을 반환하고, 코어에는 value_or_none()만 전달한다.
    """
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> "FetchResult[T]":
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    def value_or_none(self) -> T | None:
        return self.value if self.ok else None


# ============================================
# Abstract Interfaces
# ============================================
class DataFetcher(ABC):
    """데이터 수집기 인터페이스"""

    @abstractmethod
    def get_source_name(self) -> str:
        """데이터 소스 이름"""
        pass


class MarketDataProvider(DataFetcher):
    """시세 데이터 제공자 인터페이스"""

    @abstractmethod
    def fetch_price_history(self, ticker: str) -> FetchResult[Any]:
        """가격/거래량 이력 수집 (PriceHistory)"""
        pass

    @abstractmethod
    def fetch_short_interest(self, ticker: str) -> FetchResult[float]:
        """공매도 비율 (유통주식 대비 %, 0-100)"""
        pass


class NotificationChannel(ABC):
    """알림 채널 인터페이스"""

    @abstractmethod
    def send(self, subject: str, body: str, recipient: str) -> bool:
        """메시지 전송, 성공 여부 반환 (예외를 던지지 않음)"""
        pass

    @abstractmethod
    def get_channel_name(self) -> str:
        """채널 이름"""
        pass
