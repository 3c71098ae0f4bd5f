"""
공통 fixture
"""
import os

import pytest

os.environ.setdefault("APP_ENV", "test")

from src.core.interfaces import FetchResult, MarketDataProvider, NotificationChannel  # noqa: E402
from src.ingest.price_fetcher import PriceHistory  # noqa: E402
from src.scoring.decay_scorer import MarketObservation  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """테스트마다 Config/Logger 리셋 (test 환경)"""
    from src.core.config import Config
    from src.core.logger import LoggerService

    monkeypatch.setenv("APP_ENV", "test")
    Config.reset()
    LoggerService.reset()
    LoggerService.configure(level="DEBUG", file_enabled=False)
    yield
    Config.reset()
    LoggerService.reset()


@pytest.fixture
def distressed_observation():
    """1M -50%, 3M -58.3%, 52W -66.7%, 거래량 5배"""
    return MarketObservation(
        current_price=50.0,
        price_1m_ago=100.0,
        price_3m_ago=120.0,
        high_52w=150.0,
        current_volume=500.0,
        average_volume_20d=100.0,
    )


@pytest.fixture
def healthy_observation():
    """상승 중인 정상 종목"""
    return MarketObservation(
        current_price=110.0,
        price_1m_ago=100.0,
        price_3m_ago=95.0,
        high_52w=115.0,
        current_volume=1000.0,
        average_volume_20d=900.0,
    )


class FakeProvider(MarketDataProvider):
    """네트워크 없이 고정 데이터를 돌려주는 수집기"""

    def __init__(self, histories=None, short_interest=None, raise_for=None):
        self.histories = histories or {}
        self.short_interest = short_interest or {}
        self.raise_for = set(raise_for or [])
        self.calls: list[str] = []

    def get_source_name(self) -> str:
        return "Fake"

    def fetch_price_history(self, ticker):
        self.calls.append(ticker)
        if ticker in self.raise_for:
            raise RuntimeError(f"boom {ticker}")
        history = self.histories.get(ticker)
        if history is None:
            return FetchResult.failure("no data")
        return FetchResult.success(history)

    def fetch_short_interest(self, ticker):
        value = self.short_interest.get(ticker)
        if value is None:
            return FetchResult.failure("no short data")
        return FetchResult.success(value)


class RecordingChannel(NotificationChannel):
    """전송 내역을 기록하는 채널"""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.messages: list[tuple[str, str, str]] = []

    def get_channel_name(self) -> str:
        return "Recording"

    def send(self, subject, body, recipient):
        self.messages.append((subject, body, recipient))
        return self.succeed


@pytest.fixture
def make_history():
    """관측값 → PriceHistory (종가 시계열 선택)"""
    def _make(observation, closes=None):
        return PriceHistory(observation=observation, closes=list(closes or []))
    return _make


@pytest.fixture
def recording_channel():
    return RecordingChannel()


@pytest.fixture
def fake_provider():
    """FakeProvider 클래스"""
    return FakeProvider


@pytest.fixture
def channel_factory():
    """RecordingChannel 클래스"""
    return RecordingChannel
