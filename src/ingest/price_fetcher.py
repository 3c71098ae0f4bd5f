"""
시세 데이터 수집기 (Yahoo Finance)

chart API에서 3개월 일봉(종가/거래량), quoteSummary API에서 공매도 비율 수집
"""
import math
import random
import time
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
import requests

from src.core.config import get_config
from src.core.exceptions import APIError, IngestError, RateLimitError
from src.core.interfaces import FetchResult
from src.ingest.base import BaseDataFetcher
from src.scoring.decay_scorer import MarketObservation

MIN_CLOSES = 22          # 약 1개월 거래일
LOOKBACK_1M = 23         # 1개월 전 기준 위치 (뒤에서)
VOLUME_WINDOW = 20       # 평균 거래량 기간
MIN_VOLATILITY_POINTS = 20
TRADING_DAYS = 252
PLACEHOLDER_VOLATILITY = 50.0

# 응답 구조가 예상과 다를 때 파싱 중 발생하는 예외
MALFORMED_PAYLOAD_ERRORS = (ValueError, TypeError, AttributeError, KeyError, IndexError)


@dataclass(frozen=True)
class PriceHistory:
    """관측값 + 변동성 계산용 종가 시계열"""
    observation: MarketObservation
    closes: list[float] = field(default_factory=list)


def parse_chart_payload(payload: dict) -> PriceHistory:
    """
    chart API 응답 → PriceHistory

    Raises:
        IngestError: 결과가 없거나 종가가 MIN_CLOSES개 미만인 경우
    """
    results = (payload.get("chart") or {}).get("result") or []
    if not results:
        raise IngestError("chart 결과 없음")

    result = results[0]
    meta = result.get("meta") or {}
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    quote = quotes[0] or {}

    df = pd.DataFrame({
        "close": pd.Series(quote.get("close") or [], dtype="float64"),
        "volume": pd.Series(quote.get("volume") or [], dtype="float64"),
    })
    BaseDataFetcher.validate_dataframe(df, ["close", "volume"], "YahooChart")

    closes = df["close"].dropna()
    closes = closes[closes > 0]
    if len(closes) < MIN_CLOSES:
        raise IngestError(
            f"종가 데이터 부족: {len(closes)}개",
            {"required": MIN_CLOSES}
        )

    current = float(closes.iloc[-1])
    price_1m = float(closes.iloc[-LOOKBACK_1M]) if len(closes) >= LOOKBACK_1M else float(closes.iloc[0])
    price_3m = float(closes.iloc[0])
    high_52w = meta.get("fiftyTwoWeekHigh") or float(closes.max())

    volumes = df["volume"].fillna(0)
    current_volume = float(volumes.iloc[-1]) if len(volumes) else 0.0
    average_volume = float(volumes.tail(VOLUME_WINDOW).sum()) / VOLUME_WINDOW

    observation = MarketObservation(
        current_price=current,
        price_1m_ago=price_1m,
        price_3m_ago=price_3m,
        high_52w=float(high_52w),
        current_volume=current_volume,
        average_volume_20d=average_volume,
    )
    return PriceHistory(observation=observation, closes=[float(c) for c in closes])


def parse_short_interest_payload(payload: dict) -> float | None:
    """quoteSummary 응답 → 공매도 비율 (%), 없으면 None"""
    results = (payload.get("quoteSummary") or {}).get("result") or []
    if not results:
        return None

    stats = results[0].get("defaultKeyStatistics") or {}
    raw = (stats.get("shortPercentOfFloat") or {}).get("raw")
    if not raw:
        return None
    return float(raw) * 100


def calculate_volatility(closes: list[float]) -> float:
    """
    연환산 변동성 (%)

    일간 로그수익률의 표준편차(모분산) × √252 × 100.
    종가가 MIN_VOLATILITY_POINTS개 미만이면 0.
    """
    if len(closes) < MIN_VOLATILITY_POINTS:
        return 0.0

    prices = np.asarray(closes, dtype=float)
    prev, curr = prices[:-1], prices[1:]
    valid = (prev > 0) & (curr > 0) & np.isfinite(prev) & np.isfinite(curr)
    if not valid.any():
        return 0.0

    returns = np.log(curr[valid] / prev[valid])
    return float(np.std(returns) * math.sqrt(TRADING_DAYS) * 100)


def estimate_volatility(observation: MarketObservation | None) -> float:
    """이력이 없을 때 쓰는 대략치: |1개월 등락률| × 3, 관측값이 없으면 50"""
    if observation is None:
        return PLACEHOLDER_VOLATILITY
    return abs(observation.change_1m) * 3


class YahooFinanceFetcher(BaseDataFetcher):
    """
    Yahoo Finance 시세 수집기

    사용법:
        fetcher = YahooFinanceFetcher()

        history = fetcher.fetch_price_history("GME")
        if history.ok:
            observation = history.value.observation

        short_interest = fetcher.fetch_short_interest("GME").value_or_none()
    """

    CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
    SUMMARY_URL = "https://query2.finance.yahoo.com/v10/finance/quoteSummary"

    def __init__(
        self,
        timeout: int | None = None,
        retry_count: int | None = None,
        min_delay: float | None = None,
        max_delay: float | None = None,
        session: requests.Session | None = None,
    ):
        super().__init__()

        config = get_config()
        self.timeout = timeout if timeout is not None else config.get("ingest.yahoo.timeout_seconds", 10)
        self.retry_count = (
            retry_count if retry_count is not None
            else config.get("ingest.yahoo.retry_count", 1)
        )
        self.range = config.get("ingest.yahoo.range", "3mo")

        # API 호출 딜레이 설정
        self.min_delay = min_delay if min_delay is not None else config.get("ingest.yahoo.min_delay", 0.1)
        self.max_delay = max_delay if max_delay is not None else config.get("ingest.yahoo.max_delay", 0.2)

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": config.get("ingest.yahoo.user_agent", "Mozilla/5.0"),
        })

    def get_source_name(self) -> str:
        return "YahooFinance"

    def _api_delay(self) -> None:
        """API 호출 간 딜레이 (rate limit 방지)"""
        if self.max_delay > 0:
            time.sleep(random.uniform(self.min_delay, self.max_delay))

    def _request(self, url: str, params: dict | None = None, retry: int = 0) -> dict[str, Any]:
        """API 요청 공통 처리"""
        try:
            self._api_delay()
            response = self.session.get(url, params=params, timeout=self.timeout)

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                raise RateLimitError(
                    "Yahoo API 요청 한도 초과",
                    retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                )

            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            if retry < self.retry_count:
                self.logger.warning(f"Yahoo API 재시도 ({retry + 1}/{self.retry_count}): {e}")
                time.sleep(2 ** retry)  # 지수 백오프
                return self._request(url, params, retry + 1)
            raise APIError(f"Yahoo API 요청 실패: {e}", {"url": url})
        except ValueError as e:
            raise APIError("Yahoo API 응답 파싱 실패", {"url": url, "error": str(e)})

    def fetch_price_history(self, ticker: str) -> FetchResult[PriceHistory]:
        """
        3개월 일봉으로 시세 관측값 생성

        Returns:
            FetchResult[PriceHistory] (실패 시 사유 포함)
        """
        self._log_fetch_start(ticker)

        try:
            payload = self._request(
                f"{self.CHART_URL}/{ticker}",
                params={"interval": "1d", "range": self.range},
            )
            history = parse_chart_payload(payload)
        except MALFORMED_PAYLOAD_ERRORS as e:
            error = IngestError("chart 응답 형식 오류", {"ticker": ticker, "error": str(e)})
            self._log_fetch_error(ticker, error)
            return FetchResult.failure(str(error))
        except IngestError as e:
            self._log_fetch_error(ticker, e)
            return FetchResult.failure(str(e))

        self._log_fetch_complete(ticker, count=len(history.closes))
        return FetchResult.success(history)

    def fetch_short_interest(self, ticker: str) -> FetchResult[float]:
        """
        공매도 비율 (유통주식 대비 %)

        Returns:
            FetchResult[float] (데이터 없으면 실패)
        """
        try:
            payload = self._request(
                f"{self.SUMMARY_URL}/{ticker}",
                params={"modules": "defaultKeyStatistics"},
            )
            short_pct = parse_short_interest_payload(payload)
        except MALFORMED_PAYLOAD_ERRORS as e:
            error = IngestError("quoteSummary 응답 형식 오류", {"ticker": ticker, "error": str(e)})
            self._log_fetch_error(ticker, error)
            return FetchResult.failure(str(error))
        except IngestError as e:
            self._log_fetch_error(ticker, e)
            return FetchResult.failure(str(e))

        if short_pct is None:
            return FetchResult.failure("공매도 데이터 없음")
        return FetchResult.success(short_pct)
