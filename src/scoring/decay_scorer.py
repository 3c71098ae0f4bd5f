"""
부실 점수 스코어러

시세 관측값 → 시그널 6종 → 총점(0-100) → 등급

가격 관측값, 공매도 비율, 변동성은 서로 다른 수집 경로에서 오므로
각각 독립적으로 없을 수 있다. 없는 입력은 0점으로 처리되며 스코어러는 실패하지 않는다.
"""
from dataclasses import dataclass, field, fields

from src.core.interfaces import DecayTier
from src.core.logger import get_logger
from src.scoring.signals import (
    SIGNAL_LABELS,
    classify_tier,
    score_from_high,
    score_price_1m,
    score_price_3m,
    score_short_interest,
    score_volatility,
    score_volume,
)


def _pct_change(current: float, reference: float) -> float:
    """기준가 대비 변화율 (%), 기준가가 0 이하면 0"""
    if reference <= 0:
        return 0.0
    return (current - reference) / reference * 100


@dataclass(frozen=True)
class MarketObservation:
    """종목 시세 관측값"""
    current_price: float
    price_1m_ago: float
    price_3m_ago: float
    high_52w: float
    current_volume: float = 0.0
    average_volume_20d: float = 0.0

    @property
    def change_1m(self) -> float:
        """1개월 등락률 (%)"""
        return _pct_change(self.current_price, self.price_1m_ago)

    @property
    def change_3m(self) -> float:
        """3개월 등락률 (%)"""
        return _pct_change(self.current_price, self.price_3m_ago)

    @property
    def pct_from_high(self) -> float:
        """52주 고점 대비 (%)"""
        return _pct_change(self.current_price, self.high_52w)

    @property
    def volume_ratio(self) -> float:
        """당일 거래량 / 20일 평균 (평균이 0이면 1.0)"""
        if not self.average_volume_20d or self.average_volume_20d <= 0:
            return 1.0
        return self.current_volume / self.average_volume_20d

    def to_dict(self) -> dict:
        return {
            "current": self.current_price,
            "change_1m": round(self.change_1m, 2),
            "change_3m": round(self.change_3m, 2),
            "pct_from_high": round(self.pct_from_high, 2),
            "volume_ratio": round(self.volume_ratio, 2),
        }


@dataclass(frozen=True)
class SignalScores:
    """시그널별 점수 (고정 6개 필드)"""
    price_1m: int = 0        # D1
    price_3m: int = 0        # D2
    from_high: int = 0       # D3
    short_interest: int = 0  # D4
    volume: int = 0          # D5
    volatility: int = 0      # D6

    @property
    def total(self) -> int:
        return (
            self.price_1m
            + self.price_3m
            + self.from_high
            + self.short_interest
            + self.volume
            + self.volatility
        )

    def items(self) -> list[tuple[str, int]]:
        """(필드명, 점수) 목록, D1 → D6 순서"""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def active(self) -> list[tuple[str, int]]:
        """0점이 아닌 시그널만 (표시용 라벨, 점수)"""
        return [(SIGNAL_LABELS[name], points) for name, points in self.items() if points > 0]

    def to_dict(self) -> dict[str, int]:
        return dict(self.items())


@dataclass(frozen=True)
class ScoringResult:
    """
    스코어링 결과

    total_score와 tier는 signals에서 파생되므로 항상 일치한다.
    """
    signals: SignalScores = field(default_factory=SignalScores)

    @property
    def total_score(self) -> int:
        return self.signals.total

    @property
    def tier(self) -> DecayTier:
        return classify_tier(self.total_score)

    def to_dict(self) -> dict:
        return {
            "signals": self.signals.to_dict(),
            "score": self.total_score,
            "level": self.tier.value,
            "emoji": self.tier.glyph,
        }


def calculate_score(
    observation: MarketObservation | None,
    short_interest: float | None = None,
    volatility: float | None = None,
) -> ScoringResult:
    """
    종목 부실 점수 계산

    Args:
        observation: 시세 관측값 (수집 실패 시 None → D1/D2/D3/D5 = 0)
        short_interest: 공매도 비율 % (없으면 D4 = 0)
        volatility: 연환산 변동성 % (없으면 D6 = 0)

    Returns:
        ScoringResult
    """
    price_1m = price_3m = from_high = volume = 0

    if observation is not None:
        change_1m = observation.change_1m
        price_1m = score_price_1m(change_1m)
        price_3m = score_price_3m(observation.change_3m)
        from_high = score_from_high(observation.pct_from_high)
        volume = score_volume(observation.volume_ratio, change_1m)

    signals = SignalScores(
        price_1m=price_1m,
        price_3m=price_3m,
        from_high=from_high,
        short_interest=score_short_interest(short_interest),
        volume=volume,
        volatility=score_volatility(volatility),
    )
    return ScoringResult(signals=signals)


class DecayScorer:
    """
    부실 점수 스코어러

    상태를 갖지 않으므로 여러 종목에 동시에 사용해도 안전하다.

    사용법:
        scorer = DecayScorer()

        result = scorer.score(observation, short_interest=25.0, volatility=120.0)
        result.total_score  # 83
        result.tier         # DecayTier.CRITICAL

        results = scorer.score_batch({"GME": (observation, 25.0, 120.0)})
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def score(
        self,
        observation: MarketObservation | None,
        short_interest: float | None = None,
        volatility: float | None = None,
    ) -> ScoringResult:
        """단일 종목 점수 계산"""
        result = calculate_score(observation, short_interest, volatility)
        self.logger.debug(
            f"점수 계산: {result.total_score}/100 ({result.tier.value}) "
            f"signals={result.signals.to_dict()}"
        )
        return result

    def score_batch(
        self,
        inputs: dict[str, tuple[MarketObservation | None, float | None, float | None]],
    ) -> list[tuple[str, ScoringResult]]:
        """
        일괄 점수 계산

        Args:
            inputs: {ticker: (observation, short_interest, volatility)}

        Returns:
            [(ticker, ScoringResult)] 입력 순서 유지
        """
        return [
            (ticker, self.score(observation, short_interest, volatility))
            for ticker, (observation, short_interest, volatility) in inputs.items()
        ]

    @staticmethod
    def rank(batch: list[tuple[str, ScoringResult]]) -> list[tuple[str, ScoringResult]]:
        """점수 내림차순 정렬"""
        return sorted(batch, key=lambda item: item[1].total_score, reverse=True)
