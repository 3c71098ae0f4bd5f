"""
Scoring

시그널 6종 합산으로 부실 점수(0-100) 산출 및 등급 분류
- D1/D2: 1개월/3개월 등락률
- D3: 52주 고점 대비
- D4: 공매도 비율
- D5: 하락 중 거래량 이상
- D6: 변동성
"""
from src.scoring.signals import (
    SIGNAL_LABELS,
    SIGNAL_MAX_POINTS,
    classify_tier,
    score_from_high,
    score_price_1m,
    score_price_3m,
    score_short_interest,
    score_volatility,
    score_volume,
)
from src.scoring.decay_scorer import (
    DecayScorer,
    MarketObservation,
    ScoringResult,
    SignalScores,
    calculate_score,
)

__all__ = [
    "SIGNAL_LABELS",
    "SIGNAL_MAX_POINTS",
    "classify_tier",
    "score_from_high",
    "score_price_1m",
    "score_price_3m",
    "score_short_interest",
    "score_volatility",
    "score_volume",
    "DecayScorer",
    "MarketObservation",
    "ScoringResult",
    "SignalScores",
    "calculate_score",
]
