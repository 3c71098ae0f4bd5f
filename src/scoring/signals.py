"""
부실 징후 시그널 (D1 ~ D6)

각 시그널은 지표 하나를 구간별 점수로 변환하는 계단 함수.
가중치는 구간 점수 자체에 반영되어 있으므로 별도 승수를 곱하지 않는다.

| 시그널 | 지표                     | 최대 |
|--------|--------------------------|------|
| D1     | 1개월 등락률 (%)          | 15   |
| D2     | 3개월 등락률 (%)          | 20   |
| D3     | 52주 고점 대비 (%)        | 20   |
| D4     | 공매도 비율 (유통주식 %)   | 15   |
| D5     | 거래량 배수 (하락 시에만)  | 15   |
| D6     | 연환산 변동성 (%)         | 15   |

경계값은 모두 상위 점수 구간에 포함된다 (<=, >=).
"""
from src.core.interfaces import DecayTier

SIGNAL_MAX_POINTS = {
    "price_1m": 15,
    "price_3m": 20,
    "from_high": 20,
    "short_interest": 15,
    "volume": 15,
    "volatility": 15,
}

SIGNAL_LABELS = {
    "price_1m": "D1 1M price change",
    "price_3m": "D2 3M price change",
    "from_high": "D3 Distance from 52W high",
    "short_interest": "D4 Short interest",
    "volume": "D5 Volume anomaly",
    "volatility": "D6 Volatility",
}

# 등급 하한 (높은 등급부터)
TIER_THRESHOLDS = [
    (75, DecayTier.CRITICAL),
    (50, DecayTier.WARNING),
    (25, DecayTier.ATTENTION),
]


def score_price_1m(change: float) -> int:
    """D1: 1개월 등락률"""
    if change <= -40:
        return 15
    if change <= -25:
        return 12
    if change <= -15:
        return 8
    if change <= -10:
        return 4
    return 0


def score_price_3m(change: float) -> int:
    """D2: 3개월 등락률"""
    if change <= -60:
        return 20
    if change <= -40:
        return 16
    if change <= -25:
        return 10
    if change <= -15:
        return 5
    return 0


def score_from_high(pct: float) -> int:
    """D3: 52주 고점 대비 하락폭"""
    if pct <= -80:
        return 20
    if pct <= -60:
        return 15
    if pct <= -40:
        return 10
    if pct <= -25:
        return 5
    return 0


def score_short_interest(pct: float | None) -> int:
    """D4: 공매도 비율 (없으면 0점)"""
    if pct is None:
        return 0
    if pct >= 30:
        return 15
    if pct >= 20:
        return 12
    if pct >= 15:
        return 8
    if pct >= 10:
        return 4
    return 0


def score_volume(ratio: float, price_change: float) -> int:
    """
    D5: 거래량 이상

    가격이 내려갈 때의 거래량 급증만 점수화한다.
    price_change는 D1에 사용한 1개월 등락률과 같은 값이어야 한다.
    """
    if price_change >= 0:
        return 0

    if ratio >= 5:
        return 15
    if ratio >= 3:
        return 10
    if ratio >= 2:
        return 5
    return 0


def score_volatility(vol: float | None) -> int:
    """D6: 연환산 변동성 (없으면 0점)"""
    if vol is None:
        return 0
    if vol >= 150:
        return 15
    if vol >= 100:
        return 10
    if vol >= 80:
        return 6
    if vol >= 60:
        return 3
    return 0


def classify_tier(total_score: int) -> DecayTier:
    """총점 → 등급"""
    for lower_bound, tier in TIER_THRESHOLDS:
        if total_score >= lower_bound:
            return tier
    return DecayTier.NORMAL
