"""
시그널 계단 함수 테스트
"""
import pytest

from src.core.interfaces import DecayTier
from src.scoring.signals import (
    classify_tier,
    score_from_high,
    score_price_1m,
    score_price_3m,
    score_short_interest,
    score_volatility,
    score_volume,
)


def _sweep(start: float, stop: float, step: float) -> list[float]:
    values = []
    value = start
    while value <= stop:
        values.append(round(value, 4))
        value += step
    return values


class TestPrice1M:
    """D1: 1개월 등락률"""

    @pytest.mark.parametrize("change, expected", [
        (-40.0, 15),
        (-39.99, 12),
        (-25.0, 12),
        (-24.99, 8),
        (-15.0, 8),
        (-10.0, 4),
        (-9.99, 0),
        (0.0, 0),
        (35.0, 0),
    ])
    def test_boundaries(self, change, expected):
        """경계값은 상위 구간"""
        assert score_price_1m(change) == expected

    def test_non_increasing(self):
        """상승할수록 점수는 줄거나 같음"""
        scores = [score_price_1m(c) for c in _sweep(-100, 50, 0.5)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))


class TestPrice3M:
    """D2: 3개월 등락률"""

    @pytest.mark.parametrize("change, expected", [
        (-60.0, 20),
        (-59.99, 16),
        (-40.0, 16),
        (-25.0, 10),
        (-15.0, 5),
        (-14.99, 0),
    ])
    def test_boundaries(self, change, expected):
        assert score_price_3m(change) == expected

    def test_non_increasing(self):
        scores = [score_price_3m(c) for c in _sweep(-100, 50, 0.5)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))


class TestFromHigh:
    """D3: 52주 고점 대비"""

    @pytest.mark.parametrize("pct, expected", [
        (-80.0, 20),
        (-79.99, 15),
        (-60.0, 15),
        (-40.0, 10),
        (-25.0, 5),
        (-24.99, 0),
        (0.0, 0),
    ])
    def test_boundaries(self, pct, expected):
        assert score_from_high(pct) == expected

    def test_non_increasing(self):
        scores = [score_from_high(p) for p in _sweep(-100, 0, 0.5)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))


class TestShortInterest:
    """D4: 공매도 비율"""

    @pytest.mark.parametrize("pct, expected", [
        (30.0, 15),
        (29.99, 12),
        (20.0, 12),
        (15.0, 8),
        (10.0, 4),
        (9.99, 0),
        (0.0, 0),
    ])
    def test_boundaries(self, pct, expected):
        assert score_short_interest(pct) == expected

    def test_absent_is_zero(self):
        """데이터 없으면 0점 (오류 아님)"""
        assert score_short_interest(None) == 0

    def test_non_increasing_toward_healthy(self):
        """공매도가 줄수록 점수는 줄거나 같음"""
        scores = [score_short_interest(p) for p in _sweep(0, 100, 0.5)]
        assert all(a <= b for a, b in zip(scores, scores[1:]))


class TestVolume:
    """D5: 거래량 이상"""

    def test_gated_on_rising_price(self):
        """가격 상승 시 거래량 무관 0점"""
        assert score_volume(10.0, 5.0) == 0

    def test_gated_on_flat_price(self):
        """등락 0%도 0점"""
        assert score_volume(10.0, 0.0) == 0

    @pytest.mark.parametrize("ratio, expected", [
        (5.0, 15),
        (4.99, 10),
        (3.0, 10),
        (2.0, 5),
        (1.99, 0),
        (1.0, 0),
    ])
    def test_boundaries_when_falling(self, ratio, expected):
        assert score_volume(ratio, -0.01) == expected

    def test_gate_holds_for_any_ratio(self):
        """상승 구간이면 어떤 배수도 0점"""
        for ratio in _sweep(0, 50, 0.5):
            assert score_volume(ratio, 0.5) == 0


class TestVolatility:
    """D6: 변동성"""

    @pytest.mark.parametrize("vol, expected", [
        (150.0, 15),
        (149.99, 10),
        (100.0, 10),
        (80.0, 6),
        (60.0, 3),
        (59.99, 0),
    ])
    def test_boundaries(self, vol, expected):
        assert score_volatility(vol) == expected

    def test_absent_is_zero(self):
        assert score_volatility(None) == 0

    def test_non_increasing_toward_healthy(self):
        scores = [score_volatility(v) for v in _sweep(0, 300, 1)]
        assert all(a <= b for a, b in zip(scores, scores[1:]))


class TestClassifyTier:
    """등급 분류"""

    @pytest.mark.parametrize("total, expected", [
        (100, DecayTier.CRITICAL),
        (75, DecayTier.CRITICAL),
        (74, DecayTier.WARNING),
        (50, DecayTier.WARNING),
        (49, DecayTier.ATTENTION),
        (25, DecayTier.ATTENTION),
        (24, DecayTier.NORMAL),
        (0, DecayTier.NORMAL),
    ])
    def test_boundaries(self, total, expected):
        assert classify_tier(total) == expected

    def test_glyphs_distinct(self):
        """등급별 마커는 모두 다름"""
        glyphs = {tier.glyph for tier in DecayTier}
        assert len(glyphs) == len(DecayTier)

    def test_severity_order(self):
        """NORMAL < ATTENTION < WARNING < CRITICAL"""
        assert (
            DecayTier.NORMAL.severity
            < DecayTier.ATTENTION.severity
            < DecayTier.WARNING.severity
            < DecayTier.CRITICAL.severity
        )
