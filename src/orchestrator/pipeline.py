"""
Pipeline: 감시 종목 일괄 평가

종목별 수집 → 스코어링 → 개별 알림, 배치 종료 후 일일 요약 전송
"""
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

from src.core.config import Config, get_config
from src.core.interfaces import DecayTier, MarketDataProvider
from src.core.logger import get_logger, setup_logger_from_config
from src.ingest.price_fetcher import (
    MIN_VOLATILITY_POINTS,
    YahooFinanceFetcher,
    calculate_volatility,
    estimate_volatility,
)
from src.output.alert_coordinator import AlertCoordinator, should_alert
from src.output.notifier import EmailServiceChannel, LogChannel
from src.scoring.decay_scorer import DecayScorer, MarketObservation, ScoringResult

VOLATILITY_METHODS = ("historical", "placeholder")


@dataclass
class TickerAnalysis:
    """종목 1개 평가 결과"""
    ticker: str
    result: ScoringResult
    observation: MarketObservation | None = None
    short_interest: float | None = None
    volatility: float | None = None
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    errors: list[str] = field(default_factory=list)

    @property
    def score(self) -> int:
        return self.result.total_score

    @property
    def tier(self) -> DecayTier:
        return self.result.tier

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "timestamp": self.analyzed_at.isoformat(),
            "price": self.observation.to_dict() if self.observation else None,
            "short_interest": self.short_interest,
            "volatility": self.volatility,
            **self.result.to_dict(),
        }


@dataclass
class PipelineResult:
    """파이프라인 실행 결과"""
    started_at: datetime
    completed_at: datetime | None = None
    analyses: list[TickerAnalysis] = field(default_factory=list)
    alerts_sent: list[str] = field(default_factory=list)
    alerts_failed: list[str] = field(default_factory=list)
    failed_tickers: list[str] = field(default_factory=list)
    digest_sent: bool = False

    @property
    def duration_seconds(self) -> float:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0.0

    def tickers_in(self, tier: DecayTier) -> list[str]:
        return [a.ticker for a in self.analyses if a.tier == tier]

    def batch(self) -> list[tuple[str, ScoringResult]]:
        return [(a.ticker, a.result) for a in self.analyses]

    def to_summary(self) -> dict:
        """요약 정보 반환"""
        return {
            "success": True,
            "timestamp": (self.completed_at or self.started_at).isoformat(),
            "analyzed": len(self.analyses),
            "alerts_sent": len(self.alerts_sent),
            "critical": self.tickers_in(DecayTier.CRITICAL),
            "warning": self.tickers_in(DecayTier.WARNING),
            "failed": self.failed_tickers,
            "digest_sent": self.digest_sent,
            "duration": f"{self.duration_seconds:.1f}s",
        }


class DecayPipeline:
    """
    감시 종목 일괄 평가 파이프라인

    사용법:
        pipeline = build_pipeline()

        # 단일 종목
        analysis = pipeline.analyze_ticker("GME")

        # 전체 (알림 + 일일 요약)
        result = pipeline.run()
    """

    def __init__(
        self,
        watchlist: Sequence[str],
        fetcher: MarketDataProvider,
        coordinator: AlertCoordinator | None = None,
        scorer: DecayScorer | None = None,
        ticker_delay: float = 0.0,
        volatility_method: str = "historical",
    ):
        if volatility_method not in VOLATILITY_METHODS:
            raise ValueError(f"지원하지 않는 변동성 방식: {volatility_method}")

        self.logger = get_logger(self.__class__.__name__)
        self.watchlist = [t.upper() for t in watchlist]
        self.fetcher = fetcher
        self.coordinator = coordinator
        self.scorer = scorer or DecayScorer()
        self.ticker_delay = ticker_delay
        self.volatility_method = volatility_method

    def _resolve_volatility(
        self,
        observation: MarketObservation | None,
        closes: list[float],
    ) -> float:
        """이력이 충분하면 실제 변동성, 아니면 대략치"""
        if self.volatility_method == "historical" and len(closes) >= MIN_VOLATILITY_POINTS:
            return calculate_volatility(closes)
        return estimate_volatility(observation)

    def analyze_ticker(self, ticker: str) -> TickerAnalysis:
        """
        단일 종목 평가

        가격 이력과 공매도 비율은 각각 독립적으로 실패할 수 있다.
        """
        ticker = ticker.upper()
        errors = []

        history_result = self.fetcher.fetch_price_history(ticker)
        history = history_result.value_or_none()
        if history is None:
            errors.append(f"price: {history_result.error}")

        short_result = self.fetcher.fetch_short_interest(ticker)
        short_interest = short_result.value_or_none()
        if short_interest is None:
            errors.append(f"short_interest: {short_result.error}")

        observation = history.observation if history else None
        closes = history.closes if history else []
        volatility = self._resolve_volatility(observation, closes)

        result = self.scorer.score(observation, short_interest, volatility)
        self.logger.info(
            f"{result.tier.glyph} [{ticker}] {result.total_score}/100 {result.tier.value}"
        )

        return TickerAnalysis(
            ticker=ticker,
            result=result,
            observation=observation,
            short_interest=short_interest,
            volatility=round(volatility, 2),
            errors=errors,
        )

    def analyze_watchlist(
        self,
        failed: list[str] | None = None,
    ) -> list[TickerAnalysis]:
        """
        감시 종목 전체 평가 (입력 순서 유지)

        종목 하나의 예외는 기록 후 건너뛰고 배치를 계속한다.
        """
        analyses = []

        for i, ticker in enumerate(self.watchlist):
            if i > 0 and self.ticker_delay > 0:
                time.sleep(self.ticker_delay)

            try:
                analyses.append(self.analyze_ticker(ticker))
            except Exception as e:
                self.logger.exception(f"[{ticker}] 평가 실패: {e}")
                if failed is not None:
                    failed.append(ticker)

        return analyses

    def run(self, send_alerts: bool = True) -> PipelineResult:
        """
        일괄 평가 + 알림

        Args:
            send_alerts: False면 평가만 수행

        Returns:
            PipelineResult
        """
        result = PipelineResult(started_at=datetime.now(timezone.utc))

        self.logger.info("=" * 50)
        self.logger.info(f"Corporate Decay 평가 시작: {len(self.watchlist)}종목")
        self.logger.info("=" * 50)

        result.analyses = self.analyze_watchlist(failed=result.failed_tickers)

        if send_alerts and self.coordinator is not None:
            for analysis in result.analyses:
                if not should_alert(analysis.result):
                    continue
                sent = self.coordinator.send_alert(
                    analysis.ticker, analysis.result, analysis.observation
                )
                (result.alerts_sent if sent else result.alerts_failed).append(analysis.ticker)

            result.digest_sent = self.coordinator.send_daily_digest(result.batch())

        result.completed_at = datetime.now(timezone.utc)
        self.logger.info(
            f"평가 완료: {len(result.analyses)}종목, 알림 {len(result.alerts_sent)}건 "
            f"(실패 {len(result.alerts_failed)}건), 소요 {result.duration_seconds:.1f}초"
        )
        return result


def build_coordinator(config: Config, dry_run: bool | None = None) -> AlertCoordinator:
    """설정 기반 알림 코디네이터"""
    if dry_run is None:
        dry_run = bool(config.get("notification.dry_run", False))

    channel = LogChannel() if dry_run else EmailServiceChannel()
    return AlertCoordinator(
        channel=channel,
        recipient=config.get_required("notification.recipient"),
        dashboard_url=config.get("notification.dashboard_url"),
    )


def build_pipeline(
    config: Config | None = None,
    watchlist: Sequence[str] | None = None,
    dry_run: bool | None = None,
) -> DecayPipeline:
    """설정 기반 파이프라인 생성 (감시 종목은 여기서 주입)"""
    config = config or get_config()

    return DecayPipeline(
        watchlist=watchlist if watchlist is not None else config.get_watchlist(),
        fetcher=YahooFinanceFetcher(),
        coordinator=build_coordinator(config, dry_run),
        ticker_delay=float(config.get("pipeline.ticker_delay_seconds", 0.3)),
        volatility_method=config.get("pipeline.volatility_method", "historical"),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """
    CLI 진입점:
        python -m src.orchestrator.pipeline [--ticker GME] [--no-alerts] [--dry-run]
    """
    import argparse

    parser = argparse.ArgumentParser(description="Corporate Decay 감시 실행")
    parser.add_argument("--ticker", type=str, default=None, help="단일 종목만 평가")
    parser.add_argument("--no-alerts", action="store_true", help="알림/요약 전송 생략")
    parser.add_argument("--dry-run", action="store_true", help="메일 대신 로그로 출력")
    args = parser.parse_args(argv)

    setup_logger_from_config()
    pipeline = build_pipeline(dry_run=True if args.dry_run else None)

    if args.ticker:
        analysis = pipeline.analyze_ticker(args.ticker)
        print(f"{analysis.tier.glyph} {analysis.ticker}: {analysis.score}/100 ({analysis.tier.value})")
        for label, points in analysis.result.signals.active():
            print(f"  • {label}: {points} pts")
        if analysis.errors:
            print(f"  오류: {'; '.join(analysis.errors)}")
        return 0

    result = pipeline.run(send_alerts=not args.no_alerts)
    for analysis in sorted(result.analyses, key=lambda a: a.score, reverse=True):
        print(f"{analysis.tier.glyph} {analysis.ticker:<6} {analysis.score:>3}/100 {analysis.tier.value}")
    print(f"\n분석 {len(result.analyses)}종목, 알림 {len(result.alerts_sent)}건")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
