"""
알림 코디네이터

스코어링 결과로 개별 알림 여부를 결정하고, 알림 메시지와 일일 요약을 만든다.
실제 전송은 NotificationChannel에 위임하며 재시도하지 않는다.
"""
from dataclasses import dataclass
from datetime import datetime, timezone

from src.core.interfaces import DecayTier, NotificationChannel
from src.core.logger import get_logger
from src.scoring.decay_scorer import MarketObservation, ScoringResult

ALERT_TIERS = (DecayTier.WARNING, DecayTier.CRITICAL)

RECOMMENDATIONS = {
    DecayTier.CRITICAL: "🚨 EXIT positions immediately. Consider protective puts.",
    DecayTier.WARNING: "⚠️ Review positions and prepare an exit plan. Monitor closely.",
    DecayTier.ATTENTION: "👀 Keep on watch. Re-check the investment thesis.",
    DecayTier.NORMAL: "No action required.",
}

EMPTY_MARKER = "None"
DIGEST_GLYPH = "📊"
MONITOR_NAME = "Corporate Decay Monitor"


@dataclass(frozen=True)
class AlertMessage:
    """전송할 메시지"""
    subject: str
    body: str


def should_alert(result: ScoringResult) -> bool:
    """WARNING, CRITICAL만 개별 알림"""
    return result.tier in ALERT_TIERS


def get_recommendation(tier: DecayTier) -> str:
    """등급별 권장 조치"""
    return RECOMMENDATIONS[tier]


def _format_price_context(observation: MarketObservation) -> list[str]:
    return [
        f"Current price: ${observation.current_price:.2f}",
        f"1M change: {observation.change_1m:.1f}%",
        f"3M change: {observation.change_3m:.1f}%",
        f"From 52W high: {observation.pct_from_high:.1f}%",
    ]


def _footer(dashboard_url: str | None) -> list[str]:
    lines = ["---", MONITOR_NAME]
    if dashboard_url:
        lines.append(dashboard_url)
    return lines


def format_alert_message(
    ticker: str,
    result: ScoringResult,
    observation: MarketObservation | None = None,
    dashboard_url: str | None = None,
) -> AlertMessage:
    """
    개별 종목 알림 메시지

    관측값이 없으면 가격 정보 블록을 생략한다.
    """
    tier = result.tier
    score = result.total_score

    lines = [
        f"{tier.glyph} CORPORATE DECAY ALERT",
        "",
        f"Ticker: {ticker}",
        f"Score: {score}/100",
        f"Tier: {tier.value}",
    ]

    if observation is not None:
        lines.append("")
        lines.extend(_format_price_context(observation))

    lines.extend(["", "Active signals:"])
    active = result.signals.active()
    if active:
        lines.extend(f"• {label}: {points} pts" for label, points in active)
    else:
        lines.append(f"• {EMPTY_MARKER}")

    lines.extend([
        "",
        "---",
        f"Recommended action: {get_recommendation(tier)}",
        "",
    ])
    lines.extend(_footer(dashboard_url))

    subject = f"{tier.glyph} CORPORATE DECAY: {ticker} - {tier.value} ({score}/100)"
    return AlertMessage(subject=subject, body="\n".join(lines))


def _format_bucket(
    title: str,
    tier: DecayTier,
    entries: list[tuple[str, ScoringResult]],
) -> list[str]:
    lines = [f"{tier.glyph} {title} ({len(entries)}):"]
    if entries:
        lines.extend(
            f"{result.tier.glyph} {ticker}: {result.total_score}/100"
            for ticker, result in entries
        )
    else:
        lines.append(EMPTY_MARKER)
    return lines


def format_daily_digest(
    batch: list[tuple[str, ScoringResult]],
    generated_at: datetime | None = None,
    dashboard_url: str | None = None,
) -> AlertMessage | None:
    """
    일일 요약 메시지

    CRITICAL, WARNING이 하나도 없으면 None (전송 생략).
    NORMAL 종목은 본문에 나오지 않고 총 감시 종목 수에만 포함된다.
    """
    buckets: dict[DecayTier, list[tuple[str, ScoringResult]]] = {
        DecayTier.CRITICAL: [],
        DecayTier.WARNING: [],
        DecayTier.ATTENTION: [],
    }
    for ticker, result in batch:
        if result.tier in buckets:
            buckets[result.tier].append((ticker, result))

    critical = buckets[DecayTier.CRITICAL]
    warning = buckets[DecayTier.WARNING]

    if not critical and not warning:
        return None

    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    lines = [f"{DIGEST_GLYPH} CORPORATE DECAY - DAILY SUMMARY", ""]
    lines.extend(_format_bucket("CRITICAL", DecayTier.CRITICAL, critical))
    lines.append("")
    lines.extend(_format_bucket("WARNING", DecayTier.WARNING, warning))
    lines.append("")
    lines.extend(_format_bucket("ATTENTION", DecayTier.ATTENTION, buckets[DecayTier.ATTENTION]))
    lines.extend([
        "",
        "---",
        f"Total monitored: {len(batch)}",
        f"Timestamp: {generated_at.isoformat()}",
    ])
    if dashboard_url:
        lines.extend(["", f"Dashboard: {dashboard_url}"])

    subject = (
        f"{DIGEST_GLYPH} Corporate Decay Daily: "
        f"{len(critical)} critical, {len(warning)} warning"
    )
    return AlertMessage(subject=subject, body="\n".join(lines))


class AlertCoordinator:
    """
    알림 코디네이터

    사용법:
        coordinator = AlertCoordinator(channel=EmailServiceChannel(), recipient="ops@example.com")

        # WARNING/CRITICAL이면 개별 알림 전송
        sent = coordinator.send_alert("GME", result, observation)

        # 배치 종료 후 일일 요약
        coordinator.send_daily_digest([("GME", result), ...])
    """

    def __init__(
        self,
        channel: NotificationChannel,
        recipient: str,
        dashboard_url: str | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.channel = channel
        self.recipient = recipient
        self.dashboard_url = dashboard_url

    def send_alert(
        self,
        ticker: str,
        result: ScoringResult,
        observation: MarketObservation | None = None,
    ) -> bool:
        """
        개별 알림 전송

        Returns:
            채널 전송 성공 여부 (알림 대상이 아니면 전송 없이 False)
        """
        if not should_alert(result):
            return False

        message = format_alert_message(ticker, result, observation, self.dashboard_url)
        sent = self.channel.send(message.subject, message.body, self.recipient)

        if sent:
            self.logger.info(f"[{ticker}] 알림 전송 완료 ({result.tier.value}, {result.total_score}/100)")
        else:
            self.logger.error(f"[{ticker}] 알림 전송 실패 via {self.channel.get_channel_name()}")
        return sent

    def send_daily_digest(self, batch: list[tuple[str, ScoringResult]]) -> bool:
        """
        일일 요약 전송

        Returns:
            채널 전송 성공 여부 (요약 생략 시 전송 없이 True)
        """
        message = format_daily_digest(batch, dashboard_url=self.dashboard_url)
        if message is None:
            self.logger.info(f"일일 요약 생략: CRITICAL/WARNING 없음 ({len(batch)}종목)")
            return True

        sent = self.channel.send(message.subject, message.body, self.recipient)
        if sent:
            self.logger.info(f"일일 요약 전송 완료: {message.subject}")
        else:
            self.logger.error(f"일일 요약 전송 실패 via {self.channel.get_channel_name()}")
        return sent
