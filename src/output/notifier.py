"""
알림 채널

- EmailServiceChannel: JSON 메일 발송 서비스 (HTTP POST)
- LogChannel: 실제 전송 없이 로그로만 출력 (dry-run)
"""
from collections import deque

import requests

from src.core.config import get_config
from src.core.exceptions import NotificationError
from src.core.interfaces import NotificationChannel
from src.core.logger import get_logger

LOG_CHANNEL_HISTORY = 100


class EmailServiceChannel(NotificationChannel):
    """
    메일 발송 서비스 채널

    사용법:
        channel = EmailServiceChannel()
        ok = channel.send("제목", "본문", "ops@example.com")
    """

    def __init__(
        self,
        service_url: str | None = None,
        sender: str | None = None,
        sender_name: str | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ):
        self.logger = get_logger(self.__class__.__name__)

        config = get_config()
        self.service_url = service_url or config.get(
            "notification.email.service_url", "https://email.duendes.app/api/send"
        )
        self.sender = sender or config.get("notification.email.send_from", "duendes.app")
        self.sender_name = sender_name or config.get(
            "notification.email.name", "Corporate Decay Monitor"
        )
        self.timeout = timeout if timeout is not None else config.get(
            "notification.email.timeout_seconds", 15
        )
        self.session = session or requests.Session()

    def get_channel_name(self) -> str:
        return "EmailService"

    def _post(self, payload: dict) -> dict:
        """발송 요청 (실패 시 NotificationError)"""
        try:
            response = self.session.post(
                self.service_url,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.Timeout:
            raise NotificationError(f"메일 서비스 타임아웃 ({self.timeout}초)")
        except requests.RequestException as e:
            raise NotificationError(f"메일 서비스 요청 실패: {e}")
        except ValueError as e:
            raise NotificationError("메일 서비스 응답 파싱 실패", {"error": str(e)})

    def send(self, subject: str, body: str, recipient: str) -> bool:
        """메일 발송, 서비스가 success=true를 돌려줄 때만 True"""
        payload = {
            "to": recipient,
            "subject": subject,
            "message": body,
            "sendFrom": self.sender,
            "name": self.sender_name,
        }

        try:
            result = self._post(payload)
        except NotificationError as e:
            self.logger.error(f"메일 발송 실패: {e}")
            return False

        if not isinstance(result, dict) or result.get("success") is not True:
            self.logger.warning(f"메일 서비스가 실패 응답: {result}")
            return False

        return True


class LogChannel(NotificationChannel):
    """로그 전용 채널 (dry-run)"""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
        # 최근 전송분만 보관
        self.sent: deque[tuple[str, str, str]] = deque(maxlen=LOG_CHANNEL_HISTORY)

    def get_channel_name(self) -> str:
        return "Log"

    def send(self, subject: str, body: str, recipient: str) -> bool:
        self.logger.info(f"[dry-run] to={recipient} subject={subject}\n{body}")
        self.sent.append((subject, body, recipient))
        return True
