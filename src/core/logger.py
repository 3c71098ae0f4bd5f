"""
로깅 서비스

loguru 기반 구조화된 로깅
"""
import sys
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class LoggerService:
    """
    로깅 서비스

    사용법:
        from src.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("감시 시작")
        logger.bind(ticker="GME").warning("가격 데이터 없음")
    """

    _configured: bool = False

    @classmethod
    def configure(
        cls,
        level: str = "INFO",
        log_dir: str = "./logs",
        log_format: str | None = None,
        file_enabled: bool = True,
        rotation: str = "10 MB",
        retention: str = "7 days",
    ) -> None:
        """
        로거 설정

        Args:
            level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: 로그 파일 디렉토리
            log_format: 로그 포맷 (None이면 기본값 사용)
            file_enabled: 파일 로깅 활성화 여부
            rotation: 로그 파일 로테이션 크기
            retention: 로그 파일 보관 기간
        """
        if cls._configured:
            return

        logger.remove()
        logger.configure(extra={"name": "decay"})

        if log_format is None:
            log_format = DEFAULT_FORMAT

        logger.add(
            sys.stderr,
            format=log_format,
            level=level,
            colorize=True,
        )

        if file_enabled:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            logger.add(
                log_path / "app.log",
                format=log_format,
                level=level,
                rotation=rotation,
                retention=retention,
                compression="zip",
                encoding="utf-8",
            )

            # 에러 전용 로그 (알림 전송 실패 추적용)
            logger.add(
                log_path / "error.log",
                format=log_format,
                level="ERROR",
                rotation=rotation,
                retention=retention,
                compression="zip",
                encoding="utf-8",
            )

        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        """설정 리셋 (테스트용)"""
        logger.remove()
        cls._configured = False


def get_logger(name: str) -> Any:
    """
    모듈별 로거 반환

    Args:
        name: 모듈 이름 (보통 __name__ 또는 클래스 이름)

    Returns:
        name이 바인딩된 loguru logger
    """
    return logger.bind(name=name)


def setup_logger_from_config() -> None:
    """설정 파일 기반 로거 초기화"""
    from src.core.config import get_config
    from src.core.exceptions import ConfigError

    try:
        logging_config = get_config().get_section("logging")
    except ConfigError:
        # 설정 로드 실패 시 기본 설정 사용
        LoggerService.configure()
        return

    file_config = logging_config.get("file", {}) or {}
    LoggerService.configure(
        level=logging_config.get("level", "INFO"),
        log_dir=logging_config.get("log_dir", "./logs"),
        log_format=logging_config.get("format"),
        file_enabled=file_config.get("enabled", True),
        rotation=file_config.get("rotation", "10 MB"),
        retention=file_config.get("retention", "7 days"),
    )
