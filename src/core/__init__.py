"""
Core 모듈 - 공통 인프라

- config: 설정 관리
- logger: 로깅 서비스
- exceptions: 커스텀 예외
- interfaces: 등급 Enum, 수집 결과, 추상 인터페이스
"""
from src.core.config import Config, get_config
from src.core.logger import get_logger, LoggerService, setup_logger_from_config
from src.core.exceptions import (
    BaseError,
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    IngestError,
    APIError,
    RateLimitError,
    NotificationError,
)
from src.core.interfaces import (
    DecayTier,
    FetchResult,
    DataFetcher,
    MarketDataProvider,
    NotificationChannel,
)

__all__ = [
    # Config
    "Config",
    "get_config",
    # Logger
    "get_logger",
    "LoggerService",
    "setup_logger_from_config",
    # Exceptions
    "BaseError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "IngestError",
    "APIError",
    "RateLimitError",
    "NotificationError",
    # Interfaces
    "DecayTier",
    "FetchResult",
    "DataFetcher",
    "MarketDataProvider",
    "NotificationChannel",
]
