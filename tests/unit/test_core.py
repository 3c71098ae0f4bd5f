"""
Core 모듈 단위 테스트
"""
import pytest


class TestConfig:
    """Config 모듈 테스트"""

    def test_config_load_success(self):
        """설정 파일 로드 성공"""
        from src.core.config import Config

        config = Config()
        assert config.get("app.name") == "corporate-decay-monitor"

    def test_config_singleton(self):
        """싱글톤 패턴 확인"""
        from src.core.config import Config

        assert Config() is Config()

    def test_test_env_override(self):
        """settings.test.yaml 병합"""
        from src.core.config import Config

        config = Config()
        assert config.env == "test"
        assert config.get("notification.dry_run") is True
        assert config.get("notification.recipient") == "test@example.com"
        # 병합되지 않은 키는 기본값 유지
        assert config.get("notification.email.send_from") == "duendes.app"

    def test_config_get_default(self):
        """존재하지 않는 키 기본값 반환"""
        from src.core.config import Config

        value = Config().get("non.existent.key", default="default_value")
        assert value == "default_value"

    def test_config_get_section(self):
        """섹션 전체 조회"""
        from src.core.config import Config

        section = Config().get_section("ingest")
        assert isinstance(section, dict)
        assert "yahoo" in section

    def test_get_required_missing(self):
        """필수 값 누락"""
        from src.core.config import Config
        from src.core.exceptions import ConfigValidationError

        with pytest.raises(ConfigValidationError):
            Config().get_required("notification.missing_key")

    def test_env_var_override(self, monkeypatch):
        """DECAY_ 환경변수 오버라이드"""
        from src.core.config import Config

        monkeypatch.setenv("DECAY_NOTIFICATION_RECIPIENT", "env@example.com")
        monkeypatch.setenv("DECAY_PIPELINE_TICKER_DELAY_SECONDS", "1.5")

        config = Config()
        assert config.get("notification.recipient") == "env@example.com"
        assert config.get("pipeline.ticker_delay_seconds") == 1.5

    def test_watchlist(self):
        """감시 종목 목록 순서 유지"""
        from src.core.config import Config

        watchlist = Config().get_watchlist()
        assert watchlist[:3] == ["GME", "AMC", "BBBY"]
        assert len(watchlist) == len(set(watchlist))

    def test_watchlist_from_csv_env(self, monkeypatch):
        """쉼표 구분 문자열도 허용"""
        from src.core.config import Config

        monkeypatch.setenv("DECAY_WATCHLIST_TICKERS", "gme, amc,GME")
        assert Config().get_watchlist() == ["GME", "AMC"]

    def test_missing_config_dir(self, tmp_path):
        """설정 파일 없음"""
        from src.core.config import Config
        from src.core.exceptions import ConfigNotFoundError

        with pytest.raises(ConfigNotFoundError):
            Config(config_dir=tmp_path)

    def test_invalid_yaml(self, tmp_path):
        """YAML 파싱 오류"""
        from src.core.config import Config
        from src.core.exceptions import ConfigError

        (tmp_path / "settings.yaml").write_text("app: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config(config_dir=tmp_path)


class TestLogger:
    """Logger 모듈 테스트"""

    def test_logger_configure(self):
        """로거 설정 성공"""
        from src.core.logger import LoggerService

        assert LoggerService._configured is True

    def test_get_logger(self):
        """모듈별 로거 획득"""
        from src.core.logger import get_logger

        logger = get_logger(__name__)
        logger.info("테스트 메시지")
        assert logger is not None

    def test_file_logging(self, tmp_path):
        """파일 핸들러"""
        from src.core.logger import LoggerService, get_logger

        LoggerService.reset()
        LoggerService.configure(level="DEBUG", log_dir=str(tmp_path), file_enabled=True)
        get_logger("test").error("오류 기록")

        assert (tmp_path / "app.log").exists()
        assert (tmp_path / "error.log").exists()


class TestExceptions:
    """예외 계층"""

    def test_details_in_str(self):
        from src.core.exceptions import APIError

        error = APIError("실패", {"url": "x"})
        assert "Details" in str(error)

    def test_rate_limit_is_ingest_error(self):
        from src.core.exceptions import IngestError, RateLimitError

        error = RateLimitError("한도 초과", retry_after=30)
        assert isinstance(error, IngestError)
        assert error.retry_after == 30


class TestFetchResult:
    """수집 결과 타입"""

    def test_success(self):
        from src.core.interfaces import FetchResult

        result = FetchResult.success(12.5)
        assert result.ok is True
        assert result.value_or_none() == 12.5

    def test_failure(self):
        from src.core.interfaces import FetchResult

        result = FetchResult.failure("timeout")
        assert result.ok is False
        assert result.error == "timeout"
        assert result.value_or_none() is None
