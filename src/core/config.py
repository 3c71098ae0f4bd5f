"""
설정 관리 모듈

YAML 기반 설정 파일 로드 및 환경별 설정 분리
"""
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from src.core.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

ENV_PREFIX = "DECAY_"


class Config:
    """
    설정 관리자

    사용법:
        config = Config()  # 기본: development 환경
        config = Config(env="production")

        tickers = config.get("watchlist.tickers", default=[])
        recipient = config.get_required("notification.recipient")
    """

    _instance: "Config | None" = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs) -> "Config":
        """싱글톤 패턴"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, env: str | None = None, config_dir: Path | None = None):
        if Config._initialized:
            return

        load_dotenv()

        # 환경 결정: 인자 > 환경변수 > 기본값
        self.env = env or os.getenv("APP_ENV", "development")

        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            # 프로젝트 루트/config 디렉토리
            self.config_dir = Path(__file__).parent.parent.parent / "config"

        self._config: dict[str, Any] = {}
        self._load_config()

        Config._initialized = True

    def _load_config(self) -> None:
        """설정 파일 로드 (기본 + 환경별 + 환경변수)"""
        base_config_path = self.config_dir / "settings.yaml"
        if not base_config_path.exists():
            raise ConfigNotFoundError(
                f"기본 설정 파일을 찾을 수 없습니다: {base_config_path}"
            )
        self._config = self._load_yaml(base_config_path)

        env_config_path = self.config_dir / f"settings.{self.env}.yaml"
        if env_config_path.exists():
            self._deep_merge(self._config, self._load_yaml(env_config_path))

        self._apply_env_overrides()

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """YAML 파일 로드"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML 파싱 오류: {path}", {"error": str(e)})

    def _deep_merge(self, base: dict, override: dict) -> None:
        """딕셔너리 깊은 병합 (override가 base를 덮어씀)"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _apply_env_overrides(self) -> None:
        """
        환경 변수로 설정 오버라이드 (DECAY_ 접두사)

        섹션 이름까지만 '_'를 '.'으로 바꾼다.
            DECAY_NOTIFICATION_RECIPIENT -> notification.recipient
            DECAY_PIPELINE_TICKER_DELAY_SECONDS -> pipeline.ticker_delay_seconds
        """
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            remainder = key[len(ENV_PREFIX):].lower()
            section, _, leaf = remainder.partition("_")
            if not leaf:
                continue
            self._set_nested(f"{section}.{leaf}", yaml.safe_load(value))

    def _set_nested(self, key: str, value: Any) -> None:
        """점(.) 표기법으로 중첩 설정 값 설정"""
        keys = key.split(".")
        current = self._config

        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        설정 값 조회 (점 표기법 지원)

        Args:
            key: 설정 키 (예: "ingest.yahoo.timeout_seconds")
            default: 기본값

        Returns:
            설정 값 또는 기본값
        """
        current: Any = self._config

        for k in key.split("."):
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default

        return current

    def get_required(self, key: str) -> Any:
        """
        필수 설정 값 조회

        Raises:
            ConfigValidationError: 설정 값이 없는 경우
        """
        value = self.get(key)
        if value is None:
            raise ConfigValidationError(f"필수 설정 값이 없습니다: {key}")
        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """섹션 전체 조회"""
        return self.get(section, {})

    def get_watchlist(self) -> list[str]:
        """감시 종목 목록 (대문자, 중복 제거, 순서 유지)"""
        tickers = self.get("watchlist.tickers", []) or []
        if isinstance(tickers, str):
            tickers = tickers.split(",")

        seen: list[str] = []
        for ticker in tickers:
            symbol = str(ticker).strip().upper()
            if symbol and symbol not in seen:
                seen.append(symbol)
        return seen

    @property
    def is_production(self) -> bool:
        """운영 환경 여부"""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """개발 환경 여부"""
        return self.env == "development"

    @classmethod
    def reset(cls) -> None:
        """싱글톤 인스턴스 리셋 (테스트용)"""
        cls._instance = None
        cls._initialized = False


def get_config() -> Config:
    """Config 인스턴스 반환 (편의 함수)"""
    return Config()
