"""
Data Ingest Layer - 기본 클래스

모든 데이터 수집기의 공통 로깅 및 유틸리티
"""
from datetime import datetime

import pandas as pd

from src.core.interfaces import MarketDataProvider
from src.core.logger import get_logger
from src.core.exceptions import IngestError


class BaseDataFetcher(MarketDataProvider):
    """
    데이터 수집기 기본 클래스

    수집 시작/완료/실패 로깅을 공통으로 제공
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
        self._last_fetch_time: datetime | None = None

    def _log_fetch_start(self, ticker: str) -> None:
        """수집 시작 로깅"""
        self.logger.debug(f"[{self.get_source_name()}] {ticker} 수집 시작")
        self._last_fetch_time = datetime.now()

    def _log_fetch_complete(self, ticker: str, count: int = 0) -> None:
        """수집 완료 로깅"""
        elapsed = None
        if self._last_fetch_time:
            elapsed = (datetime.now() - self._last_fetch_time).total_seconds()

        message = f"[{self.get_source_name()}] {ticker} 수집 완료: {count}건"
        if elapsed is not None:
            message += f", 소요시간: {elapsed:.2f}초"
        self.logger.debug(message)

    def _log_fetch_error(self, ticker: str, error: Exception | str) -> None:
        """수집 오류 로깅"""
        self.logger.warning(f"[{self.get_source_name()}] {ticker} 수집 실패: {error}")

    @staticmethod
    def validate_dataframe(
        df: pd.DataFrame,
        required_columns: list[str],
        source_name: str
    ) -> None:
        """
        DataFrame 유효성 검증

        Raises:
            IngestError: 비어 있거나 필수 컬럼이 없는 경우
        """
        if df.empty:
            raise IngestError(f"[{source_name}] 빈 DataFrame 반환됨")

        missing = set(required_columns) - set(df.columns)
        if missing:
            raise IngestError(
                f"[{source_name}] 필수 컬럼 누락: {missing}",
                {"missing_columns": sorted(missing)}
            )
