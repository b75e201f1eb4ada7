# -*- coding: utf-8 -*-
"""
예외 / 로깅 유틸리티 테스트

검증 대상:
  1. ForecastError 계층의 status_code / code / JSON 본문
  2. log_with_context() 포맷
  3. get_logger() 모듈별 로그 파일 분류
"""

from unittest.mock import MagicMock

import pytest

from src.core.forecast_errors import (
    ForbiddenError,
    ForecastConfigError,
    ForecastError,
    InvalidRequestError,
    PersistenceError,
    QuotaExceededError,
    RateLimitedError,
    UnauthorizedError,
    UpstreamError,
)


# =========================================================================
# 1. 예외 계층
# =========================================================================


class TestForecastErrors:
    """예외 → HTTP 매핑"""

    @pytest.mark.parametrize("error_cls, status, code", [
        (InvalidRequestError, 400, "INVALID_REQUEST"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (QuotaExceededError, 402, "QUOTA_EXCEEDED"),
        (ForbiddenError, 403, "FORBIDDEN"),
        (RateLimitedError, 429, "RATE_LIMITED"),
        (UpstreamError, 500, "UPSTREAM_ERROR"),
        (ForecastConfigError, 500, "CONFIG_ERROR"),
        (PersistenceError, 500, "PERSISTENCE_ERROR"),
    ])
    def test_status_and_code(self, error_cls, status, code):
        err = error_cls()
        assert isinstance(err, ForecastError)
        assert err.status_code == status
        assert err.code == code
        assert err.message

    def test_custom_message(self):
        err = UpstreamError("AI 서비스 오류 (status=503)")
        assert err.to_dict() == {"error": "AI 서비스 오류 (status=503)", "code": "UPSTREAM_ERROR"}
        assert str(err) == "[UPSTREAM_ERROR] AI 서비스 오류 (status=503)"

    def test_details_included(self):
        err = InvalidRequestError(details={"field": "shopId"})
        assert err.to_dict()["details"] == {"field": "shopId"}


# =========================================================================
# 2. log_with_context()
# =========================================================================


class TestLogWithContext:
    """log_with_context() 헬퍼 함수 테스트"""

    def test_context_format(self):
        from src.utils.logger import log_with_context

        mock_logger = MagicMock()
        log_with_context(mock_logger, "warning", "예측 저장 실패",
                         shop_id="S1", product_id="P1")

        msg = mock_logger.warning.call_args[0][0]
        assert msg == "예측 저장 실패 | shop_id=S1 | product_id=P1"

    def test_no_context(self):
        from src.utils.logger import log_with_context

        mock_logger = MagicMock()
        log_with_context(mock_logger, "info", "작업 완료")
        mock_logger.info.assert_called_once_with("작업 완료", exc_info=False)

    def test_none_values_excluded(self):
        from src.utils.logger import log_with_context

        mock_logger = MagicMock()
        log_with_context(mock_logger, "debug", "테스트", shop_id="S1", product_id=None)
        msg = mock_logger.debug.call_args[0][0]
        assert "product_id" not in msg

    def test_exc_info_passed(self):
        from src.utils.logger import log_with_context

        mock_logger = MagicMock()
        log_with_context(mock_logger, "error", "실패", exc_info=True)
        assert mock_logger.error.call_args[1]["exc_info"] is True


# =========================================================================
# 3. get_logger() 분류
# =========================================================================


class TestLoggerRouting:
    """모듈 이름별 로그 파일"""

    def _file_names(self, logger):
        return {
            getattr(h, "baseFilename", "").replace("\\", "/").rsplit("/", 1)[-1]
            for h in logger.handlers
        }

    def test_forecast_module(self):
        from src.utils.logger import get_logger
        logger = get_logger("src.application.services.forecast_service")
        assert "forecast.log" in self._file_names(logger)

    def test_identity_module(self):
        from src.utils.logger import get_logger
        logger = get_logger("src.infrastructure.identity.token_verifier")
        assert "auth.log" in self._file_names(logger)

    def test_error_file_always_attached(self):
        from src.utils.logger import get_logger
        logger = get_logger("src.web.app")
        names = self._file_names(logger)
        assert "app.log" in names
        assert "error.log" in names
