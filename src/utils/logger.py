"""
통합 로깅 모듈

사용법:
    from src.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("예측 시작")
    logger.warning("모델 응답에 없는 상품")
    logger.error("DB 저장 실패", exc_info=True)
"""

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


# 로그 디렉토리
LOG_DIR = Path(__file__).parent.parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)


class SafeRotatingFileHandler(RotatingFileHandler):
    """파일 잠금에 안전한 RotatingFileHandler

    로테이션 중 PermissionError가 나면 기존 파일에 계속 쓴다.
    """

    def doRollover(self):
        try:
            super().doRollover()
        except PermissionError:
            if self.stream is None and not self.delay:
                self.stream = self._open()


# 로그 포맷
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# 로그 파일
LOG_FILES = {
    "main": LOG_DIR / "app.log",                # 전체 로그
    "forecast": LOG_DIR / "forecast.log",       # 예측 파이프라인
    "auth": LOG_DIR / "auth.log",               # 토큰 검증 / 접근 권한
    "error": LOG_DIR / "error.log",             # 에러만
}

# 이미 설정된 로거 추적
_configured_loggers = set()


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: str = "main",
    console: bool = True,
    max_bytes: int = 20 * 1024 * 1024,  # 20MB
    backup_count: int = 10
) -> logging.Logger:
    """
    로거 설정

    Args:
        name: 로거 이름 (보통 __name__)
        level: 로그 레벨
        log_file: 로그 파일 키 ("main", "forecast", "auth")
        console: 콘솔 출력 여부
        max_bytes: 파일당 최대 크기
        backup_count: 백업 파일 수

    Returns:
        설정된 Logger
    """
    logger = logging.getLogger(name)

    if name in _configured_loggers:
        return logger

    logger.setLevel(level)

    if logger.handlers:
        _configured_loggers.add(name)
        return logger

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    simple_formatter = logging.Formatter(LOG_FORMAT_SIMPLE, DATE_FORMAT)

    # 파일 핸들러 (로테이션)
    file_path = LOG_FILES.get(log_file, LOG_FILES["main"])
    try:
        file_handler = SafeRotatingFileHandler(
            file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"[WARN] 로그 파일 핸들러 설정 실패: {e}")

    # 에러 전용 파일 핸들러
    try:
        error_handler = SafeRotatingFileHandler(
            LOG_FILES["error"],
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setFormatter(formatter)
        error_handler.setLevel(logging.ERROR)
        logger.addHandler(error_handler)
    except OSError as e:
        print(f"[WARN] 에러 로그 파일 핸들러 설정 실패: {e}")

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(simple_formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    # 상위 로거로 전파 방지
    logger.propagate = False

    _configured_loggers.add(name)
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    로거 가져오기 (편의 함수)

    모듈별 자동 분류:
        - *forecast* → forecast.log
        - *identity*, *access*, *trusted* → auth.log
        - 그 외 → app.log

    Args:
        name: 모듈 이름 (보통 __name__)

    Returns:
        모듈에 맞게 설정된 Logger 인스턴스
    """
    if "forecast" in name:
        return setup_logger(name, log_file="forecast")
    elif "identity" in name or "access" in name or "trusted" in name:
        return setup_logger(name, log_file="auth")
    return setup_logger(name, log_file="main")


def log_with_context(
    _logger: logging.Logger,
    level: str,
    msg: str,
    exc_info: bool = False,
    **ctx: Any,
) -> None:
    """컨텍스트 키워드를 자동 포맷하는 로깅 헬퍼

    Args:
        _logger: 로거 인스턴스
        level: 로그 레벨 ("debug", "info", "warning", "error")
        msg: 로그 메시지
        exc_info: True면 예외 스택 트레이스 포함
        **ctx: 컨텍스트 키=값 쌍 (shop_id, user_id, product_id 등)

    Usage:
        log_with_context(logger, "warning", "예측 저장 실패",
                        shop_id="S1", product_id="P1")
        # Output: "예측 저장 실패 | shop_id=S1 | product_id=P1"
    """
    if ctx:
        ctx_str = " | ".join(f"{k}={v}" for k, v in ctx.items() if v is not None)
        if ctx_str:
            msg = f"{msg} | {ctx_str}"

    log_fn = getattr(_logger, level, None) or _logger.info
    log_fn(msg, exc_info=exc_info)


def cleanup_old_logs(max_age_days: int = 30) -> int:
    """앱 시작 시 오래된 로테이션 백업 파일(.log.N) 삭제

    Args:
        max_age_days: 이 일수보다 오래된 백업 파일 삭제

    Returns:
        삭제한 파일 수
    """
    if not LOG_DIR.exists():
        return 0

    cutoff = datetime.now() - timedelta(days=max_age_days)
    removed = 0

    for log_file in LOG_DIR.iterdir():
        if not log_file.is_file():
            continue
        if not (log_file.suffix and log_file.suffix[1:].isdigit()):
            continue
        try:
            mtime = datetime.fromtimestamp(log_file.stat().st_mtime)
            if mtime < cutoff:
                log_file.unlink()
                removed += 1
        except PermissionError:
            pass  # 다른 프로세스가 잠근 파일은 다음 기동 때 정리
    return removed
