"""
TrustedContext -- 서비스 권한 데이터 접근 값 객체

매장 소유자/직원/관리자 여부처럼 테넌트 경계를 넘는 조회는
요청자 권한이 아니라 서비스 권한으로 수행해야 합니다.
이 권한은 전역 커넥션으로 재사용하지 않고, 필요한 곳에서
TrustedContext.for_service()로 명시적으로 발급해 함수 인자로 전달합니다.

frozen dataclass이므로 요청 간 공유되어도 안전합니다.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.settings.app_config import DB_PATH
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrustedContext:
    """서비스 권한 컨텍스트 (불변 값 객체)

    Usage:
        ctx = TrustedContext.for_service("inventory-forecast", db_path)
        grant = authorize_shop_access(ctx, user_id, shop_id)
    """
    purpose: str
    db_path: Path
    issued_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def for_service(cls, purpose: str, db_path: Optional[Path] = None) -> "TrustedContext":
        """서비스 권한 컨텍스트 발급 (발급 시점을 로그로 남김)

        Args:
            purpose: 발급 사유 (호출 기능 이름)
            db_path: 데이터 저장소 경로. None이면 설정값 사용

        Returns:
            TrustedContext 인스턴스
        """
        ctx = cls(purpose=purpose, db_path=Path(db_path) if db_path else DB_PATH)
        logger.info(f"[TRUSTED] 서비스 권한 발급: purpose={purpose} db={ctx.db_path.name}")
        return ctx
