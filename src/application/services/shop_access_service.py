"""
매장 접근 권한 판단

재고 예측은 유료 모델을 호출하는 관리 기능이므로
매장 소유자 / 등록 직원 / 전역 관리자만 실행할 수 있습니다.
조회는 반드시 TrustedContext 로 발급된 서비스 권한으로 수행합니다.
"""

from dataclasses import dataclass

from src.core.forecast_errors import ForbiddenError
from src.infrastructure.database.repos import ShopAccessRepository
from src.settings.constants import (
    ACCESS_VIA_ADMIN,
    ACCESS_VIA_OWNER,
    ACCESS_VIA_STAFF,
    ROLE_ADMIN,
)
from src.settings.trusted_context import TrustedContext
from src.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessGrant:
    """접근 허용 결과"""
    user_id: str
    shop_id: str
    via: str    # owner / staff / admin


def authorize_shop_access(ctx: TrustedContext, user_id: str, shop_id: str) -> AccessGrant:
    """호출자가 매장을 관리할 수 있는지 확인

    Args:
        ctx: 서비스 권한 컨텍스트
        user_id: 인증된 호출자 ID
        shop_id: 대상 매장 ID

    Returns:
        AccessGrant

    Raises:
        ForbiddenError: 소유자/직원/관리자 어느 것도 아님
    """
    repo = ShopAccessRepository(db_path=ctx.db_path)

    via = None
    if repo.get_owner_id(shop_id) == user_id:
        via = ACCESS_VIA_OWNER
    elif repo.is_staff(shop_id, user_id):
        via = ACCESS_VIA_STAFF
    elif repo.has_role(user_id, ROLE_ADMIN):
        via = ACCESS_VIA_ADMIN

    if via is None:
        log_with_context(logger, "warning", "[ACCESS] 접근 거부",
                         user_id=user_id, shop_id=shop_id, purpose=ctx.purpose)
        raise ForbiddenError()

    log_with_context(logger, "info", "[ACCESS] 접근 허용",
                     user_id=user_id, shop_id=shop_id, via=via)
    return AccessGrant(user_id=user_id, shop_id=shop_id, via=via)
