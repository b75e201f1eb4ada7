"""ShopAccessRepository -- 매장 소유자/직원/관리자 조회

테넌트 경계를 넘는 조회이므로 TrustedContext의 db_path로만 생성합니다.
"""

from typing import Optional

from src.infrastructure.database.base_repository import BaseRepository
from src.utils.logger import get_logger

logger = get_logger(__name__)


class ShopAccessRepository(BaseRepository):
    """매장 접근 권한 판단용 조회 (shops, shop_staff, user_roles)"""

    def get_owner_id(self, shop_id: str) -> Optional[str]:
        """매장 소유자 user id. 매장이 없으면 None."""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT owner_id FROM shops WHERE id = ?",
                (shop_id,),
            ).fetchone()
            return row["owner_id"] if row else None
        finally:
            conn.close()

    def is_staff(self, shop_id: str, user_id: str) -> bool:
        """매장 직원 등록 여부"""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 FROM shop_staff WHERE shop_id = ? AND user_id = ? LIMIT 1",
                (shop_id, user_id),
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def add_staff(self, shop_id: str, user_id: str, role: str = "staff") -> bool:
        """매장 직원 등록. 이미 등록되어 있으면 False."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO shop_staff (shop_id, user_id, role, created_at)
                   VALUES (?, ?, ?, ?)""",
                (shop_id, user_id, role, self._now()),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def grant_role(self, user_id: str, role: str) -> bool:
        """전역 role 부여. 이미 있으면 False."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO user_roles (user_id, role, created_at)
                   VALUES (?, ?, ?)""",
                (user_id, role, self._now()),
            )
            conn.commit()
            logger.info(f"[ACCESS] role 부여: user={user_id} role={role} inserted={cursor.rowcount > 0}")
            return cursor.rowcount > 0
        finally:
            conn.close()

    def has_role(self, user_id: str, role: str) -> bool:
        """전역 role 보유 여부"""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 FROM user_roles WHERE user_id = ? AND role = ? LIMIT 1",
                (user_id, role),
            ).fetchone()
            return row is not None
        finally:
            conn.close()
