"""OrderItemRepository -- 완료 주문의 판매 수량 조회"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from src.infrastructure.database.base_repository import BaseRepository
from src.settings.constants import ORDER_STATUS_COMPLETED, SALES_WINDOW_DAYS


class OrderItemRepository(BaseRepository):
    """주문 상품 저장소 (읽기 전용)"""

    def get_completed_items(
        self,
        shop_id: str,
        days: int = SALES_WINDOW_DAYS,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """최근 N일 내 생성된 완료 주문의 주문 상품

        orders.created_at 은 다른 기능이 기록하므로 형식이 섞여 있습니다
        ('T' / 공백 구분, 오프셋 유무). 비교는 SQLite datetime() 으로 UTC 정규화 후
        수행하며, 오프셋 없는 값은 UTC 로 간주합니다.

        Args:
            shop_id: 매장 ID
            days: 조회 기간 (호출 시점 기준 역산)
            now: 기준 시각 (테스트용, 기본 현재 UTC. naive 값은 UTC)

        Returns:
            [{product_id, quantity, order_id, created_at}, ...]
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        since = (now - timedelta(days=days)).isoformat()

        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT oi.product_id, oi.quantity, o.id AS order_id, o.created_at
                FROM order_items oi
                INNER JOIN orders o ON o.id = oi.order_id
                WHERE o.shop_id = ?
                  AND o.status = ?
                  AND datetime(o.created_at) >= datetime(?)
                """,
                (shop_id, ORDER_STATUS_COMPLETED, since),
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()
