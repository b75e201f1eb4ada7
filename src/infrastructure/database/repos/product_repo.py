"""ProductRepository -- 매장 활성 상품 + 재고 조회"""

from typing import Any, Dict, List

from src.infrastructure.database.base_repository import BaseRepository


class ProductRepository(BaseRepository):
    """상품/재고 저장소 (읽기 전용)"""

    def get_active_products(self, shop_id: str) -> List[Dict[str, Any]]:
        """매장의 활성 상품과 재고 행(최대 1개)

        재고 행이 없는 상품은 quantity / min_stock_level 이 None 으로 반환됩니다.

        Args:
            shop_id: 매장 ID

        Returns:
            [{id, name, price, quantity, min_stock_level}, ...]
        """
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT p.id, p.name, p.price,
                       i.quantity, i.min_stock_level
                FROM products p
                LEFT JOIN inventory i ON i.product_id = p.id
                WHERE p.shop_id = ? AND p.is_active = 1
                ORDER BY p.name
                """,
                (shop_id,),
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()
