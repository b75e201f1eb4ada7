"""
ForecastRepository -- 재고 예측 결과 저장소

(product_id, shop_id) 당 1행만 유지합니다. 재실행 시 덮어쓰기(upsert)하며
이 저장소에서 행을 삭제하지 않습니다.
"""

from typing import Any, Dict, List, Optional

from src.infrastructure.database.base_repository import BaseRepository
from src.utils.logger import get_logger

logger = get_logger(__name__)


class ForecastRepository(BaseRepository):
    """inventory_forecasts CRUD"""

    def upsert_forecast(
        self,
        product_id: str,
        shop_id: str,
        current_stock: int,
        daily_sales_avg: float,
        days_until_stockout: Optional[int] = None,
        predicted_stockout_date: Optional[str] = None,
        confidence_score: Optional[float] = None,
        risk_level: Optional[str] = None,
        reorder_quantity: Optional[int] = None,
        recommendation: Optional[str] = None,
    ) -> str:
        """예측 결과 저장 (upsert)

        Args:
            product_id: 상품 ID
            shop_id: 매장 ID
            current_stock: 예측 시점 재고
            daily_sales_avg: 일평균 판매량
            days_until_stockout: 품절까지 일수 (None이면 NULL 저장)
            predicted_stockout_date: 예상 품절일
            confidence_score: 신뢰도 (0~100)
            risk_level: critical / warning / healthy
            reorder_quantity: 권장 발주량
            recommendation: 권장 조치

        Returns:
            저장 시각 (updated_at)
        """
        now = self._now()
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO inventory_forecasts
                (product_id, shop_id, current_stock, daily_sales_avg,
                 days_until_stockout, predicted_stockout_date, confidence_score,
                 risk_level, reorder_quantity, recommendation, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(product_id, shop_id) DO UPDATE SET
                    current_stock = excluded.current_stock,
                    daily_sales_avg = excluded.daily_sales_avg,
                    days_until_stockout = excluded.days_until_stockout,
                    predicted_stockout_date = excluded.predicted_stockout_date,
                    confidence_score = excluded.confidence_score,
                    risk_level = excluded.risk_level,
                    reorder_quantity = excluded.reorder_quantity,
                    recommendation = excluded.recommendation,
                    updated_at = excluded.updated_at
                """,
                (product_id, shop_id, current_stock, daily_sales_avg,
                 days_until_stockout, predicted_stockout_date, confidence_score,
                 risk_level, reorder_quantity, recommendation, now),
            )
            conn.commit()
            return now
        finally:
            conn.close()

    def get_forecast(self, product_id: str, shop_id: str) -> Optional[Dict[str, Any]]:
        """단일 예측 조회"""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM inventory_forecasts WHERE product_id = ? AND shop_id = ?",
                (product_id, shop_id),
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    def get_shop_forecasts(self, shop_id: str) -> List[Dict[str, Any]]:
        """매장 전체 예측 (상품명 포함)"""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT f.*, p.name AS product_name
                FROM inventory_forecasts f
                LEFT JOIN products p ON p.id = f.product_id
                WHERE f.shop_id = ?
                ORDER BY f.updated_at DESC
                """,
                (shop_id,),
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()

    def count_for_product(self, product_id: str, shop_id: str) -> int:
        """(product_id, shop_id) 행 수 (항상 0 또는 1)"""
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COUNT(*) FROM inventory_forecasts WHERE product_id = ? AND shop_id = ?",
                (product_id, shop_id),
            ).fetchone()
            return row[0]
        finally:
            conn.close()
