"""
판매 속도(Sales Velocity) Feature 계산 -- 순수 로직

최근 30일 완료 주문 수량을 상품별로 합산하고,
고정 30일 분모로 일평균과 품절까지 일수를 계산합니다.

- avg_daily_sales = total_sales_30_days / 30  (상품 등록일과 무관)
- days_until_stockout = floor(current_stock / avg_daily_sales), 판매 0이면 None
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from src.settings.constants import (
    DEFAULT_CURRENT_STOCK,
    DEFAULT_MIN_STOCK_LEVEL,
    SALES_WINDOW_DAYS,
)


@dataclass(frozen=True)
class SalesFeature:
    """상품별 판매 속도 Feature (저장하지 않음, 매 호출 재계산)"""
    product_id: str
    name: str
    current_stock: int
    min_stock: int
    total_sales_30_days: int
    avg_daily_sales: float
    days_until_stockout: Optional[int]
    price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """응답(productsData) / 모델 입력용 직렬화"""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.price,
            "currentStock": self.current_stock,
            "minStock": self.min_stock,
            "totalSales30Days": self.total_sales_30_days,
            "avgDailySales": self.avg_daily_sales,
            "daysUntilStockout": self.days_until_stockout,
        }


def aggregate_sales(order_items: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """주문 상품 목록 → 상품별 판매 수량 합계

    Args:
        order_items: [{product_id, quantity}, ...]

    Returns:
        {product_id: total_quantity}
    """
    totals: Dict[str, int] = defaultdict(int)
    for item in order_items:
        product_id = item.get("product_id")
        if product_id is None:
            continue
        totals[product_id] += int(item.get("quantity") or 0)
    return dict(totals)


def calc_days_until_stockout(current_stock: int, avg_daily_sales: float) -> Optional[int]:
    """품절까지 일수. 판매가 없으면 None (무한대가 아니라 '정의 안 됨')"""
    if avg_daily_sales <= 0:
        return None
    return math.floor(current_stock / avg_daily_sales)


def build_sales_feature(
    product: Dict[str, Any],
    total_sales: int,
    window_days: int = SALES_WINDOW_DAYS,
) -> SalesFeature:
    """상품 1건의 Feature 계산

    Args:
        product: {id, name, price, quantity, min_stock_level}
            재고 행이 없으면 quantity/min_stock_level 이 None
        total_sales: 기간 내 판매 수량 합계
        window_days: 일평균 분모 (고정)
    """
    quantity = product.get("quantity")
    current_stock = int(quantity) if quantity is not None else DEFAULT_CURRENT_STOCK
    min_stock = product.get("min_stock_level")
    min_stock = int(min_stock) if min_stock is not None else DEFAULT_MIN_STOCK_LEVEL

    avg_daily_sales = total_sales / window_days

    price = product.get("price")
    return SalesFeature(
        product_id=product["id"],
        name=product.get("name") or "",
        current_stock=current_stock,
        min_stock=min_stock,
        total_sales_30_days=total_sales,
        avg_daily_sales=avg_daily_sales,
        days_until_stockout=calc_days_until_stockout(current_stock, avg_daily_sales),
        price=float(price) if price is not None else None,
    )


def compute_sales_features(
    products: Iterable[Dict[str, Any]],
    order_items: Iterable[Dict[str, Any]],
    window_days: int = SALES_WINDOW_DAYS,
) -> List[SalesFeature]:
    """상품 목록 + 주문 상품 → 상품별 SalesFeature

    상품 목록에 없는 product_id 의 판매는 무시됩니다 (비활성 상품 등).
    """
    totals = aggregate_sales(order_items)
    return [
        build_sales_feature(p, totals.get(p["id"], 0), window_days)
        for p in products
    ]
