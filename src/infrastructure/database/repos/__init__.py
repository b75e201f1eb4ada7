"""
Repository -- 전체 re-export

Usage:
    from src.infrastructure.database.repos import ForecastRepository
    from src.infrastructure.database.repos import ShopAccessRepository
"""

# --- 예측 입력 (읽기 전용) ---
from .product_repo import ProductRepository
from .order_item_repo import OrderItemRepository

# --- 예측 결과 ---
from .forecast_repo import ForecastRepository

# --- 접근 권한 (서비스 권한 전용) ---
from .shop_access_repo import ShopAccessRepository

__all__ = [
    "ProductRepository",
    "OrderItemRepository",
    "ForecastRepository",
    "ShopAccessRepository",
]
