"""
공유 테스트 픽스처

- tmp_path 파일 SQLite DB (테스트 간 격리, 스키마는 init_db 기준)
- 매장/상품/재고/주문 시드 헬퍼
- 모델/토큰 검증기 대역
"""

import sqlite3
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.infrastructure.ai.forecast_classifier import ForecastClassifier
from src.infrastructure.database.schema import init_db


OWNER_ID = "user-owner"
STAFF_ID = "user-staff"
ADMIN_ID = "user-admin"
STRANGER_ID = "user-stranger"


# ── 시드 헬퍼 ──────────────────────────────────────────

class ForecastDbSeeder:
    """테스트 DB 시드 (외래키 순서: 매장 → 상품 → 재고/주문)"""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._order_seq = 0

    def _execute(self, sql: str, params: tuple) -> None:
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute(sql, params)
            conn.commit()
        finally:
            conn.close()

    def shop(self, shop_id: str = "shop-1", owner_id: str = OWNER_ID, name: str = "동네마트"):
        self._execute(
            "INSERT INTO shops (id, name, owner_id, created_at) VALUES (?, ?, ?, ?)",
            (shop_id, name, owner_id, datetime.now().isoformat()),
        )
        return shop_id

    def staff(self, shop_id: str, user_id: str = STAFF_ID):
        self._execute(
            "INSERT INTO shop_staff (shop_id, user_id, created_at) VALUES (?, ?, ?)",
            (shop_id, user_id, datetime.now().isoformat()),
        )

    def role(self, user_id: str = ADMIN_ID, role: str = "admin"):
        self._execute(
            "INSERT INTO user_roles (user_id, role, created_at) VALUES (?, ?, ?)",
            (user_id, role, datetime.now().isoformat()),
        )

    def product(self, product_id: str, shop_id: str = "shop-1", name: str = None,
                price: float = 1000.0, is_active: int = 1):
        now = datetime.now().isoformat()
        self._execute(
            """INSERT INTO products (id, shop_id, name, price, is_active, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (product_id, shop_id, name or product_id, price, is_active, now, now),
        )
        return product_id

    def inventory(self, product_id: str, quantity: int, min_stock_level: int = 10):
        self._execute(
            """INSERT INTO inventory (product_id, quantity, min_stock_level, updated_at)
               VALUES (?, ?, ?, ?)""",
            (product_id, quantity, min_stock_level, datetime.now().isoformat()),
        )

    def order(self, shop_id: str, items: Dict[str, int], status: str = "completed",
              days_ago: float = 1, created_at: str = None):
        """주문 1건 + 주문 상품. items = {product_id: quantity}

        created_at 을 주지 않으면 UTC 기준 days_ago 일 전 (ISO, 오프셋 포함)
        """
        self._order_seq += 1
        order_id = f"order-{self._order_seq}"
        if created_at is None:
            created_at = (datetime.now(timezone.utc) - timedelta(days=days_ago)).isoformat()
        self._execute(
            "INSERT INTO orders (id, shop_id, status, created_at) VALUES (?, ?, ?, ?)",
            (order_id, shop_id, status, created_at),
        )
        for product_id, quantity in items.items():
            self._execute(
                "INSERT INTO order_items (order_id, product_id, quantity) VALUES (?, ?, ?)",
                (order_id, product_id, quantity),
            )
        return order_id

    def forecast_rows(self, shop_id: str = None) -> List[Dict[str, Any]]:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            if shop_id:
                rows = conn.execute(
                    "SELECT * FROM inventory_forecasts WHERE shop_id = ? ORDER BY product_id",
                    (shop_id,),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM inventory_forecasts ORDER BY product_id"
                ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()


class StubClassifier(ForecastClassifier):
    """고정 응답(또는 예외)을 돌려주는 분류기"""

    def __init__(self, forecasts=None, error=None):
        self.forecasts = forecasts or []
        self.error = error
        self.calls = []

    def classify(self, features):
        self.calls.append(list(features))
        if self.error is not None:
            raise self.error
        return self.forecasts


# ── 픽스처 ──────────────────────────────────────────

@pytest.fixture
def forecast_db(tmp_path):
    """스키마가 생성된 임시 DB 경로"""
    db_file = tmp_path / "test_forecast.db"
    init_db(db_file)
    return db_file


@pytest.fixture
def seed(forecast_db):
    """시드 헬퍼"""
    return ForecastDbSeeder(forecast_db)


@pytest.fixture
def token_verifier():
    """'token-<user_id>' 형식 토큰을 user_id 로 돌려주는 검증기 대역"""
    verifier = MagicMock()
    verifier.verify.side_effect = lambda token: token.replace("token-", "", 1)
    return verifier


def bearer(user_id: str) -> str:
    return f"Bearer token-{user_id}"
