"""
DB 스키마 정의

상점(테넌트), 상품/재고, 주문 이력, 재고 예측 테이블을 관리합니다.
예측 서비스가 직접 쓰는 테이블은 inventory_forecasts 하나뿐이며,
나머지는 다른 기능(주문/재고 관리)이 채우는 외부 데이터입니다.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1


# ═══════════════════════════════════════════════════════
# 스키마
# ═══════════════════════════════════════════════════════

FORECAST_SCHEMA = [
    # schema_version
    """CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        applied_at TEXT NOT NULL
    )""",

    # shops (테넌트)
    """CREATE TABLE IF NOT EXISTS shops (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        owner_id TEXT NOT NULL,
        is_active INTEGER DEFAULT 1,
        created_at TEXT NOT NULL
    )""",

    # shop_staff
    """CREATE TABLE IF NOT EXISTS shop_staff (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        shop_id TEXT NOT NULL,
        user_id TEXT NOT NULL,
        role TEXT DEFAULT 'staff',
        created_at TEXT NOT NULL,
        UNIQUE(shop_id, user_id),
        FOREIGN KEY (shop_id) REFERENCES shops(id) ON DELETE CASCADE
    )""",

    # user_roles (전역 권한)
    """CREATE TABLE IF NOT EXISTS user_roles (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        role TEXT NOT NULL,
        created_at TEXT NOT NULL,
        UNIQUE(user_id, role)
    )""",

    # products
    """CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        shop_id TEXT NOT NULL,
        name TEXT NOT NULL,
        price REAL DEFAULT 0,
        is_active INTEGER DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY (shop_id) REFERENCES shops(id) ON DELETE CASCADE
    )""",

    # inventory (상품당 최대 1행)
    """CREATE TABLE IF NOT EXISTS inventory (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        product_id TEXT NOT NULL UNIQUE,
        quantity INTEGER DEFAULT 0,
        min_stock_level INTEGER DEFAULT 10,
        updated_at TEXT NOT NULL,
        FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE
    )""",

    # orders
    """CREATE TABLE IF NOT EXISTS orders (
        id TEXT PRIMARY KEY,
        shop_id TEXT NOT NULL,
        customer_id TEXT,
        status TEXT NOT NULL DEFAULT 'pending',
        total_amount REAL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY (shop_id) REFERENCES shops(id) ON DELETE CASCADE
    )""",

    # order_items
    """CREATE TABLE IF NOT EXISTS order_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id TEXT NOT NULL,
        product_id TEXT NOT NULL,
        quantity INTEGER NOT NULL DEFAULT 0,
        unit_price REAL DEFAULT 0,
        FOREIGN KEY (order_id) REFERENCES orders(id) ON DELETE CASCADE,
        FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE
    )""",

    # inventory_forecasts (상품+상점당 1행, upsert)
    """CREATE TABLE IF NOT EXISTS inventory_forecasts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        product_id TEXT NOT NULL,
        shop_id TEXT NOT NULL,
        current_stock INTEGER DEFAULT 0,
        daily_sales_avg REAL DEFAULT 0,
        days_until_stockout INTEGER,
        predicted_stockout_date TEXT,
        confidence_score REAL,
        risk_level TEXT,
        reorder_quantity INTEGER,
        recommendation TEXT,
        updated_at TEXT NOT NULL,
        UNIQUE(product_id, shop_id),
        FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE,
        FOREIGN KEY (shop_id) REFERENCES shops(id) ON DELETE CASCADE
    )""",
]

FORECAST_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_products_shop_active ON products(shop_id, is_active)",
    "CREATE INDEX IF NOT EXISTS idx_orders_shop_status_created ON orders(shop_id, status, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id)",
    "CREATE INDEX IF NOT EXISTS idx_forecasts_shop ON inventory_forecasts(shop_id)",
]


# ═══════════════════════════════════════════════════════
# 초기화 함수
# ═══════════════════════════════════════════════════════

def init_db(db_path: Optional[Path] = None) -> None:
    """DB 초기화 (테이블/인덱스 생성, 이미 있으면 유지)"""
    from src.infrastructure.database.connection import get_db_path

    db_path = get_db_path(db_path)
    conn = sqlite3.connect(str(db_path))
    try:
        cursor = conn.cursor()
        for sql in FORECAST_SCHEMA:
            cursor.execute(sql)
        for sql in FORECAST_INDEXES:
            cursor.execute(sql)
        cursor.execute(
            "INSERT OR REPLACE INTO schema_version (version, applied_at) VALUES (?, ?)",
            (SCHEMA_VERSION, datetime.now().isoformat())
        )
        conn.commit()
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()
