"""
DB 커넥션 헬퍼

재고 예측 서비스는 단일 SQLite 데이터 저장소를 사용합니다.
- shops, shop_staff, user_roles: 접근 권한 판단
- products, inventory, orders, order_items: 예측 입력
- inventory_forecasts: 예측 결과 (upsert)
"""

import sqlite3
from pathlib import Path
from typing import Optional

from src.settings.app_config import DB_PATH
from src.utils.logger import get_logger

logger = get_logger(__name__)


def get_db_path(db_path: Optional[Path] = None) -> Path:
    """DB 파일 경로 반환 (상위 디렉토리 자동 생성)"""
    path = Path(db_path) if db_path else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """DB 연결 반환 (sqlite3.Row, FK 활성화)"""
    conn = sqlite3.connect(str(get_db_path(db_path)), timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
