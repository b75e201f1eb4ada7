"""
BaseRepository -- 모든 Repository의 기반 클래스

db_path를 직접 지정하면 해당 파일을, 아니면 설정된 기본 DB를 사용합니다.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.infrastructure.database.connection import get_connection


class BaseRepository:
    """기본 저장소 클래스

    Usage:
        class ProductRepository(BaseRepository):
            ...

        repo = ProductRepository(db_path=ctx.db_path)
        conn = repo._get_conn()
    """

    def __init__(self, db_path: Optional[Path] = None):
        """초기화

        Args:
            db_path: 직접 DB 경로 지정 (서비스 권한 컨텍스트, 테스트용)
        """
        self._db_path = Path(db_path) if db_path else None

        if self._db_path and not self._db_path.exists():
            from src.infrastructure.database.schema import init_db
            init_db(self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        """DB 연결 반환"""
        return get_connection(self._db_path)

    def _now(self) -> str:
        """현재 시각 ISO 포맷"""
        return datetime.now().isoformat()
