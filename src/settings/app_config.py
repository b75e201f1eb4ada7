"""
통합 설정 진입점

환경변수(.env 포함)에서 외부 서비스 접속 정보를 읽어옵니다.
- 데이터 저장소 (SQLite 경로)
- 인증 서버 (토큰 검증)
- AI 게이트웨이 (재고 예측 모델)

Usage:
    from src.settings.app_config import DB_PATH, AI_GATEWAY_URL
    from src.settings.constants import SALES_WINDOW_DAYS
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# ── 프로젝트 경로 ──
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# .env 파일 로드 (이미 설정된 환경변수는 덮어쓰지 않음)
load_dotenv(PROJECT_ROOT / ".env")


def _optional_float(name: str) -> Optional[float]:
    """빈 값이면 None, 아니면 float 변환"""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


# ── 데이터 저장소 ──
DB_PATH = Path(os.getenv("FORECAST_DB_PATH") or DATA_DIR / "grocery.db")

# ── 인증 서버 ──
AUTH_URL = os.getenv("AUTH_URL", "http://127.0.0.1:54321").rstrip("/")
AUTH_ANON_KEY = os.getenv("AUTH_ANON_KEY", "")

# ── AI 게이트웨이 ──
AI_GATEWAY_URL = os.getenv(
    "AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
)
AI_GATEWAY_API_KEY = os.getenv("AI_GATEWAY_API_KEY", "")
AI_FORECAST_MODEL = os.getenv("AI_FORECAST_MODEL", "google/gemini-3-flash-preview")
# None이면 클라이언트 타임아웃 없음 (requests 기본 동작)
AI_REQUEST_TIMEOUT = _optional_float("AI_REQUEST_TIMEOUT")

# ── 웹 ──
FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "")

RATE_LIMIT_DEFAULT = 60             # 분당 기본 요청 수
RATE_LIMIT_WINDOW_SECONDS = 60
RATE_LIMIT_FORECAST = 10            # 유료 모델 호출 엔드포인트
