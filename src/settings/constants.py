"""
재고 예측 서비스 - 비즈니스 상수
- 판매 집계 기간 / 기본값
- 주문 상태 문자열
- 위험도 등급
- 권한(role) 이름

정식 경로: from src.settings.constants import ...
"""

# =====================================================================
# 판매 집계 기간
# =====================================================================
# 일평균 분모는 매장/상품 등록일과 무관하게 고정 (신규 상품은 과소 추정됨)
SALES_WINDOW_DAYS = 30

# =====================================================================
# 기본값 (Default Values)
# =====================================================================
DEFAULT_MIN_STOCK_LEVEL = 10        # 재고 행이 없는 상품의 최소 재고 기준
DEFAULT_CURRENT_STOCK = 0           # 재고 행이 없는 상품의 현재 재고

# =====================================================================
# 주문 상태
# =====================================================================
ORDER_STATUS_COMPLETED = "completed"

# =====================================================================
# 위험도 등급 (모델 분류 결과)
# =====================================================================
RISK_CRITICAL = "critical"
RISK_WARNING = "warning"
RISK_HEALTHY = "healthy"

RISK_LEVELS = (RISK_CRITICAL, RISK_WARNING, RISK_HEALTHY)

# 정렬 우선순위 (낮을수록 먼저). 알 수 없는 등급은 맨 뒤
RISK_ORDER = {
    RISK_CRITICAL: 0,
    RISK_WARNING: 1,
    RISK_HEALTHY: 2,
}

# 신뢰도 점수 범위
CONFIDENCE_MIN = 0
CONFIDENCE_MAX = 100

# =====================================================================
# 권한
# =====================================================================
ROLE_ADMIN = "admin"

ACCESS_VIA_OWNER = "owner"
ACCESS_VIA_STAFF = "staff"
ACCESS_VIA_ADMIN = "admin"
