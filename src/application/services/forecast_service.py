"""
InventoryForecastService -- 재고 예측 오케스트레이션

요청 1건 처리 순서:
1. 입력 검증 (shopId → Bearer 토큰 형식)
2. AI 설정 확인
3. 토큰 검증 → user id
4. 매장 접근 권한 (TrustedContext)
5. 활성 상품/재고 + 최근 30일 완료 주문 조회
6. 판매 속도 Feature 계산
7. 모델 분류 (ForecastClassifier)
8. 상품별 독립 upsert (best-effort, 트랜잭션 없음)
9. 응답: 모델 원본 forecasts + productsData

요청 간 상태를 공유하지 않습니다. 같은 매장에 대한 동시 요청은
상품별 upsert 에서 마지막 쓰기가 이깁니다.
"""

import math
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from src.application.services.shop_access_service import authorize_shop_access
from src.core.forecast_errors import InvalidRequestError, PersistenceError
from src.domain.forecast.risk_summary import sort_by_risk, summarize_risk
from src.domain.forecast.sales_features import SalesFeature, compute_sales_features
from src.infrastructure.ai.forecast_classifier import (
    ChatCompletionForecastClassifier,
    ForecastClassifier,
)
from src.infrastructure.database.repos import (
    ForecastRepository,
    OrderItemRepository,
    ProductRepository,
)
from src.infrastructure.identity.token_verifier import TokenVerifier, extract_bearer_token
from src.settings.constants import CONFIDENCE_MAX, CONFIDENCE_MIN, RISK_LEVELS, SALES_WINDOW_DAYS
from src.settings.trusted_context import TrustedContext
from src.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

SERVICE_PURPOSE = "inventory-forecast"

PERSIST_SAVED = "saved"
PERSIST_SKIPPED = "skipped"
PERSIST_FAILED = "failed"


# =============================================================================
# 저장 결과
# =============================================================================

@dataclass
class PersistenceOutcome:
    """예측 1건의 저장 결과"""
    product_id: Optional[str]
    status: str                   # saved / skipped / failed
    error: Optional[str] = None


@dataclass
class PersistenceReport:
    """best-effort 배치 저장 결과 (항목별 독립)"""
    outcomes: List[PersistenceOutcome] = field(default_factory=list)

    def _count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def saved(self) -> int:
        return self._count(PERSIST_SAVED)

    @property
    def skipped(self) -> int:
        return self._count(PERSIST_SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(PERSIST_FAILED)

    def summary(self) -> str:
        return f"saved={self.saved} skipped={self.skipped} failed={self.failed}"


# =============================================================================
# 값 변환 헬퍼 (모델 응답은 타입이 보장되지 않음)
# =============================================================================

# SQLite INTEGER 범위
SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1


def _as_optional_int(value: Any) -> Optional[int]:
    """정수 변환. 숫자가 아니거나 inf/nan, SQLite 범위 밖이면 None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(float(value))
    except (ValueError, TypeError, OverflowError):
        return None
    if not SQLITE_INT_MIN <= number <= SQLITE_INT_MAX:
        return None
    return number


def _clamp_confidence(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        score = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(score):
        return None
    return max(float(CONFIDENCE_MIN), min(float(CONFIDENCE_MAX), score))


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _stored_days_until_stockout(entry: Dict[str, Any], feature: SalesFeature) -> Optional[int]:
    """저장할 품절까지 일수

    판매가 없어 계산값이 None 이면 모델 값과 무관하게 NULL.
    그 외에는 모델 값, 없으면 계산값.
    """
    if feature.days_until_stockout is None:
        return None
    model_value = _as_optional_int(entry.get("daysUntilStockout"))
    return model_value if model_value is not None else feature.days_until_stockout


def saved_row_to_dict(row: Dict[str, Any]) -> Dict[str, Any]:
    """inventory_forecasts 행 → API 응답 형식"""
    return {
        "productId": row.get("product_id"),
        "productName": row.get("product_name"),
        "shopId": row.get("shop_id"),
        "currentStock": row.get("current_stock"),
        "dailySalesAvg": row.get("daily_sales_avg"),
        "daysUntilStockout": row.get("days_until_stockout"),
        "predictedStockoutDate": row.get("predicted_stockout_date"),
        "confidenceScore": row.get("confidence_score"),
        "riskLevel": row.get("risk_level"),
        "reorderQuantity": row.get("reorder_quantity"),
        "recommendation": row.get("recommendation"),
        "updatedAt": row.get("updated_at"),
    }


# =============================================================================
# 서비스
# =============================================================================

class InventoryForecastService:
    """재고 예측 서비스

    Usage:
        service = InventoryForecastService()
        result = service.generate_forecast("shop-1", request.headers.get("Authorization"))
        # {"forecasts": [...], "productsData": [...]}
    """

    def __init__(
        self,
        classifier: Optional[ForecastClassifier] = None,
        token_verifier: Optional[TokenVerifier] = None,
        db_path: Optional[Path] = None,
        window_days: int = SALES_WINDOW_DAYS,
    ):
        """초기화

        Args:
            classifier: 위험도 분류기. None이면 요청 시 설정값으로 생성
            token_verifier: 토큰 검증기. None이면 기본 인증 서버 사용
            db_path: 데이터 저장소 경로 (None이면 설정값)
            window_days: 판매 집계 기간
        """
        self._classifier = classifier
        self.token_verifier = token_verifier or TokenVerifier()
        self.db_path = db_path
        self.window_days = window_days

    def _get_classifier(self) -> ForecastClassifier:
        """분류기 반환 (API 키 없으면 ForecastConfigError)"""
        if self._classifier is None:
            self._classifier = ChatCompletionForecastClassifier()
        return self._classifier

    # ── 공통 단계 ──────────────────────────────────────────

    @staticmethod
    def _require_shop_id(shop_id: Any) -> str:
        if shop_id is None or not str(shop_id).strip():
            raise InvalidRequestError()
        return str(shop_id).strip()

    def _authorize(self, user_id: str, shop_id: str) -> TrustedContext:
        ctx = TrustedContext.for_service(SERVICE_PURPOSE, self.db_path)
        authorize_shop_access(ctx, user_id, shop_id)
        return ctx

    # ── 예측 생성 ──────────────────────────────────────────

    def generate_forecast(self, shop_id: Any, authorization: Optional[str]) -> Dict[str, Any]:
        """재고 예측 실행

        Args:
            shop_id: 매장 ID (요청 본문 shopId)
            authorization: Authorization 헤더 값

        Returns:
            {"forecasts": 모델 원본 목록, "productsData": Feature 목록}

        Raises:
            InvalidRequestError, UnauthorizedError, ForecastConfigError,
            ForbiddenError, RateLimitedError, QuotaExceededError, UpstreamError
        """
        shop_id = self._require_shop_id(shop_id)
        token = extract_bearer_token(authorization)
        classifier = self._get_classifier()

        user_id = self.token_verifier.verify(token)
        log_with_context(logger, "info", "[FORECAST] 예측 요청", user_id=user_id, shop_id=shop_id)

        ctx = self._authorize(user_id, shop_id)

        features = self.load_features(ctx, shop_id)
        forecasts = classifier.classify(features)

        report = self.persist_forecasts(ctx, shop_id, forecasts, features)
        log_with_context(logger, "info", f"[FORECAST] 예측 완료: {report.summary()}",
                         shop_id=shop_id, products=len(features), forecasts=len(forecasts))

        return {
            "forecasts": forecasts,
            "productsData": [f.to_dict() for f in features],
        }

    def load_features(self, ctx: TrustedContext, shop_id: str) -> List[SalesFeature]:
        """상품/재고 + 완료 주문 조회 후 Feature 계산

        두 조회는 독립적이며 시점 일관성을 보장하지 않습니다.
        """
        products = ProductRepository(db_path=ctx.db_path).get_active_products(shop_id)
        order_items = OrderItemRepository(db_path=ctx.db_path).get_completed_items(
            shop_id, days=self.window_days
        )
        features = compute_sales_features(products, order_items, self.window_days)
        logger.debug(f"Feature 계산: shop={shop_id} products={len(products)} items={len(order_items)}")
        return features

    def persist_forecasts(
        self,
        ctx: TrustedContext,
        shop_id: str,
        forecasts: Sequence[Any],
        features: Sequence[SalesFeature],
    ) -> PersistenceReport:
        """예측 항목별 독립 upsert

        - 계산된 Feature 와 productId 가 맞지 않는 항목은 저장하지 않음 (skipped)
        - 한 상품의 저장 실패는 다른 상품 저장에 영향을 주지 않음 (failed 로 기록)
        """
        repo = ForecastRepository(db_path=ctx.db_path)
        by_id = {f.product_id: f for f in features}
        report = PersistenceReport()

        for entry in forecasts:
            product_id = entry.get("productId") if isinstance(entry, dict) else None
            feature = by_id.get(str(product_id)) if product_id is not None else None
            if feature is None:
                log_with_context(logger, "warning", "[FORECAST] 알 수 없는 상품 예측 (저장 제외)",
                                 shop_id=shop_id, product_id=product_id)
                report.outcomes.append(PersistenceOutcome(product_id, PERSIST_SKIPPED))
                continue

            risk_level = entry.get("riskLevel")
            try:
                repo.upsert_forecast(
                    product_id=feature.product_id,
                    shop_id=shop_id,
                    current_stock=feature.current_stock,
                    daily_sales_avg=feature.avg_daily_sales,
                    days_until_stockout=_stored_days_until_stockout(entry, feature),
                    predicted_stockout_date=_as_optional_str(entry.get("predictedStockoutDate")),
                    confidence_score=_clamp_confidence(entry.get("confidenceScore")),
                    risk_level=risk_level if risk_level in RISK_LEVELS else None,
                    reorder_quantity=_as_optional_int(entry.get("reorderQuantity")),
                    recommendation=_as_optional_str(entry.get("recommendation")),
                )
            except (sqlite3.Error, OverflowError, ValueError) as e:
                err = PersistenceError(f"예측 저장 실패: {e}")
                log_with_context(logger, "error", str(err), exc_info=True,
                                 shop_id=shop_id, product_id=feature.product_id)
                report.outcomes.append(
                    PersistenceOutcome(feature.product_id, PERSIST_FAILED, err.message)
                )
                continue

            report.outcomes.append(PersistenceOutcome(feature.product_id, PERSIST_SAVED))

        return report

    # ── 저장된 예측 조회 ──────────────────────────────────────

    def list_saved_forecasts(self, shop_id: Any, authorization: Optional[str]) -> Dict[str, Any]:
        """저장된 예측 조회 (모델 호출 없음)

        Returns:
            {"shopId", "forecasts": 위험도순, "summary": 위험도별 건수}
        """
        shop_id = self._require_shop_id(shop_id)
        token = extract_bearer_token(authorization)
        user_id = self.token_verifier.verify(token)
        ctx = self._authorize(user_id, shop_id)

        rows = ForecastRepository(db_path=ctx.db_path).get_shop_forecasts(shop_id)
        forecasts = sort_by_risk([saved_row_to_dict(r) for r in rows], key="riskLevel")

        return {
            "shopId": shop_id,
            "forecasts": forecasts,
            "summary": summarize_risk(forecasts, key="riskLevel"),
        }
