"""재고 예측 REST API

POST /api/inventory-forecast          {"shopId": "..."} → 예측 실행
GET  /api/inventory-forecast/<shop_id> → 저장된 예측 + 위험도 요약
"""

from flask import Blueprint, current_app, jsonify, request

from src.application.services.forecast_service import InventoryForecastService
from src.core.forecast_errors import ForecastError
from src.utils.logger import get_logger

logger = get_logger(__name__)

forecast_bp = Blueprint("forecast", __name__)


def _get_service() -> InventoryForecastService:
    """앱 설정의 서비스 팩토리 사용 (테스트에서 교체 가능)"""
    factory = current_app.config.get("FORECAST_SERVICE_FACTORY")
    if factory:
        return factory()
    return InventoryForecastService(db_path=current_app.config.get("DB_PATH"))


@forecast_bp.route("/inventory-forecast", methods=["POST"])
def generate_forecast():
    """재고 예측 실행 (모델 호출 + 저장)"""
    data = request.get_json(silent=True) or {}
    shop_id = data.get("shopId") if isinstance(data, dict) else None

    try:
        result = _get_service().generate_forecast(shop_id, request.headers.get("Authorization"))
    except ForecastError:
        raise
    except Exception as e:
        logger.error(f"[FORECAST] 예측 처리 실패: shop={shop_id} {e}", exc_info=True)
        return jsonify({"error": "서버 내부 오류가 발생했습니다", "code": "INTERNAL_ERROR"}), 500

    return jsonify(result)


@forecast_bp.route("/inventory-forecast/<shop_id>", methods=["GET"])
def saved_forecasts(shop_id):
    """저장된 예측 조회 (위험도순)"""
    try:
        result = _get_service().list_saved_forecasts(shop_id, request.headers.get("Authorization"))
    except ForecastError:
        raise
    except Exception as e:
        logger.error(f"[FORECAST] 저장 예측 조회 실패: shop={shop_id} {e}", exc_info=True)
        return jsonify({"error": "서버 내부 오류가 발생했습니다", "code": "INTERNAL_ERROR"}), 500

    return jsonify(result)
