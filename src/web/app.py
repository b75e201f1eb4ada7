"""Flask 앱 생성"""
import secrets
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request

from src.core.forecast_errors import ForecastError
from src.settings.app_config import DB_PATH, FLASK_SECRET_KEY, PROJECT_ROOT
from src.utils.logger import cleanup_old_logs, get_logger

logger = get_logger(__name__)


def create_app(db_path: Optional[Path] = None) -> Flask:
    """Flask 앱 팩토리

    Args:
        db_path: 데이터 저장소 경로 (None이면 설정값)
    """
    app = Flask(__name__)
    app.config["DB_PATH"] = Path(db_path) if db_path else DB_PATH
    app.config["PROJECT_ROOT"] = str(PROJECT_ROOT)
    app.config["SECRET_KEY"] = FLASK_SECRET_KEY or secrets.token_hex(32)
    # 테스트에서 InventoryForecastService 생성 방식을 교체할 때 사용
    app.config["FORECAST_SERVICE_FACTORY"] = None

    removed = cleanup_old_logs()
    if removed:
        logger.info(f"오래된 로그 파일 정리: {removed}개")

    from .routes import register_blueprints
    register_blueprints(app)

    from src.web.middleware import RateLimiter, add_cors_headers, handle_preflight
    rate_limiter = RateLimiter()

    @app.before_request
    def preflight():
        """CORS 사전 요청"""
        return handle_preflight()

    @app.before_request
    def check_rate_limit():
        """Rate Limiting 체크"""
        return rate_limiter.check()

    @app.before_request
    def log_request():
        """접근 로깅"""
        logger.info(f"[API] {request.method} {request.path} from {request.remote_addr}")

    @app.after_request
    def add_headers(response):
        """CORS + 보안 헤더 추가"""
        add_cors_headers(response)
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate'
        return response

    # 예측 서비스 예외 → 일관된 JSON 응답
    @app.errorhandler(ForecastError)
    def forecast_error(e):
        if e.status_code >= 500:
            logger.error(f"[API] {request.method} {request.path} 실패: {e}")
        else:
            logger.warning(f"[API] {request.method} {request.path} 거절: {e}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "요청한 리소스를 찾을 수 없습니다", "code": "NOT_FOUND"}), 404

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "서버 내부 오류가 발생했습니다", "code": "INTERNAL_ERROR"}), 500

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": "잘못된 요청입니다", "code": "BAD_REQUEST"}), 400

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "허용되지 않는 HTTP 메서드입니다", "code": "METHOD_NOT_ALLOWED"}), 405

    return app


if __name__ == "__main__":
    app = create_app()
    print("Inventory forecast service starting on http://localhost:5000")
    app.run(host="127.0.0.1", port=5000, debug=False)
