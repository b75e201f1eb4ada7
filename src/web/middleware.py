"""Flask 미들웨어 (Rate Limit, CORS)"""
import time
import threading
from collections import defaultdict

from flask import request, jsonify

from src.settings.app_config import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_FORECAST,
    RATE_LIMIT_WINDOW_SECONDS,
)


class RateLimiter:
    """인메모리 슬라이딩 윈도우 Rate Limiter

    Flask before_request에서 사용.
    localhost(127.0.0.1)는 제한 제외.
    키는 IP + 메서드 + 라우트 패턴 (shop_id 등 경로 변수 제외).
    """

    def __init__(self, default_limit: int = RATE_LIMIT_DEFAULT,
                 window_seconds: int = RATE_LIMIT_WINDOW_SECONDS):
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()
        self._last_sweep = time.time()
        self.default_limit = default_limit
        self.window_seconds = window_seconds
        # 유료 모델 호출 엔드포인트는 더 엄격하게
        self.endpoint_limits = {
            ('POST', '/api/inventory-forecast'): RATE_LIMIT_FORECAST,
        }

    def _sweep(self, cutoff: float) -> None:
        """윈도우 밖 요청만 남은 키 제거 (lock 보유 상태에서 호출)"""
        for key in [k for k, times in self._requests.items() if not times or times[-1] <= cutoff]:
            del self._requests[key]

    def check(self):
        """Rate limit 체크. 초과 시 429 응답 반환, 정상이면 None."""
        ip = request.remote_addr
        if ip == '127.0.0.1':
            return None

        # 매칭되지 않는 경로(404)는 하나의 키로 묶음
        rule = request.url_rule.rule if request.url_rule is not None else '<unmatched>'
        limit = self.endpoint_limits.get((request.method, rule), self.default_limit)
        now = time.time()
        cutoff = now - self.window_seconds
        key = f"{ip}:{request.method}:{rule}"

        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            self._requests[key] = [t for t in self._requests[key] if t > cutoff]
            if len(self._requests[key]) >= limit:
                return jsonify({"error": "요청 빈도 제한 초과", "code": "TOO_MANY_REQUESTS"}), 429
            self._requests[key].append(now)

        return None


# ── CORS ──────────────────────────────────────────────

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def handle_preflight():
    """OPTIONS 사전 요청은 빈 본문 204로 즉시 응답"""
    if request.method == "OPTIONS":
        return "", 204
    return None


def add_cors_headers(response):
    """모든 응답에 CORS 헤더 추가 (모든 origin 허용)"""
    for key, value in CORS_HEADERS.items():
        response.headers[key] = value
    return response
