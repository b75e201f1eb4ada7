"""
재고 예측 서비스 예외 정의

모든 예외는 ForecastError를 상속하며, HTTP 응답으로 변환할 때
status_code / code / message 를 그대로 사용합니다.
재시도는 어디에서도 자동으로 하지 않습니다 (호출자 책임).
"""

from typing import Any, Dict, Optional


class ForecastError(Exception):
    """재고 예측 관련 기본 예외"""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "재고 예측 처리 중 오류가 발생했습니다"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON 응답 본문"""
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class InvalidRequestError(ForecastError):
    """요청 형식 오류 (입력 수정 전 재시도 불가)"""
    status_code = 400
    code = "INVALID_REQUEST"
    default_message = "shopId는 필수입니다"


class UnauthorizedError(ForecastError):
    """토큰 없음/무효 (재인증 필요)"""
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "인증 토큰이 없거나 유효하지 않습니다"


class ForbiddenError(ForecastError):
    """인증은 되었으나 매장 접근 권한 없음"""
    status_code = 403
    code = "FORBIDDEN"
    default_message = "해당 매장의 재고 예측에 접근 권한이 없습니다"


class QuotaExceededError(ForecastError):
    """AI 게이트웨이 크레딧 소진 (계정 조치 전 재시도 불가)"""
    status_code = 402
    code = "QUOTA_EXCEEDED"
    default_message = "AI 크레딧이 소진되었습니다. 크레딧을 충전하세요."


class RateLimitedError(ForecastError):
    """AI 게이트웨이 요청 빈도 제한 (잠시 후 재시도 가능)"""
    status_code = 429
    code = "RATE_LIMITED"
    default_message = "요청 빈도 제한을 초과했습니다. 잠시 후 다시 시도하세요."


class UpstreamError(ForecastError):
    """AI 게이트웨이 실패 또는 구조화 응답 누락/손상"""
    status_code = 500
    code = "UPSTREAM_ERROR"
    default_message = "AI 서비스 오류"


class ForecastConfigError(ForecastError):
    """필수 설정 누락 (API 키 등)"""
    status_code = 500
    code = "CONFIG_ERROR"
    default_message = "AI 서비스가 설정되지 않았습니다"


class PersistenceError(ForecastError):
    """개별 예측 저장 실패 (배치 전체를 중단하지 않음, 응답에 노출 안 됨)"""
    status_code = 500
    code = "PERSISTENCE_ERROR"
    default_message = "예측 저장 실패"
