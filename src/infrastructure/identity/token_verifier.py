"""
Bearer 토큰 검증

인증 서버(GoTrue 호환 `/auth/v1/user`)에 토큰을 보내 호출자 user id(sub)를 얻습니다.
세션 발급/갱신은 이 서비스 범위가 아닙니다.
"""

from typing import Optional

import requests

from src.core.forecast_errors import UnauthorizedError
from src.settings.app_config import AUTH_ANON_KEY, AUTH_URL
from src.utils.logger import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Authorization 헤더에서 토큰 추출

    Raises:
        UnauthorizedError: 헤더 없음 / Bearer 형식 아님 / 빈 토큰
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("인증 토큰이 없습니다")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthorizedError("인증 토큰이 없습니다")
    return token


class TokenVerifier:
    """인증 서버 토큰 검증기"""

    def __init__(self, auth_url: str = AUTH_URL, anon_key: str = AUTH_ANON_KEY,
                 timeout: float = 10) -> None:
        """
        Args:
            auth_url: 인증 서버 기본 URL
            anon_key: 공개(anon) API 키
            timeout: 요청 타임아웃 (초)
        """
        self.user_url = f"{auth_url.rstrip('/')}/auth/v1/user"
        self.anon_key = anon_key
        self.timeout = timeout

    def verify(self, token: str) -> str:
        """토큰 검증 후 user id 반환

        Raises:
            UnauthorizedError: 검증 실패 또는 subject 없음
        """
        headers = {"Authorization": f"{BEARER_PREFIX}{token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key

        try:
            resp = requests.get(self.user_url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"[IDENTITY] 인증 서버 요청 실패: {e}")
            raise UnauthorizedError("토큰을 검증할 수 없습니다") from e

        if resp.status_code != 200:
            logger.warning(f"[IDENTITY] 토큰 검증 실패: status={resp.status_code}")
            raise UnauthorizedError("유효하지 않은 토큰입니다")

        try:
            data = resp.json()
        except ValueError as e:
            raise UnauthorizedError("유효하지 않은 토큰입니다") from e

        user_id = (data or {}).get("id") or (data or {}).get("sub")
        if not user_id:
            logger.warning("[IDENTITY] 토큰에 subject 없음")
            raise UnauthorizedError("유효하지 않은 토큰입니다")

        return str(user_id)
