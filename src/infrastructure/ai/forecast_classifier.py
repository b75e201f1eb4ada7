"""
ForecastClassifier -- 재고 위험도 분류 전략 인터페이스

모델 공급자, 스키마 버전, 프롬프트는 이 인터페이스 뒤에 숨깁니다.
인증/권한/저장 로직은 classify() 결과만 사용합니다.

기본 구현(ChatCompletionForecastClassifier)은 OpenAI 호환 chat completions
엔드포인트에 function tool을 강제(tool_choice)하여 구조화 응답을 받습니다.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import requests

from src.core.forecast_errors import (
    ForecastConfigError,
    QuotaExceededError,
    RateLimitedError,
    UpstreamError,
)
from src.domain.forecast.sales_features import SalesFeature
from src.settings.app_config import (
    AI_FORECAST_MODEL,
    AI_GATEWAY_API_KEY,
    AI_GATEWAY_URL,
    AI_REQUEST_TIMEOUT,
)
from src.settings.constants import RISK_LEVELS
from src.utils.logger import get_logger

logger = get_logger(__name__)


class ForecastClassifier(ABC):
    """재고 위험도 분류기 추상 인터페이스

    Usage:
        entries = classifier.classify(features)
        # [{"productId": ..., "riskLevel": "warning", "confidenceScore": 80, ...}, ...]
    """

    @abstractmethod
    def classify(self, features: Sequence[SalesFeature]) -> List[Dict[str, Any]]:
        """상품별 Feature → 예측 항목 목록 (모델 응답 그대로)

        Raises:
            RateLimitedError: 공급자 요청 빈도 제한
            QuotaExceededError: 공급자 크레딧 소진
            UpstreamError: 그 외 실패 / 구조화 응답 누락
        """


TOOL_NAME = "generate_forecasts"

SYSTEM_PROMPT = """You are an inventory forecasting AI for a grocery store. Analyze sales patterns and provide predictions.

For each product, provide:
1. Risk level (critical, warning, healthy)
2. Predicted stockout date
3. Recommended reorder quantity
4. Confidence score (0-100)
5. Brief recommendation

Consider seasonal patterns, sales velocity, and current stock levels. Be concise and actionable."""

FORECAST_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Generate inventory forecasts for products",
        "parameters": {
            "type": "object",
            "properties": {
                "forecasts": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "productId": {"type": "string"},
                            "productName": {"type": "string"},
                            "riskLevel": {"type": "string", "enum": list(RISK_LEVELS)},
                            "daysUntilStockout": {"type": "number"},
                            "predictedStockoutDate": {"type": "string"},
                            "reorderQuantity": {"type": "number"},
                            "confidenceScore": {"type": "number"},
                            "recommendation": {"type": "string"},
                        },
                        "required": [
                            "productId", "productName", "riskLevel",
                            "confidenceScore", "recommendation",
                        ],
                    },
                },
            },
            "required": ["forecasts"],
        },
    },
}


class ChatCompletionForecastClassifier(ForecastClassifier):
    """OpenAI 호환 chat completions + function calling 분류기"""

    def __init__(
        self,
        api_key: str = AI_GATEWAY_API_KEY,
        url: str = AI_GATEWAY_URL,
        model: str = AI_FORECAST_MODEL,
        timeout: Optional[float] = AI_REQUEST_TIMEOUT,
    ) -> None:
        """
        Args:
            api_key: 게이트웨이 API 키 (없으면 ForecastConfigError)
            url: chat completions 엔드포인트
            model: 모델 식별자
            timeout: 요청 타임아웃 (None이면 제한 없음)
        """
        if not api_key:
            raise ForecastConfigError()
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout

    def build_payload(self, features: Sequence[SalesFeature]) -> Dict[str, Any]:
        """요청 본문 생성"""
        products_data = [f.to_dict() for f in features]
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": "Analyze these products and provide forecasts:\n\n"
                               + json.dumps(products_data, indent=2, ensure_ascii=False),
                },
            ],
            "tools": [FORECAST_TOOL],
            "tool_choice": {"type": "function", "function": {"name": TOOL_NAME}},
        }

    def classify(self, features: Sequence[SalesFeature]) -> List[Dict[str, Any]]:
        payload = self.build_payload(features)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.info(f"[AI] 예측 요청: model={self.model} products={len(features)}")
        try:
            resp = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[AI] 게이트웨이 요청 실패: {e}")
            raise UpstreamError(f"AI 서비스 요청 실패: {e}") from e

        if resp.status_code == 429:
            logger.warning("[AI] 요청 빈도 제한 (429)")
            raise RateLimitedError()
        if resp.status_code == 402:
            logger.warning("[AI] 크레딧 소진 (402)")
            raise QuotaExceededError()
        if not 200 <= resp.status_code < 300:
            logger.error(f"[AI] 게이트웨이 오류: status={resp.status_code} body={resp.text[:500]}")
            raise UpstreamError(f"AI 서비스 오류 (status={resp.status_code})")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError("AI 응답이 JSON이 아닙니다") from e

        return parse_tool_call_forecasts(data)


def parse_tool_call_forecasts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """chat completions 응답에서 tool call 인자의 forecasts 목록 추출

    Raises:
        UpstreamError: tool call 없음 / 인자 JSON 손상 / forecasts 가 목록 아님
    """
    try:
        tool_call = data["choices"][0]["message"]["tool_calls"][0]
        arguments = tool_call["function"]["arguments"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamError("AI 응답에 구조화 결과(tool call)가 없습니다") from e

    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise UpstreamError("AI 구조화 결과를 해석할 수 없습니다") from e

    if not isinstance(arguments, dict):
        raise UpstreamError("AI 구조화 결과 형식이 올바르지 않습니다")

    forecasts = arguments.get("forecasts")
    if not isinstance(forecasts, list):
        raise UpstreamError("AI 구조화 결과에 forecasts 목록이 없습니다")

    return forecasts
