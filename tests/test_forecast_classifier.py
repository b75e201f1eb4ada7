"""AI 분류기 (chat completions + tool call) 테스트"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from src.core.forecast_errors import (
    ForecastConfigError,
    QuotaExceededError,
    RateLimitedError,
    UpstreamError,
)
from src.domain.forecast.sales_features import SalesFeature
from src.infrastructure.ai.forecast_classifier import (
    TOOL_NAME,
    ChatCompletionForecastClassifier,
    parse_tool_call_forecasts,
)


# ── 픽스처 ──────────────────────────────────────────

@pytest.fixture
def features():
    return [
        SalesFeature(product_id="P1", name="우유", current_stock=15, min_stock=10,
                     total_sales_30_days=60, avg_daily_sales=2.0, days_until_stockout=7,
                     price=2500.0),
        SalesFeature(product_id="P2", name="두부", current_stock=50, min_stock=10,
                     total_sales_30_days=0, avg_daily_sales=0.0, days_until_stockout=None),
    ]


@pytest.fixture
def classifier():
    return ChatCompletionForecastClassifier(
        api_key="test-key", url="https://gateway.test/v1/chat/completions",
        model="test-model", timeout=5,
    )


def _response(status_code=200, body=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def _tool_call_body(arguments):
    return {
        "choices": [{
            "message": {
                "tool_calls": [{
                    "type": "function",
                    "function": {"name": TOOL_NAME, "arguments": arguments},
                }],
            },
        }],
    }


FORECAST_P1 = {
    "productId": "P1", "productName": "우유", "riskLevel": "warning",
    "daysUntilStockout": 7, "confidenceScore": 80, "recommendation": "이번 주 발주",
}


class TestPayload:
    """요청 본문"""

    def test_missing_api_key(self):
        with pytest.raises(ForecastConfigError):
            ChatCompletionForecastClassifier(api_key="")

    def test_forced_tool_choice(self, classifier, features):
        payload = classifier.build_payload(features)

        assert payload["model"] == "test-model"
        assert payload["tool_choice"] == {"type": "function", "function": {"name": TOOL_NAME}}
        assert payload["tools"][0]["function"]["name"] == TOOL_NAME
        assert payload["messages"][0]["role"] == "system"

    def test_products_serialized_in_user_message(self, classifier, features):
        content = classifier.build_payload(features)["messages"][1]["content"]
        products = json.loads(content.split("\n\n", 1)[1])

        assert products[0]["id"] == "P1"
        assert products[0]["avgDailySales"] == 2.0
        assert products[1]["daysUntilStockout"] is None

    def test_headers_and_timeout(self, classifier, features):
        body = _tool_call_body(json.dumps({"forecasts": []}))
        with patch("src.infrastructure.ai.forecast_classifier.requests.post",
                   return_value=_response(200, body)) as mock_post:
            classifier.classify(features)

        _, kwargs = mock_post.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["timeout"] == 5


class TestClassify:
    """응답 처리"""

    def test_success_returns_raw_entries(self, classifier, features):
        body = _tool_call_body(json.dumps({"forecasts": [FORECAST_P1]}))
        with patch("src.infrastructure.ai.forecast_classifier.requests.post",
                   return_value=_response(200, body)):
            result = classifier.classify(features)

        assert result == [FORECAST_P1]

    def test_arguments_as_object(self, classifier, features):
        body = _tool_call_body({"forecasts": [FORECAST_P1]})
        with patch("src.infrastructure.ai.forecast_classifier.requests.post",
                   return_value=_response(200, body)):
            assert classifier.classify(features) == [FORECAST_P1]

    @pytest.mark.parametrize("status, error", [
        (429, RateLimitedError),
        (402, QuotaExceededError),
        (500, UpstreamError),
        (400, UpstreamError),
    ])
    def test_status_mapping(self, classifier, features, status, error):
        with patch("src.infrastructure.ai.forecast_classifier.requests.post",
                   return_value=_response(status, {}, text="gateway says no")):
            with pytest.raises(error):
                classifier.classify(features)

    def test_network_error(self, classifier, features):
        with patch("src.infrastructure.ai.forecast_classifier.requests.post",
                   side_effect=requests.ConnectionError("boom")):
            with pytest.raises(UpstreamError):
                classifier.classify(features)

    def test_non_json_body(self, classifier, features):
        with patch("src.infrastructure.ai.forecast_classifier.requests.post",
                   return_value=_response(200, ValueError("not json"))):
            with pytest.raises(UpstreamError):
                classifier.classify(features)


class TestParseToolCall:
    """tool call 추출"""

    def test_no_tool_call(self):
        data = {"choices": [{"message": {"content": "plain text answer"}}]}
        with pytest.raises(UpstreamError):
            parse_tool_call_forecasts(data)

    def test_no_choices(self):
        with pytest.raises(UpstreamError):
            parse_tool_call_forecasts({"choices": []})

    def test_broken_arguments_json(self):
        with pytest.raises(UpstreamError):
            parse_tool_call_forecasts(_tool_call_body("{not json"))

    def test_forecasts_not_list(self):
        with pytest.raises(UpstreamError):
            parse_tool_call_forecasts(_tool_call_body(json.dumps({"forecasts": "none"})))

    def test_extra_entries_passed_through(self):
        entries = [FORECAST_P1, {"productId": "UNKNOWN", "riskLevel": "critical"}]
        assert parse_tool_call_forecasts(_tool_call_body(json.dumps({"forecasts": entries}))) == entries
