from .forecast_classifier import (  # noqa: F401
    ChatCompletionForecastClassifier,
    ForecastClassifier,
    parse_tool_call_forecasts,
)
