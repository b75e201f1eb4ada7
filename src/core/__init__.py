# core 패키지 - 재고 예측 예외
from .forecast_errors import (
    ForecastError,
    InvalidRequestError,
    UnauthorizedError,
    ForbiddenError,
    QuotaExceededError,
    RateLimitedError,
    UpstreamError,
    ForecastConfigError,
    PersistenceError,
)
