"""
재고 예측 도메인 -- 판매 속도 계산 및 위험도 집계 순수 로직

Usage:
    from src.domain.forecast.sales_features import compute_sales_features
    from src.domain.forecast.risk_summary import summarize_risk
"""

from src.domain.forecast.sales_features import (  # noqa: F401
    SalesFeature,
    aggregate_sales,
    build_sales_feature,
    calc_days_until_stockout,
    compute_sales_features,
)
from src.domain.forecast.risk_summary import (  # noqa: F401
    sort_by_risk,
    summarize_risk,
)
