"""저장된 예측의 위험도 정렬 / 집계"""

from typing import Any, Dict, List

from src.settings.constants import RISK_LEVELS, RISK_ORDER


def sort_by_risk(forecasts: List[Dict[str, Any]], key: str = "risk_level") -> List[Dict[str, Any]]:
    """critical → warning → healthy → 알 수 없음 순으로 정렬 (안정 정렬)"""
    return sorted(forecasts, key=lambda f: RISK_ORDER.get(f.get(key), len(RISK_ORDER)))


def summarize_risk(forecasts: List[Dict[str, Any]], key: str = "risk_level") -> Dict[str, int]:
    """위험도별 건수

    Returns:
        {"critical": n, "warning": n, "healthy": n, "total": n}
    """
    summary = {level: 0 for level in RISK_LEVELS}
    for f in forecasts:
        level = f.get(key)
        if level in summary:
            summary[level] += 1
    summary["total"] = len(forecasts)
    return summary
