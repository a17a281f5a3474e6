from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence


def safe_div(a: Any, b: Any) -> float:
    try:
        return float(a) / float(b) if b not in (0, None) else 0.0
    except (TypeError, ValueError, ZeroDivisionError):
        return 0.0


def result_value(record: Mapping[str, Any], key: str) -> float:
    """Numeric field from a simulation's stored results; missing or non-numeric reads as 0."""
    results = record.get("results") or {}
    try:
        return float(results.get(key) or 0)
    except (TypeError, ValueError):
        return 0.0


def top_performers(records: Sequence[Mapping[str, Any]], n: int = 3) -> List[Mapping[str, Any]]:
    return sorted(records, key=lambda r: result_value(r, "roi"), reverse=True)[:n]


def is_milestone(record: Mapping[str, Any]) -> bool:
    roi = result_value(record, "roi")
    margin = result_value(record, "profit_margin")
    break_even = result_value(record, "break_even_year")
    return roi >= 100 or margin >= 30 or (0 < break_even <= 3)


def milestones(records: Sequence[Mapping[str, Any]], n: int = 3) -> List[Mapping[str, Any]]:
    return [r for r in records if is_milestone(r)][:n]


def model_performance(records: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    grouped: Dict[str, List[float]] = {}
    for r in records:
        grouped.setdefault(str(r.get("business_model") or ""), []).append(result_value(r, "roi"))
    return [
        {"business_model": model, "count": len(rois), "avg_roi": round(safe_div(sum(rois), len(rois)))}
        for model, rois in grouped.items()
    ]


def dashboard_summary(records: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    if not records:
        return {"count": 0, "avg_roi": 0.0, "total_net_profit": 0.0,
                "top_performers": [], "milestones": [], "by_model": []}
    return {
        "count": len(records),
        "avg_roi": safe_div(sum(result_value(r, "roi") for r in records), len(records)),
        "total_net_profit": sum(result_value(r, "net_profit") for r in records),
        "top_performers": [r.get("id") for r in top_performers(records)],
        "milestones": [r.get("id") for r in milestones(records)],
        "by_model": model_performance(records),
    }
