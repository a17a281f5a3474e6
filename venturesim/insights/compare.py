from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence

from venturesim.insights.kpi import result_value, safe_div


def _short(name: Any, width: int = 20) -> str:
    return str(name or "")[:width]


def compare(records: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """Side-by-side comparison of at least two stored simulations.

    - metrics: ROI, margin and net profit (thousands) per simulation
    - radar: one row per metric with Sim1..SimN columns
    - parameters: the first simulation's parameter keys, one value per simulation
    """
    if len(records) < 2:
        raise ValueError("at least 2 simulations are required to compare")

    metrics = [
        {
            "id": r.get("id"),
            "name": _short(r.get("business_model")),
            "roi": result_value(r, "roi"),
            "profit_margin": result_value(r, "profit_margin"),
            "net_profit_k": result_value(r, "net_profit") / 1000,
        }
        for r in records
    ]

    def radar_row(label: str, fn) -> Dict[str, Any]:
        row: Dict[str, Any] = {"metric": label}
        for i, r in enumerate(records, start=1):
            row[f"Sim{i}"] = fn(r)
        return row

    radar = [
        radar_row("ROI", lambda r: result_value(r, "roi")),
        radar_row("Profit Margin", lambda r: result_value(r, "profit_margin")),
        radar_row("Revenue (K)", lambda r: result_value(r, "total_revenue") / 1000),
        radar_row("Efficiency", lambda r: safe_div(result_value(r, "net_profit"),
                                                   result_value(r, "total_costs") or 1) * 100),
    ]

    first_params = records[0].get("parameters") or {}
    parameters: List[Dict[str, Any]] = [
        {"parameter": key, "values": [(r.get("parameters") or {}).get(key) for r in records]}
        for key in first_params.keys()
    ]
    return {"metrics": metrics, "radar": radar, "parameters": parameters}
