from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
import io

SCHEMAS = {
    "projection": [
        "period", "label", "revenue", "costs", "profit", "cumulative_profit", "market_share"
    ],
    "metrics": [
        "simulation_id", "business_model", "total_revenue", "total_costs", "net_profit", "roi",
        "profit_margin", "break_even_year", "viability"
    ],
    "comparison": [
        "id", "name", "roi", "profit_margin", "net_profit_k"
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def write_projection(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["projection"])


def write_metrics(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["metrics"])


def write_comparison(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["comparison"])
