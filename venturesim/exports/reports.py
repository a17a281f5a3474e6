from __future__ import annotations
from typing import Dict, Any, List

from venturesim.projection.engine import AggregateMetrics, ProjectionPoint


def _money(v: float) -> str:
    return f"${v / 1_000_000:,.1f}M"


def parameters_md(parameters: Dict[str, Any], warnings: List[str] | None = None) -> str:
    lines = ["# Parameters", ""]
    for k, v in parameters.items():
        lines.append(f"- {k}: {v}")
    if warnings:
        lines.append("\n## Warnings")
        for w in warnings:
            lines.append(f"- {w}")
    return "\n".join(lines) + "\n"


def break_even_text(metrics: AggregateMetrics) -> str:
    if metrics.break_even_year is None:
        return "not reached within horizon"
    return f"Year {metrics.break_even_year}"


def simulation_report_md(title: str, parameters: Dict[str, Any], points: List[ProjectionPoint],
                         metrics: AggregateMetrics, viability: str) -> str:
    lines = [f"# {title} - Simulation Report", "", f"**Viability:** {viability}", "", "## Key Metrics", ""]
    lines.append(f"- Total revenue: {_money(metrics.total_revenue)}")
    lines.append(f"- Total cost: {_money(metrics.total_cost)}")
    lines.append(f"- Net profit: {_money(metrics.net_profit)}")
    lines.append(f"- ROI: {metrics.roi:.1f}%")
    lines.append(f"- Profit margin: {metrics.profit_margin:.1f}%")
    lines.append(f"- Break-even: {break_even_text(metrics)}")
    lines += ["", "## Parameters", ""]
    for k, v in parameters.items():
        lines.append(f"- {k}: {v}")
    lines += ["", "## Projection", "", "| Period | Revenue | Costs | Profit | Cumulative | Share |",
              "|---|---:|---:|---:|---:|---:|"]
    for p in points:
        lines.append(f"| {p.label} | {p.revenue} | {p.costs} | {p.profit} | {p.cumulative_profit} | {p.market_share} |")
    return "\n".join(lines) + "\n"
