from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import logging
import math

from venturesim.projection.parameters import (
    BusinessModelProfile,
    SimulationParameters,
    coerce_number,
    coerce_years,
    parameters_from_dict,
)

logger = logging.getLogger(__name__)

MAINTENANCE_SHARE = 0.3   # share of launch cost recurring after period 0
COST_DECAY = 0.95         # 5% operational efficiency gain per period


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round .5 away from the floor, matching the dashboard display (not banker's rounding).

    Non-finite input rounds to 0.
    """
    scale = 10 ** ndigits
    shifted = value * scale + 0.5
    if not math.isfinite(shifted):
        return 0.0
    return math.floor(shifted) / scale


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _pow(base: float, t: int) -> float:
    try:
        return base ** t
    except OverflowError:
        return math.inf


def safe_ratio(num: float, den: float) -> float:
    """num / den * 100, defined as 0 when den is 0 or the ratio is not finite."""
    if den == 0:
        return 0.0
    return coerce_number(num / den * 100.0)


@dataclass(frozen=True)
class ProjectionPoint:
    period: int
    label: str
    revenue: int
    costs: int
    profit: int
    cumulative_profit: int
    market_share: float  # penetration fraction, 2 decimals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "label": self.label,
            "revenue": self.revenue,
            "costs": self.costs,
            "profit": self.profit,
            "cumulative_profit": self.cumulative_profit,
            "market_share": self.market_share,
        }


@dataclass(frozen=True)
class AggregateMetrics:
    total_revenue: float
    total_cost: float
    net_profit: float
    roi: float
    profit_margin: float
    break_even_year: Optional[int] = None  # None: not reached within the horizon

    @property
    def break_even_reached(self) -> bool:
        return self.break_even_year is not None

    @property
    def break_even_compat(self) -> int:
        """Stored-record form: 0 doubles as 'not reached'."""
        return self.break_even_year if self.break_even_year is not None else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_revenue": self.total_revenue,
            "total_cost": self.total_cost,
            "net_profit": self.net_profit,
            "roi": self.roi,
            "profit_margin": self.profit_margin,
            "break_even_year": self.break_even_year,
        }

    def to_record(self) -> Dict[str, Any]:
        """Rounded snapshot in the shape stored alongside simulations."""
        return {
            "total_revenue": int(round_half_up(self.total_revenue)),
            "total_costs": int(round_half_up(self.total_cost)),
            "net_profit": int(round_half_up(self.net_profit)),
            "roi": round_half_up(self.roi, 1),
            "profit_margin": round_half_up(self.profit_margin, 1),
            "break_even_year": self.break_even_compat,
        }


def metrics_from_record(record: Mapping[str, Any] | None) -> AggregateMetrics:
    """Rebuild metrics from a stored results record.

    Stored records carry the 0-means-unset break-even; it is read back as
    reached only when cumulative profit (net_profit) is positive.
    """
    r = record or {}
    total_revenue = coerce_number(r.get("total_revenue", r.get("totalRevenue")))
    total_cost = coerce_number(r.get("total_costs", r.get("total_cost", r.get("totalCost"))))
    net_profit = coerce_number(r.get("net_profit", r.get("netProfit")))
    be_raw = r.get("break_even_year", r.get("breakEvenYear"))
    be = int(coerce_number(be_raw))
    if be == 0 and net_profit <= 0:
        break_even: Optional[int] = None
    else:
        break_even = be
    return AggregateMetrics(
        total_revenue=total_revenue,
        total_cost=total_cost,
        net_profit=net_profit,
        roi=coerce_number(r.get("roi")),
        profit_margin=coerce_number(r.get("profit_margin", r.get("profitMargin"))),
        break_even_year=break_even,
    )


ParametersLike = Union[SimulationParameters, Mapping[str, Any]]


def project(
    parameters: ParametersLike,
    profile: BusinessModelProfile,
    compound_growth: bool = True,
    period_label: str = "Year",
) -> Tuple[List[ProjectionPoint], AggregateMetrics]:
    """Project revenue, costs and profit for periods 0..years inclusive.

    Per period t:
    - penetration = share * (1 - e^(-growth * t / 100))
    - revenue = market_size * penetration * revenue_multiplier
                * (1 + growth/100)^t   (second growth term; off when compound_growth=False)
                * (1 - risk_factor/100)
    - costs = launch_cost (t == 0) or 30% of it (t > 0), plus operational_cost * 0.95^t

    Break-even is the first t whose cumulative profit is > 0, else None.
    ROI and margin are 0 when their denominator is 0. Mappings are coerced
    with parameters_from_dict, so malformed fields read as 0. The horizon is
    capped at MAX_YEARS, and any period value that overflows to a non-finite
    number reads as 0.
    """
    p = parameters if isinstance(parameters, SimulationParameters) else parameters_from_dict(parameters)
    multiplier = coerce_number(profile.revenue_multiplier)
    risk = coerce_number(profile.risk_factor)
    growth = coerce_number(p.growth_rate)
    share = coerce_number(p.market_share)
    market_size = coerce_number(p.market_size)
    launch_cost = coerce_number(p.launch_cost)
    operational_cost = coerce_number(p.operational_cost)
    horizon = coerce_years(p.years)

    points: List[ProjectionPoint] = []
    total_revenue = 0.0
    total_cost = 0.0
    break_even: Optional[int] = None

    for t in range(0, horizon + 1):
        penetration = coerce_number(share * (1.0 - _exp(-growth * t / 100.0)))
        revenue = market_size * penetration * multiplier
        if compound_growth:
            revenue = revenue * _pow(1.0 + growth / 100.0, t)
        revenue = coerce_number(revenue * (1.0 - risk / 100.0))

        launch_component = launch_cost if t == 0 else launch_cost * MAINTENANCE_SHARE
        cost = coerce_number(launch_component + operational_cost * COST_DECAY ** t)

        total_revenue = coerce_number(total_revenue + revenue)
        total_cost = coerce_number(total_cost + cost)
        net = coerce_number(revenue - cost)
        cumulative = coerce_number(total_revenue - total_cost)

        if break_even is None and cumulative > 0:
            break_even = t

        points.append(ProjectionPoint(
            period=t,
            label=f"{period_label} {t}",
            revenue=int(round_half_up(revenue)),
            costs=int(round_half_up(cost)),
            profit=int(round_half_up(net)),
            cumulative_profit=int(round_half_up(cumulative)),
            market_share=round_half_up(penetration, 2),
        ))

    net_profit = coerce_number(total_revenue - total_cost)
    metrics = AggregateMetrics(
        total_revenue=total_revenue,
        total_cost=total_cost,
        net_profit=net_profit,
        roi=safe_ratio(net_profit, total_cost),
        profit_margin=safe_ratio(net_profit, total_revenue),
        break_even_year=break_even,
    )
    logger.debug(f"projected {len(points)} periods for '{profile.title}': roi={metrics.roi:.2f}")
    return points, metrics
