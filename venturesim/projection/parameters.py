from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple
import math

# snake_case field -> stored/wire camelCase key
FIELD_KEYS: Dict[str, str] = {
    "launch_cost": "launchCost",
    "operational_cost": "operationalCost",
    "market_size": "marketSize",
    "market_share": "marketShare",
    "growth_rate": "growthRate",
    "years": "years",
}

SCALABLE_FIELDS: Tuple[str, ...] = tuple(FIELD_KEYS.keys())

# longest projection horizon accepted; longer inputs are capped
MAX_YEARS = 100

_KEY_ALIASES: Dict[str, str] = {**{k: k for k in FIELD_KEYS}, **{v: k for k, v in FIELD_KEYS.items()}}


def canonical_field(key: str) -> str | None:
    """Map a camelCase or snake_case key to the snake_case field name (None if unknown)."""
    return _KEY_ALIASES.get(key)


@dataclass(frozen=True)
class SimulationParameters:
    launch_cost: float = 0.0        # one-time launch / initial cost
    operational_cost: float = 0.0   # recurring cost per period
    market_size: float = 0.0        # total addressable market per period
    market_share: float = 0.0       # target share, 0..1
    growth_rate: float = 0.0        # percent per period (35 == 35%)
    years: int = 0                  # horizon; periods 0..years inclusive

    def to_dict(self) -> Dict[str, Any]:
        return {FIELD_KEYS[name]: getattr(self, name) for name in SCALABLE_FIELDS}


@dataclass(frozen=True)
class BusinessModelProfile:
    title: str
    revenue_multiplier: float
    risk_factor: float  # percent haircut on revenue
    defaults: SimulationParameters = field(default_factory=SimulationParameters)
    description: str = ""
    viability: str = ""
    investment: str = ""
    payback: str = ""
    challenges: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "revenueMultiplier": self.revenue_multiplier,
            "riskFactor": self.risk_factor,
            "defaults": self.defaults.to_dict(),
            "description": self.description,
            "viability": self.viability,
            "investment": self.investment,
            "payback": self.payback,
            "challenges": list(self.challenges),
        }


def coerce_number(value: Any) -> float:
    """Numeric coercion used for partially-filled forms.

    None, '', NaN, +/-inf, booleans and unparsable values all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def coerce_years(value: Any) -> int:
    return min(MAX_YEARS, max(0, int(coerce_number(value))))


def parameters_from_dict(data: Mapping[str, Any] | None) -> SimulationParameters:
    """Build parameters from a camelCase or snake_case mapping.

    Missing or malformed fields fall back to zero; unknown keys are ignored,
    and anything that is not a mapping reads as empty. `years` is capped at
    MAX_YEARS.
    """
    values: Dict[str, Any] = {}
    if not isinstance(data, Mapping):
        data = {}
    for key, raw in data.items():
        name = canonical_field(key)
        if name is not None:
            values[name] = raw
    return SimulationParameters(
        launch_cost=coerce_number(values.get("launch_cost")),
        operational_cost=coerce_number(values.get("operational_cost")),
        market_size=coerce_number(values.get("market_size")),
        market_share=coerce_number(values.get("market_share")),
        growth_rate=coerce_number(values.get("growth_rate")),
        years=coerce_years(values.get("years")),
    )


def validate_parameters(p: SimulationParameters) -> None:
    if not (0.0 <= p.market_share <= 1.0):
        raise ValueError("market share must be between 0 and 1")
    if p.years < 1:
        raise ValueError("projection horizon must be at least 1 year")
    if p.years > MAX_YEARS:
        raise ValueError(f"projection horizon must be at most {MAX_YEARS} years")
    for name in ("launch_cost", "operational_cost", "market_size"):
        if getattr(p, name) < 0:
            raise ValueError(f"{FIELD_KEYS[name]} must not be negative")


def profile_from_dict(data: Mapping[str, Any]) -> BusinessModelProfile:
    return BusinessModelProfile(
        title=str(data.get("title") or ""),
        revenue_multiplier=coerce_number(data.get("revenueMultiplier", data.get("revenue_multiplier"))),
        risk_factor=coerce_number(data.get("riskFactor", data.get("risk_factor"))),
        defaults=parameters_from_dict(data.get("defaults")),
        description=str(data.get("description") or ""),
        viability=str(data.get("viability") or ""),
        investment=str(data.get("investment") or ""),
        payback=str(data.get("payback") or data.get("roi") or ""),
        challenges=tuple(data.get("challenges") or ()),
    )
