from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple, Union
import logging

from venturesim.projection.engine import round_half_up
from venturesim.projection.parameters import (
    SCALABLE_FIELDS,
    SimulationParameters,
    canonical_field,
    coerce_number,
    coerce_years,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preset:
    name: str
    factor: float
    description: str


PRESETS: Tuple[Preset, ...] = (
    Preset(name="Best Case", factor=1.3, description="+30% all parameters"),
    Preset(name="Worst Case", factor=0.7, description="-30% all parameters"),
    Preset(name="Conservative", factor=0.9, description="-10% all parameters"),
)

# A/B ladder fields: initial investment, recurring revenue driver, production cost
LADDER_FIELDS: Tuple[str, ...] = ("launch_cost", "market_size", "operational_cost")
LADDER_STEP = 0.2

Rule = Union[float, int, Mapping[str, float]]


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    parameters: SimulationParameters

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "description": self.description, "parameters": self.parameters.to_dict()}


def _normalize(values: Dict[str, float]) -> SimulationParameters:
    return SimulationParameters(
        launch_cost=max(0.0, values["launch_cost"]),
        operational_cost=max(0.0, values["operational_cost"]),
        market_size=max(0.0, values["market_size"]),
        market_share=min(1.0, max(0.0, values["market_share"])),
        growth_rate=values["growth_rate"],
        years=max(1, coerce_years(round_half_up(values["years"]))),
    )


def _multipliers(rule: Rule) -> Dict[str, float]:
    if isinstance(rule, Mapping):
        out: Dict[str, float] = {}
        for key, mult in rule.items():
            name = canonical_field(key)
            if name is None:
                logger.debug(f"ignoring unknown scenario field '{key}'")
                continue
            out[name] = coerce_number(mult)
        return out
    factor = coerce_number(rule)
    return {name: factor for name in SCALABLE_FIELDS}


def derive_variant(base: SimulationParameters, rule: Rule) -> SimulationParameters:
    """Return a new parameter set with multipliers applied.

    A scalar rule scales every field; a mapping scales only the listed fields
    (camelCase or snake_case keys). The result is normalized to whole years
    (1 to MAX_YEARS), a share within 0..1 and non-negative costs/market size;
    products that overflow read as 0.
    """
    mults = _multipliers(rule)
    values = {name: coerce_number(coerce_number(getattr(base, name)) * mults.get(name, 1.0))
              for name in SCALABLE_FIELDS}
    return _normalize(values)


def get_preset(name: str) -> Preset:
    for preset in PRESETS:
        if preset.name.lower() == (name or "").strip().lower():
            return preset
    raise KeyError(name)


def apply_preset(base: SimulationParameters, name: str) -> SimulationParameters:
    return derive_variant(base, get_preset(name).factor)


def build_scenario(name: str, description: str, base: SimulationParameters, rule: Rule) -> Scenario:
    return Scenario(name=name, description=description or "", parameters=derive_variant(base, rule))


def variation_factor(i: int) -> float:
    # -20%, 0%, +20%, ...
    return 1 + (i * LADDER_STEP - LADDER_STEP)


def variation_name(i: int) -> str:
    return f"Variation {chr(65 + i)}"


def generate_variations(base: SimulationParameters, count: int) -> List[Scenario]:
    variations: List[Scenario] = []
    for i in range(count):
        factor = variation_factor(i)
        params = derive_variant(base, {name: factor for name in LADDER_FIELDS})
        variations.append(Scenario(
            name=variation_name(i),
            description=f"{factor:.1f}x initial investment, market size and production cost",
            parameters=params,
        ))
    return variations
