from __future__ import annotations
from enum import Enum
from typing import Optional

from venturesim.projection.engine import AggregateMetrics


class Viability(str, Enum):
    HIGHLY_VIABLE = "Highly Viable"
    VIABLE = "Viable"
    HIGH_RISK = "High Risk"


def classify_values(roi: float, break_even_year: Optional[int]) -> Viability:
    """ROI > 100 and break-even <= 5: highly viable; ROI > 50 and <= 7: viable.

    A break-even that was never reached is always high risk.
    """
    if break_even_year is None:
        return Viability.HIGH_RISK
    if roi > 100 and break_even_year <= 5:
        return Viability.HIGHLY_VIABLE
    if roi > 50 and break_even_year <= 7:
        return Viability.VIABLE
    return Viability.HIGH_RISK


def classify(metrics: AggregateMetrics) -> Viability:
    return classify_values(metrics.roi, metrics.break_even_year)
