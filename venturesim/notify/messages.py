from __future__ import annotations
from dataclasses import dataclass, field
from html import escape
from typing import List, Tuple

from venturesim.config.env import get_mail_config
from venturesim.projection.engine import AggregateMetrics

ROI_MILESTONE = 100.0
MARGIN_MILESTONE = 30.0
BREAK_EVEN_MILESTONE = 3


@dataclass(frozen=True)
class EmailMessage:
    sender: str
    to: Tuple[str, ...]
    subject: str
    html: str
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {"from": self.sender, "to": list(self.to), "subject": self.subject, "html": self.html}


@dataclass(frozen=True)
class Milestone:
    name: str
    metric_type: str
    current_value: float
    threshold_value: float


def detect_milestones(metrics: AggregateMetrics) -> List[Milestone]:
    found: List[Milestone] = []
    if metrics.roi >= ROI_MILESTONE:
        found.append(Milestone("ROI above 100%", "roi", metrics.roi, ROI_MILESTONE))
    if metrics.profit_margin >= MARGIN_MILESTONE:
        found.append(Milestone("Profit margin above 30%", "profit_margin", metrics.profit_margin, MARGIN_MILESTONE))
    if metrics.break_even_year is not None and 0 < metrics.break_even_year <= BREAK_EVEN_MILESTONE:
        found.append(Milestone("Break-even within 3 years", "break_even_year",
                               float(metrics.break_even_year), float(BREAK_EVEN_MILESTONE)))
    return found


def build_share_invitation(email: str, simulation_id: str, permission: str, simulation_name: str) -> EmailMessage:
    cfg = get_mail_config()
    link = f"{cfg.app_url}/simulation/{simulation_id}"
    access = "view and edit" if permission == "edit" else "view"
    html = (
        f"<h1>You've been invited to a simulation</h1>"
        f"<p>You now have access to <strong>{escape(simulation_name)}</strong> ({access}).</p>"
        f"<p><a href=\"{escape(link)}\">Open simulation</a></p>"
    )
    return EmailMessage(sender=cfg.sender, to=(email,), tags=("share",),
                        subject=f"You've been invited to view \"{simulation_name}\"", html=html)


def _fmt_metric(metric_type: str, value: float) -> str:
    if metric_type == "break_even_year":
        return f"Year {int(value)}"
    return f"{value:.1f}%"


def build_milestone_notification(email: str, user_name: str, business_model: str, milestone: str,
                                 current_value: float, threshold_value: float, metric_type: str) -> EmailMessage:
    cfg = get_mail_config()
    html = (
        f"<h1>Congratulations {escape(user_name)}!</h1>"
        f"<p>Your <strong>{escape(business_model)}</strong> simulation reached a milestone: "
        f"{escape(milestone)}.</p>"
        f"<ul><li>Current: {_fmt_metric(metric_type, current_value)}</li>"
        f"<li>Threshold: {_fmt_metric(metric_type, threshold_value)}</li></ul>"
        f"<p><a href=\"{escape(cfg.app_url)}/dashboard\">View dashboard</a></p>"
    )
    return EmailMessage(sender=cfg.sender, to=(email,), tags=("milestone", metric_type),
                        subject=f"Milestone Achieved: {milestone}!", html=html)
