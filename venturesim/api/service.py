from __future__ import annotations
from typing import Any, Dict, List, Mapping, Tuple
import logging

from venturesim.catalog import Catalog
from venturesim.config.env import parse_flag
from venturesim.exports.bundle import build_artifacts
from venturesim.insights.compare import compare
from venturesim.insights.kpi import dashboard_summary
from venturesim.notify.messages import build_milestone_notification, build_share_invitation, detect_milestones
from venturesim.projection.engine import AggregateMetrics, ProjectionPoint, metrics_from_record, project
from venturesim.projection.parameters import (
    BusinessModelProfile,
    SimulationParameters,
    coerce_number,
    parameters_from_dict,
    validate_parameters,
)
from venturesim.scenarios.variants import PRESETS, apply_preset, build_scenario, generate_variations
from venturesim.store.registry import SimulationStore
from venturesim.store.records import SimulationRecord
from venturesim.viability.classifier import classify

logger = logging.getLogger(__name__)

MIN_VARIATIONS = 2
MAX_VARIATIONS = 5


def resolve_profile(catalog: Catalog, payload: Mapping[str, Any]) -> BusinessModelProfile:
    """Profile from a catalog title (`businessModel`) or inline coefficients (`profile`)."""
    inline = payload.get("profile")
    title = payload.get("businessModel") or payload.get("business_model")
    title = str(title) if title is not None else None
    if isinstance(inline, Mapping):
        return BusinessModelProfile(
            title=str(inline.get("title") or title or "Custom"),
            revenue_multiplier=coerce_number(inline.get("revenueMultiplier", inline.get("revenue_multiplier"))),
            risk_factor=coerce_number(inline.get("riskFactor", inline.get("risk_factor"))),
        )
    profile = catalog.get(title)
    if profile is None:
        raise ValueError(f"unknown business model: {title!r}" if title else "businessModel is required")
    return profile


def profile_coefficients(profile: BusinessModelProfile) -> Dict[str, Any]:
    return {"title": profile.title, "revenueMultiplier": profile.revenue_multiplier,
            "riskFactor": profile.risk_factor}


def profile_for_record(catalog: Catalog, record) -> BusinessModelProfile:
    """Profile for a stored simulation or A/B test: saved coefficients first, catalog title otherwise."""
    if record.profile:
        return resolve_profile(catalog, {"profile": record.profile, "businessModel": record.business_model})
    return resolve_profile(catalog, {"businessModel": record.business_model})


def projection_payload(params: SimulationParameters, profile: BusinessModelProfile,
                       points: List[ProjectionPoint], metrics: AggregateMetrics) -> Dict[str, Any]:
    return {
        "businessModel": profile.title,
        "parameters": params.to_dict(),
        "points": [p.to_dict() for p in points],
        "metrics": metrics.to_dict(),
        "record": metrics.to_record(),
        "viability": classify(metrics).value,
    }


def run_projection(catalog: Catalog, payload: Mapping[str, Any], compound_growth: bool) -> Dict[str, Any]:
    """Live preview: coerce, project, classify. Malformed fields read as zero."""
    profile = resolve_profile(catalog, payload)
    params = parameters_from_dict(payload.get("parameters") or profile.defaults.to_dict())
    points, metrics = project(params, profile, compound_growth=_flag(payload, compound_growth))
    return projection_payload(params, profile, points, metrics)


def _flag(payload: Mapping[str, Any], default: bool) -> bool:
    return parse_flag(payload.get("compoundGrowth"), default)


def _validated(payload: Mapping[str, Any], profile: BusinessModelProfile) -> SimulationParameters:
    params = parameters_from_dict(payload.get("parameters") or profile.defaults.to_dict())
    validate_parameters(params)
    return params


def save_simulation(store: SimulationStore, notifier, catalog: Catalog, user_id: str,
                    payload: Mapping[str, Any], compound_growth: bool) -> Tuple[SimulationRecord, Dict[str, Any]]:
    profile = resolve_profile(catalog, payload)
    params = _validated(payload, profile)
    points, metrics = project(params, profile, compound_growth=_flag(payload, compound_growth))
    rec = store.create_simulation(user_id, profile.title, params.to_dict(), metrics.to_record(),
                                  profile=profile_coefficients(profile))
    email = str(payload.get("notifyEmail") or "").strip()
    if email:
        reached = detect_milestones(metrics)
        if reached:
            logger.info(f"simulation {rec.id} reached {len(reached)} milestone(s); notifying {email}")
        for m in reached:
            notifier.send(build_milestone_notification(
                email=email, user_name=str(payload.get("userName") or user_id), business_model=profile.title,
                milestone=m.name, current_value=m.current_value, threshold_value=m.threshold_value,
                metric_type=m.metric_type,
            ))
    return rec, projection_payload(params, profile, points, metrics)


def update_simulation(store: SimulationStore, catalog: Catalog, user_id: str, simulation_id: str,
                      payload: Mapping[str, Any], compound_growth: bool) -> SimulationRecord:
    rec = store.get_simulation(simulation_id)
    if rec is None:
        raise KeyError(simulation_id)
    profile = profile_for_record(catalog, rec)
    params = _validated(payload, profile)
    _, metrics = project(params, profile, compound_growth=_flag(payload, compound_growth))
    return store.update_simulation(simulation_id, params.to_dict(), metrics.to_record(),
                                   created_by=user_id, notes=payload.get("notes"))


def record_payload(rec: SimulationRecord) -> Dict[str, Any]:
    body = rec.to_dict()
    body["viability"] = classify(metrics_from_record(rec.results)).value
    return body


def reproject(catalog: Catalog, rec: SimulationRecord,
              compound_growth: bool) -> Tuple[List[ProjectionPoint], AggregateMetrics]:
    return project(parameters_from_dict(rec.parameters), profile_for_record(catalog, rec),
                   compound_growth=compound_growth)


def simulation_artifacts(catalog: Catalog, rec: SimulationRecord, compound_growth: bool) -> Dict[str, str]:
    points, metrics = reproject(catalog, rec, compound_growth)
    return build_artifacts(rec, points, metrics, classify(metrics).value)


# scenarios

def preview_preset(catalog: Catalog, rec: SimulationRecord, preset: str,
                   compound_growth: bool) -> Dict[str, Any]:
    profile = profile_for_record(catalog, rec)
    params = apply_preset(parameters_from_dict(rec.parameters), preset)
    points, metrics = project(params, profile, compound_growth=compound_growth)
    body = projection_payload(params, profile, points, metrics)
    body["preset"] = preset
    return body


def list_presets() -> List[Dict[str, Any]]:
    return [{"name": p.name, "factor": p.factor, "description": p.description} for p in PRESETS]


def save_scenario(store: SimulationStore, catalog: Catalog, rec: SimulationRecord,
                  payload: Mapping[str, Any], compound_growth: bool):
    adjustments = payload.get("adjustments") or {}
    if not isinstance(adjustments, Mapping):
        raise ValueError("adjustments must be an object of field -> multiplier")
    scenario = build_scenario(str(payload.get("scenarioName") or ""), str(payload.get("description") or ""),
                              parameters_from_dict(rec.parameters), adjustments)
    _, metrics = project(scenario.parameters, profile_for_record(catalog, rec), compound_growth=compound_growth)
    return store.save_scenario(rec.id, scenario.name, scenario.parameters.to_dict(),
                               description=scenario.description, results=metrics.to_record())


# shares

def share_simulation(store: SimulationStore, notifier, user_id: str, rec: SimulationRecord,
                     payload: Mapping[str, Any]):
    email = str(payload.get("email") or "").strip()
    permission = str(payload.get("permission") or "view")
    share = store.add_share(rec.id, user_id, email, permission)
    notifier.send(build_share_invitation(email, rec.id, permission, rec.business_model))
    return share


# A/B tests

def create_ab_test(store: SimulationStore, catalog: Catalog, user_id: str, payload: Mapping[str, Any]):
    profile = resolve_profile(catalog, payload)
    base = _validated(payload, profile)
    try:
        count = int(payload.get("numVariations", 3))
    except (TypeError, ValueError):
        raise ValueError("numVariations must be a whole number")
    if not (MIN_VARIATIONS <= count <= MAX_VARIATIONS):
        raise ValueError(f"numVariations must be between {MIN_VARIATIONS} and {MAX_VARIATIONS}")
    variations = [{"name": v.name, "parameters": v.parameters.to_dict()} for v in generate_variations(base, count)]
    return store.create_ab_test(user_id, str(payload.get("testName") or ""), profile.title,
                                base.to_dict(), variations, profile=profile_coefficients(profile))


def ab_test_payload(catalog: Catalog, test, compound_growth: bool) -> Dict[str, Any]:
    profile = profile_for_record(catalog, test)
    arms = []
    for v in test.variations:
        params = parameters_from_dict(v.get("parameters"))
        _, metrics = project(params, profile, compound_growth=compound_growth)
        arms.append({"name": v.get("name"), "parameters": params.to_dict(),
                     "record": metrics.to_record(), "viability": classify(metrics).value})
    body = test.to_dict()
    body["arms"] = arms
    return body


# comparison / dashboard

def compare_simulations(store: SimulationStore, ids: List[str]) -> Dict[str, Any]:
    records = [r.to_dict() for r in store.get_simulations(ids)]
    return compare(records)


def insights(store: SimulationStore, user_id: str) -> Dict[str, Any]:
    return dashboard_summary([r.to_dict() for r in store.list_simulations(user_id)])
