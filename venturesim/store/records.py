from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import time
import uuid

PERMISSIONS = ("view", "edit")


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass
class SimulationRecord:
    id: str
    user_id: str
    business_model: str
    parameters: Dict[str, Any]
    results: Dict[str, Any]  # rounded metrics snapshot (AggregateMetrics.to_record)
    profile: Dict[str, Any] = field(default_factory=dict)  # revenueMultiplier, riskFactor
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TemplateRecord:
    id: str
    user_id: str
    template_name: str
    business_model: str
    parameters: Dict[str, Any]
    description: str = ""
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScenarioRecord:
    id: str
    simulation_id: str
    scenario_name: str
    parameters: Dict[str, Any]
    description: str = ""
    results: Optional[Dict[str, Any]] = None
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VersionRecord:
    id: str
    simulation_id: str
    version_number: int
    parameters: Dict[str, Any]
    results: Dict[str, Any]
    created_by: str
    notes: Optional[str] = None
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ShareRecord:
    id: str
    simulation_id: str
    shared_by: str
    shared_with_email: str
    permission: str = "view"  # view|edit
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ABTestRecord:
    id: str
    user_id: str
    test_name: str
    business_model: str
    base_parameters: Dict[str, Any]
    variations: List[Dict[str, Any]]
    profile: Dict[str, Any] = field(default_factory=dict)
    status: str = "running"
    results: Optional[Dict[str, Any]] = None
    created_at: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
