from __future__ import annotations
from dataclasses import fields
from typing import Any, Callable, Dict, List, Optional, Type
import json
import logging
import threading
from pathlib import Path

from venturesim.store.records import (
    PERMISSIONS,
    ABTestRecord,
    ScenarioRecord,
    ShareRecord,
    SimulationRecord,
    TemplateRecord,
    VersionRecord,
    new_id,
    now_iso,
)

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type] = {
    "simulations": SimulationRecord,
    "templates": TemplateRecord,
    "scenarios": ScenarioRecord,
    "versions": VersionRecord,
    "shares": ShareRecord,
    "ab_tests": ABTestRecord,
}


def _from_dict(cls: Type, data: Dict[str, Any]):
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


class SimulationStore:
    """Thread-safe record store for simulations and their auxiliary records.

    Records live in insertion order per collection; listings return newest
    first. When a root directory is given, every mutation rewrites
    `<root>/<collection>.json`.
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root).resolve() if root is not None else None
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Any]] = {name: {} for name in COLLECTIONS}

    # persistence

    @classmethod
    def load(cls, root: str | Path) -> "SimulationStore":
        store = cls(root)
        for name, rec_cls in COLLECTIONS.items():
            path = store.root / f"{name}.json"
            if not path.exists():
                continue
            for item in json.loads(path.read_text()):
                rec = _from_dict(rec_cls, item)
                store._data[name][rec.id] = rec
        logger.info(f"loaded store from {store.root}")
        return store

    def _persist(self, name: str) -> None:
        if self.root is None:
            return
        self.root.mkdir(parents=True, exist_ok=True)
        body = [r.to_dict() for r in self._data[name].values()]
        (self.root / f"{name}.json").write_text(json.dumps(body, indent=2))

    def _newest_first(self, name: str, pred: Callable[[Any], bool]) -> List[Any]:
        return [r for r in reversed(list(self._data[name].values())) if pred(r)]

    def _require_simulation(self, simulation_id: str) -> SimulationRecord:
        sim = self._data["simulations"].get(simulation_id)
        if sim is None:
            raise KeyError(simulation_id)
        return sim

    # simulations

    def create_simulation(self, user_id: str, business_model: str,
                          parameters: Dict[str, Any], results: Dict[str, Any],
                          profile: Optional[Dict[str, Any]] = None) -> SimulationRecord:
        rec = SimulationRecord(id=new_id("s"), user_id=user_id, business_model=business_model,
                               parameters=dict(parameters), results=dict(results), profile=dict(profile or {}))
        with self._lock:
            self._data["simulations"][rec.id] = rec
            self._persist("simulations")
        logger.info(f"created simulation {rec.id} ({business_model}) for {user_id}")
        return rec

    def get_simulation(self, simulation_id: str) -> Optional[SimulationRecord]:
        with self._lock:
            return self._data["simulations"].get(simulation_id)

    def get_simulations(self, ids: List[str]) -> List[SimulationRecord]:
        with self._lock:
            return [self._data["simulations"][i] for i in ids if i in self._data["simulations"]]

    def list_simulations(self, user_id: Optional[str] = None) -> List[SimulationRecord]:
        with self._lock:
            return self._newest_first("simulations", lambda r: user_id is None or r.user_id == user_id)

    def update_simulation(self, simulation_id: str, parameters: Dict[str, Any], results: Dict[str, Any],
                          created_by: str, notes: Optional[str] = None) -> SimulationRecord:
        """Snapshot the current state as a new version, then overwrite it."""
        with self._lock:
            sim = self._require_simulation(simulation_id)
            self._add_version(sim, created_by, notes)
            sim.parameters = dict(parameters)
            sim.results = dict(results)
            sim.updated_at = now_iso()
            self._persist("simulations")
            return sim

    def delete_simulation(self, simulation_id: str) -> bool:
        with self._lock:
            if self._data["simulations"].pop(simulation_id, None) is None:
                return False
            for name in ("scenarios", "versions", "shares"):
                coll = self._data[name]
                for rid in [rid for rid, r in coll.items() if r.simulation_id == simulation_id]:
                    del coll[rid]
                self._persist(name)
            self._persist("simulations")
        logger.info(f"deleted simulation {simulation_id}")
        return True

    # versions

    def _add_version(self, sim: SimulationRecord, created_by: str, notes: Optional[str]) -> VersionRecord:
        numbers = [v.version_number for v in self._data["versions"].values() if v.simulation_id == sim.id]
        ver = VersionRecord(id=new_id("v"), simulation_id=sim.id, version_number=max(numbers, default=0) + 1,
                            parameters=dict(sim.parameters), results=dict(sim.results),
                            created_by=created_by, notes=notes)
        self._data["versions"][ver.id] = ver
        self._persist("versions")
        return ver

    def snapshot_version(self, simulation_id: str, created_by: str, notes: Optional[str] = None) -> VersionRecord:
        with self._lock:
            return self._add_version(self._require_simulation(simulation_id), created_by, notes)

    def list_versions(self, simulation_id: str) -> List[VersionRecord]:
        with self._lock:
            out = [v for v in self._data["versions"].values() if v.simulation_id == simulation_id]
        return sorted(out, key=lambda v: v.version_number, reverse=True)

    def restore_version(self, simulation_id: str, version_number: int) -> SimulationRecord:
        with self._lock:
            sim = self._require_simulation(simulation_id)
            match = [v for v in self._data["versions"].values()
                     if v.simulation_id == simulation_id and v.version_number == version_number]
            if not match:
                raise KeyError(f"{simulation_id}#{version_number}")
            sim.parameters = dict(match[0].parameters)
            sim.results = dict(match[0].results)
            sim.updated_at = now_iso()
            self._persist("simulations")
            return sim

    # templates

    def save_template(self, user_id: str, template_name: str, business_model: str,
                      parameters: Dict[str, Any], description: str = "") -> TemplateRecord:
        if not (template_name or "").strip():
            raise ValueError("template name is required")
        rec = TemplateRecord(id=new_id("t"), user_id=user_id, template_name=template_name.strip(),
                             business_model=business_model, parameters=dict(parameters),
                             description=description or "")
        with self._lock:
            self._data["templates"][rec.id] = rec
            self._persist("templates")
        return rec

    def list_templates(self, user_id: str, business_model: Optional[str] = None) -> List[TemplateRecord]:
        with self._lock:
            return self._newest_first("templates", lambda r: r.user_id == user_id and (
                business_model is None or r.business_model == business_model))

    def delete_template(self, template_id: str) -> bool:
        with self._lock:
            if self._data["templates"].pop(template_id, None) is None:
                return False
            self._persist("templates")
            return True

    # scenarios

    def save_scenario(self, simulation_id: str, scenario_name: str, parameters: Dict[str, Any],
                      description: str = "", results: Optional[Dict[str, Any]] = None) -> ScenarioRecord:
        if not (scenario_name or "").strip():
            raise ValueError("scenario name is required")
        rec = ScenarioRecord(id=new_id("sc"), simulation_id=simulation_id, scenario_name=scenario_name.strip(),
                             parameters=dict(parameters), description=description or "", results=results)
        with self._lock:
            self._require_simulation(simulation_id)
            self._data["scenarios"][rec.id] = rec
            self._persist("scenarios")
        return rec

    def list_scenarios(self, simulation_id: str) -> List[ScenarioRecord]:
        with self._lock:
            return self._newest_first("scenarios", lambda r: r.simulation_id == simulation_id)

    # shares

    def add_share(self, simulation_id: str, shared_by: str, email: str, permission: str = "view") -> ShareRecord:
        if permission not in PERMISSIONS:
            raise ValueError(f"permission must be one of {', '.join(PERMISSIONS)}")
        if "@" not in (email or ""):
            raise ValueError("a valid email is required")
        rec = ShareRecord(id=new_id("sh"), simulation_id=simulation_id, shared_by=shared_by,
                          shared_with_email=email.strip(), permission=permission)
        with self._lock:
            self._require_simulation(simulation_id)
            self._data["shares"][rec.id] = rec
            self._persist("shares")
        logger.info(f"shared {simulation_id} with {rec.shared_with_email} ({permission})")
        return rec

    def list_shares(self, simulation_id: str) -> List[ShareRecord]:
        with self._lock:
            return [r for r in self._data["shares"].values() if r.simulation_id == simulation_id]

    def remove_share(self, share_id: str, simulation_id: Optional[str] = None) -> bool:
        """Remove a share; with simulation_id, only when the share belongs to it."""
        with self._lock:
            share = self._data["shares"].get(share_id)
            if share is None or (simulation_id is not None and share.simulation_id != simulation_id):
                return False
            del self._data["shares"][share_id]
            self._persist("shares")
            return True

    # A/B tests

    def create_ab_test(self, user_id: str, test_name: str, business_model: str,
                       base_parameters: Dict[str, Any], variations: List[Dict[str, Any]],
                       profile: Optional[Dict[str, Any]] = None) -> ABTestRecord:
        if not (test_name or "").strip():
            raise ValueError("test name is required")
        rec = ABTestRecord(id=new_id("ab"), user_id=user_id, test_name=test_name.strip(),
                           business_model=business_model, base_parameters=dict(base_parameters),
                           variations=list(variations), profile=dict(profile or {}))
        with self._lock:
            self._data["ab_tests"][rec.id] = rec
            self._persist("ab_tests")
        return rec

    def get_ab_test(self, test_id: str) -> Optional[ABTestRecord]:
        with self._lock:
            return self._data["ab_tests"].get(test_id)
