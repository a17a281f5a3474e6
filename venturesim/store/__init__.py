"""Record store for simulations, templates, scenarios, versions, shares and A/B tests.

- records.py: record dataclasses
- registry.py: SimulationStore (in-process, optional JSON-on-disk persistence)
"""
from venturesim.store.registry import SimulationStore

__all__ = ["SimulationStore"]
