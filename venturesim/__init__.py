"""venturesim: business-scenario projections for orbital ventures.

- projection: parameters, deterministic cash-flow engine
- scenarios: presets, per-field adjustments, A/B variation ladder
- viability: ROI / break-even classification
- store, insights, exports, notify, api: application layer around the engine
"""
