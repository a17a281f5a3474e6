"""Projection engine (pure computation).

- parameters.py: parameter/profile records, coercion and guardrails
- engine.py: period-by-period projection and aggregate metrics
"""
