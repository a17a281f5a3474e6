"""Exports & reporting: CSV writers and Markdown reports.

- writers.py: CSV emitters with fixed column schemas
- reports.py: parameters and simulation report Markdown
- bundle.py: per-simulation artifact set and zip packaging
"""
