"""What-if scenarios: preset multipliers, per-field adjustments and the A/B variation ladder."""
