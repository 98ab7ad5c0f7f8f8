"""Household what-if planner: deterministic per-year series with composable overrides."""
