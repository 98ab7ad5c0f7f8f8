from .composer import (
    build_baseline_year_inputs,
    build_scenario_year_inputs_from_overrides,
    collect_active_overrides,
    compose_scenario_year_inputs,
)
from .derive import derive_rule_spec_inputs
from .materialize import materialize_year_inputs, resolve_observed_value
from .merge import apply_overrides
from .series import build_series, growth_rate_by_index, order_overrides

__all__ = [
    "apply_overrides",
    "build_baseline_year_inputs",
    "build_scenario_year_inputs_from_overrides",
    "build_series",
    "collect_active_overrides",
    "compose_scenario_year_inputs",
    "derive_rule_spec_inputs",
    "growth_rate_by_index",
    "materialize_year_inputs",
    "order_overrides",
    "resolve_observed_value",
]
