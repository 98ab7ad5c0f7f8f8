"""Scenario = baseline + enabled cards (creation order) + draft (last).

The baseline spec tree is derived from the plan on every call and never
mutated, so callers may preview any number of scenarios side by side.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..data_model import PlanState, TargetedOverride, YearInputs
from ..scenario.cards import ScenarioCard
from .derive import derive_rule_spec_inputs
from .materialize import materialize_year_inputs
from .merge import apply_overrides

logger = logging.getLogger(__name__)


def build_baseline_year_inputs(plan: PlanState) -> List[YearInputs]:
    return materialize_year_inputs(derive_rule_spec_inputs(plan))


def build_scenario_year_inputs_from_overrides(
    plan: PlanState, ops: Sequence[TargetedOverride]
) -> List[YearInputs]:
    base = derive_rule_spec_inputs(plan)
    return materialize_year_inputs(apply_overrides(base, ops))


def collect_active_overrides(
    cards: Sequence[ScenarioCard], draft: Optional[Sequence[TargetedOverride]] = None
) -> List[TargetedOverride]:
    # Card id breaks createdAt ties so the caller's list order never matters.
    enabled = sorted((card for card in cards if card.enabled), key=lambda card: (card.created_at, card.id))
    overrides: List[TargetedOverride] = [op for card in enabled for op in card.overrides]
    if draft:
        overrides.extend(draft)
    return overrides


def compose_scenario_year_inputs(
    plan: PlanState,
    cards: Sequence[ScenarioCard],
    draft: Optional[Sequence[TargetedOverride]] = None,
) -> List[YearInputs]:
    """Materialized scenario inputs, or [] when no modifier is active.

    An empty result means "reuse the baseline output", not "change to nothing".
    """
    overrides = collect_active_overrides(cards, draft)
    if not overrides:
        logger.debug("No enabled cards and no draft; caller should reuse the baseline.")
        return []
    return build_scenario_year_inputs_from_overrides(plan, overrides)
