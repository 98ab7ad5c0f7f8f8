"""Apply targeted overrides to a rule-spec tree without touching the original.

Each override is appended to its component's list by rebuilding only the
nodes on the path from the root to that component; every other subtree is
shared with the input tree.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Sequence, Tuple

from ..data_model import ComponentSpec, RuleSpecInputs, TargetedOverride
from ..errors import StructuralError

logger = logging.getLogger(__name__)

# target key -> (attribute path from the root, list attribute on the leaf)
TARGET_PATHS: Dict[str, Tuple[Tuple[str, ...], str]] = {
    "income.user.base": (("income", "user", "base"), "overrides"),
    "income.user.bonus": (("income", "user", "bonus"), "overrides"),
    "income.partner.base": (("income", "partner", "base"), "overrides"),
    "income.partner.bonus": (("income", "partner", "bonus"), "overrides"),
    "income.user.base.growthPct": (("income", "user", "base"), "growth_overrides"),
    "income.user.bonus.growthPct": (("income", "user", "bonus"), "growth_overrides"),
    "income.partner.base.growthPct": (("income", "partner", "base"), "growth_overrides"),
    "income.partner.bonus.growthPct": (("income", "partner", "bonus"), "growth_overrides"),
    "income.user.observedBaseNetPayMonthly": (("income", "user"), "observed_base_net_pay_monthly"),
    "income.partner.observedBaseNetPayMonthly": (("income", "partner"), "observed_base_net_pay_monthly"),
    "spend.lifestyle": (("spend", "lifestyle_monthly"), "overrides"),
    "spend.housing": (("spend", "housing_monthly"), "overrides"),
}


def _append_at(node: Any, path: Tuple[str, ...], list_attr: str, item: Any) -> Any:
    if not path:
        return replace(node, **{list_attr: getattr(node, list_attr) + (item,)})
    head, rest = path[0], path[1:]
    child = getattr(node, head)
    if child is None:
        raise StructuralError(f"Override target path is missing '{head}'.")
    return replace(node, **{head: _append_at(child, rest, list_attr, item)})


def _leaf(specs: RuleSpecInputs, path: Tuple[str, ...]) -> Any:
    node: Any = specs
    for attr in path:
        node = getattr(node, attr)
        if node is None:
            raise StructuralError(f"Override target path is missing '{attr}'.")
    return node


def _payload(specs: RuleSpecInputs, op: TargetedOverride, path: Tuple[str, ...]) -> Any:
    if op.is_growth_target:
        if op.kind != "set":
            raise StructuralError(
                f"Growth rate target {op.target} only accepts 'set' (got {op.kind!r})."
            )
        leaf = _leaf(specs, path)
        if isinstance(leaf, ComponentSpec) and not leaf.growth.is_pct:
            raise StructuralError(f"Growth rate target {op.target} names a flat-growth component.")
        if op.to_age is not None:
            logger.debug("Ignoring toAge on growth override %s; growth overrides run to the end.", op.target)
        return op.to_growth_override()
    if op.is_observed_target and op.kind != "set":
        raise StructuralError(f"Observed pay target {op.target} only accepts 'set' (got {op.kind!r}).")
    return op.to_override()


def apply_overrides(specs: RuleSpecInputs, ops: Sequence[TargetedOverride]) -> RuleSpecInputs:
    """Return a new tree with every override appended to its target, in order.

    The batch is all-or-nothing: the first invalid override raises and the
    caller keeps the untouched input tree.
    """
    next_specs = specs
    for op in ops:
        if op.target not in TARGET_PATHS:
            raise StructuralError(f"Unknown override target: {op.target!r}.")
        if op.is_partner_scoped and not next_specs.partner_enabled:
            raise StructuralError("Cannot apply partner override: partner is not enabled.")
        path, list_attr = TARGET_PATHS[op.target]
        item = _payload(next_specs, op, path)
        next_specs = _append_at(next_specs, path, list_attr, item)
    if ops:
        logger.debug("Applied %d override(s) to rule-spec inputs.", len(ops))
    return next_specs
