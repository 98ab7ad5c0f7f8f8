"""Single forward pass from a component spec to one value per timeline year.

Year i depends only on the recurring value of year i-1 and the growth rate
active at i, then the overrides that act at i. Nothing is saved and restored
between years, so a change never snaps back and never freezes the series flat.

With ``non_recurring_adds`` (bonuses) the ``add`` overrides stay out of the
recurring chain: they are summed per year and added to that year's output
only.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from ..data_model import ComponentSpec, Override, Timeline, year_index_from_age
from ..errors import NumericError, StructuralError

# (override, first index, last index or None for open-ended)
Window = Tuple[Override, int, Optional[int]]


def _require_finite(value: float, message: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise NumericError(message)
    return value


def _require_non_negative(value: float, message: str) -> float:
    _require_finite(value, message)
    if value < 0:
        raise NumericError(message)
    return value


def growth_rate_by_index(spec: ComponentSpec, timeline: Timeline) -> List[float]:
    """Active growth rate per index. Growth overrides replace the baseline; they never stack."""
    if spec.growth_overrides and not spec.growth.is_pct:
        raise StructuralError("Growth rate overrides only apply to percentage-growth components.")
    ordered = sorted(spec.growth_overrides, key=lambda go: go.from_age)
    for go in ordered:
        _require_finite(go.value, "Growth override rate must be finite.")
    rates: List[float] = []
    for age in timeline.ages():
        rate = spec.growth.annual_pct if spec.growth.is_pct else 0.0
        for go in ordered:
            if go.from_age <= age:
                rate = go.value
        rates.append(rate)
    return rates


def order_overrides(overrides: Sequence[Override]) -> List[Override]:
    """fromAge ascending; bounded before open-ended; toAge ascending; then insertion order."""
    return sorted(
        overrides,
        key=lambda op: (op.from_age, op.to_age is None, op.to_age if op.to_age is not None else 0),
    )


def _window(op: Override, timeline: Timeline) -> Window:
    first = year_index_from_age(timeline, op.from_age)
    if op.kind in ("set", "add", "mult"):
        # Anchors: to_age is not consulted, so it may lie past the horizon.
        return op, first, first
    if op.kind == "cap":
        last = year_index_from_age(timeline, op.to_age) if op.to_age is not None else None
        return op, first, last
    raise StructuralError(f"Unknown override kind: {op.kind!r}.")


def _applies(window: Window, index: int) -> bool:
    _, first, last = window
    if index < first:
        return False
    return last is None or index <= last


def apply_override(op: Override, value: float) -> float:
    _require_finite(op.value, f"{op.kind} override value must be finite.")
    if op.kind == "set":
        if op.value < 0:
            raise NumericError("Set override value must be >= 0.")
        return op.value
    if op.kind == "add":
        return _require_non_negative(value + op.value, "Add override resulted in a negative value.")
    if op.kind == "mult":
        if op.value <= 0:
            raise NumericError("Mult override value must be > 0.")
        return _require_non_negative(value * op.value, "Mult override resulted in a negative value.")
    if op.kind == "cap":
        return _require_non_negative(min(value, op.value), "Cap override resulted in a negative value.")
    raise StructuralError(f"Unknown override kind: {op.kind!r}.")


def _grow(value: float, spec: ComponentSpec, rate: float) -> float:
    if spec.growth.is_pct:
        grown = value * (1.0 + rate)
    else:
        grown = value + spec.growth.annual_amount
    return _require_non_negative(grown, "Growth drove the value negative or non-finite.")


def build_series(spec: ComponentSpec, timeline: Timeline, non_recurring_adds: bool = False) -> List[float]:
    _require_finite(spec.start_value, "startValue must be finite.")
    if spec.growth.is_pct:
        _require_finite(spec.growth.annual_pct, "Growth annualPct must be finite.")
    else:
        _require_finite(spec.growth.annual_amount, "Growth annualAmount must be finite.")

    windows = [_window(op, timeline) for op in order_overrides(spec.overrides)]
    if non_recurring_adds:
        recurring = [w for w in windows if w[0].kind != "add"]
        adds = [w for w in windows if w[0].kind == "add"]
    else:
        recurring, adds = windows, []
    growth = growth_rate_by_index(spec, timeline)

    out: List[float] = []
    value = spec.start_value
    for idx in range(timeline.length):
        if idx > 0:
            value = _grow(value, spec, growth[idx])
        for window in recurring:
            if _applies(window, idx):
                value = apply_override(window[0], value)

        add_sum = 0.0
        for window in adds:
            if _applies(window, idx):
                add_sum += _require_finite(window[0].value, "Add override value must be finite.")
        # add_sum is output-only; `value` carries into next year's growth untouched.
        out.append(_require_non_negative(value + add_sum, "Add override resulted in a negative value."))
    return out
