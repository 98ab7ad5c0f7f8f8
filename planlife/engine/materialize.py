from __future__ import annotations

import math
from typing import List, Optional, Sequence

from ..data_model import (
    Override,
    PersonIncomeSpecs,
    PersonYearInputs,
    RuleSpecInputs,
    Timeline,
    YearInputs,
)
from ..errors import NumericError, ShapeError
from .series import build_series


def assert_length(name: str, series: Sequence[float], expected: int) -> None:
    if len(series) != expected:
        raise ShapeError(f"{name} must have length {expected} (got {len(series)}).")


def resolve_observed_value(overrides: Sequence[Override], year_index: int, start_age: int) -> Optional[float]:
    """Last entry (in list order, unsorted) whose age window covers this year."""
    age = start_age + year_index
    value: Optional[float] = None
    for op in overrides:
        if op.from_age > age:
            continue
        if op.to_age is not None and age > op.to_age:
            continue
        value = op.value
    return value


def _person_series(specs: PersonIncomeSpecs, timeline: Timeline, label: str) -> dict:
    for op in specs.observed_base_net_pay_monthly:
        if not math.isfinite(op.value) or op.value < 0:
            raise NumericError(f"{label} observed net pay must be a finite value >= 0.")
    base = build_series(specs.base, timeline)
    bonus = build_series(specs.bonus, timeline, non_recurring_adds=True)
    assert_length(f"{label}Base", base, timeline.length)
    assert_length(f"{label}Bonus", bonus, timeline.length)
    return {"base": base, "bonus": bonus, "observed": specs.observed_base_net_pay_monthly}


def _person_year(series: dict, year_index: int, start_age: int) -> PersonYearInputs:
    return PersonYearInputs(
        base_annual=series["base"][year_index],
        bonus_annual=series["bonus"][year_index],
        observed_base_net_pay_monthly=resolve_observed_value(series["observed"], year_index, start_age),
    )


def materialize_year_inputs(specs: RuleSpecInputs) -> List[YearInputs]:
    """Dense per-year inputs: one record per timeline index, `year_index == index`."""
    timeline = specs.timeline
    n = timeline.length

    user = _person_series(specs.income.user, timeline, "user")
    partner = None
    if specs.partner_enabled and specs.income.partner is not None:
        partner = _person_series(specs.income.partner, timeline, "partner")
    lifestyle = build_series(specs.spend.lifestyle_monthly, timeline)
    housing = build_series(specs.spend.housing_monthly, timeline)
    assert_length("lifestyle", lifestyle, n)
    assert_length("housing", housing, n)

    rows: List[YearInputs] = []
    for year_index in range(n):
        rows.append(
            YearInputs(
                year_index=year_index,
                age=timeline.age_at(year_index),
                user=_person_year(user, year_index, timeline.start_age),
                partner=_person_year(partner, year_index, timeline.start_age) if partner else None,
                lifestyle_monthly=lifestyle[year_index],
                housing_monthly=housing[year_index],
            )
        )
    return rows
