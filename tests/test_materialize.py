import math

import pytest

from planlife.data_model import Override, TargetedOverride, year_inputs_to_frame
from planlife.data_model.year_inputs import FRAME_COLUMNS
from planlife.engine import apply_overrides, derive_rule_spec_inputs, materialize_year_inputs, resolve_observed_value
from planlife.engine.materialize import assert_length
from planlife.errors import NumericError, ShapeError


def test_one_row_per_year_with_matching_index(plan):
    rows = materialize_year_inputs(derive_rule_spec_inputs(plan))

    assert [row.year_index for row in rows] == [0, 1, 2, 3]
    assert [row.age for row in rows] == [30, 31, 32, 33]


def test_baseline_values(plan):
    rows = materialize_year_inputs(derive_rule_spec_inputs(plan))

    assert rows[0].user.base_annual == pytest.approx(100_000)
    assert rows[1].user.base_annual == pytest.approx(105_000)
    assert rows[3].user.bonus_annual == pytest.approx(20_000 * 1.05**3)
    assert all(row.lifestyle_monthly == 3_000 for row in rows)
    assert all(row.housing_monthly == 2_000 for row in rows)
    assert all(row.partner is None for row in rows)
    assert all(row.user.observed_base_net_pay_monthly is None for row in rows)


def test_partner_rows_present_when_enabled(make_plan):
    rows = materialize_year_inputs(derive_rule_spec_inputs(make_plan(has_partner=True)))

    assert rows[0].partner.base_annual == pytest.approx(80_000)
    assert rows[2].partner.base_annual == pytest.approx(80_000 * 1.03**2)
    assert rows[2].partner.bonus_annual == 0


def test_bonus_add_is_one_year_only(plan):
    specs = apply_overrides(
        derive_rule_spec_inputs(plan), [TargetedOverride("income.user.bonus", "add", 31, 10_000)]
    )

    rows = materialize_year_inputs(specs)

    assert rows[1].user.bonus_annual == pytest.approx(31_000)
    assert rows[2].user.bonus_annual == pytest.approx(22_050)


def test_observed_value_resolves_by_window(plan):
    specs = apply_overrides(
        derive_rule_spec_inputs(plan),
        [
            TargetedOverride("income.user.observedBaseNetPayMonthly", "set", 31, 6_000),
            TargetedOverride("income.user.observedBaseNetPayMonthly", "set", 32, 6_500, 32),
        ],
    )

    rows = materialize_year_inputs(specs)

    assert [row.user.observed_base_net_pay_monthly for row in rows] == [None, 6_000, 6_500, 6_000]
    # Observed pay never feeds the gross base series.
    assert rows[1].user.base_annual == pytest.approx(105_000)


def test_resolve_observed_value_last_entry_wins():
    overrides = [Override("set", 35, 7_000), Override("set", 30, 5_000)]

    assert resolve_observed_value(overrides, 0, 30) == 5_000
    assert resolve_observed_value(overrides, 6, 30) == 5_000
    assert resolve_observed_value([], 3, 30) is None


def test_negative_observed_value_raises(plan):
    specs = apply_overrides(
        derive_rule_spec_inputs(plan),
        [TargetedOverride("income.user.observedBaseNetPayMonthly", "set", 31, -1)],
    )

    with pytest.raises(NumericError):
        materialize_year_inputs(specs)


def test_non_finite_observed_value_raises(plan):
    specs = apply_overrides(
        derive_rule_spec_inputs(plan),
        [TargetedOverride("income.user.observedBaseNetPayMonthly", "set", 31, math.nan)],
    )

    with pytest.raises(NumericError):
        materialize_year_inputs(specs)


def test_assert_length():
    assert_length("lifestyle", [1.0, 2.0], 2)
    with pytest.raises(ShapeError, match="lifestyle must have length 3"):
        assert_length("lifestyle", [1.0, 2.0], 3)


def test_rows_serialize_with_camel_case_keys(make_plan):
    rows = materialize_year_inputs(derive_rule_spec_inputs(make_plan(has_partner=True)))

    payload = rows[0].to_dict()

    assert payload["yearIndex"] == 0
    assert payload["age"] == 30
    assert payload["user"]["baseAnnual"] == 100_000
    assert "partner" in payload
    assert payload["lifestyleMonthly"] == 3_000


def test_year_inputs_to_frame(plan):
    rows = materialize_year_inputs(derive_rule_spec_inputs(plan))

    frame = year_inputs_to_frame(rows)

    assert list(frame.columns) == list(FRAME_COLUMNS)
    assert len(frame) == 4
    assert frame["UserBaseAnnual"].iloc[1] == pytest.approx(105_000)
    assert frame["HousingMonthly"].tolist() == [2_000, 2_000, 2_000, 2_000]


def test_empty_frame_keeps_columns():
    frame = year_inputs_to_frame([])

    assert frame.empty
    assert list(frame.columns) == list(FRAME_COLUMNS)
