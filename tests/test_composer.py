from dataclasses import replace

import pytest

from planlife.data_model import TargetedOverride
from planlife.engine import (
    build_baseline_year_inputs,
    build_scenario_year_inputs_from_overrides,
    collect_active_overrides,
    compose_scenario_year_inputs,
    derive_rule_spec_inputs,
)
from planlife.errors import StructuralError
from planlife.scenario import create_scenario_card


def _card(overrides, created_at, card_id=None, enabled=True):
    card = create_scenario_card("card", "", overrides, now_ms=created_at)
    if card_id is not None:
        card = replace(card, id=card_id)
    return card.with_enabled(enabled)


def test_derive_baseline_spec_tree(make_plan):
    specs = derive_rule_spec_inputs(make_plan(has_partner=True))

    assert specs.timeline.start_age == 30
    assert specs.timeline.end_age == 33
    assert specs.partner_enabled is True
    assert specs.income.user.base.start_value == 100_000
    assert specs.income.user.base.growth.annual_pct == 0.05
    assert specs.income.user.bonus.start_value == 20_000
    assert specs.income.partner.bonus.start_value == 0
    assert specs.spend.lifestyle_monthly.growth.annual_pct == 0.0
    assert specs.spend.housing_monthly.start_value == 2_000


def test_baseline_without_bonus_is_zero(make_plan):
    rows = build_baseline_year_inputs(make_plan(has_bonus=False))

    assert all(row.user.bonus_annual == 0 for row in rows)


def test_no_active_modifiers_returns_empty(plan):
    disabled = _card([TargetedOverride("income.user.base", "set", 31, 1)], 1, enabled=False)

    assert compose_scenario_year_inputs(plan, []) == []
    assert compose_scenario_year_inputs(plan, [disabled], draft=[]) == []


def test_set_changes_the_year_and_compounds_after(plan):
    rows = build_scenario_year_inputs_from_overrides(
        plan, [TargetedOverride("income.user.base", "set", 32, 200_000)]
    )

    assert rows[1].user.base_annual == pytest.approx(105_000)
    assert rows[2].user.base_annual == pytest.approx(200_000)
    assert rows[3].user.base_annual == pytest.approx(210_000)
    assert rows[2].user.bonus_annual == pytest.approx(22_050)


def test_scenario_does_not_touch_baseline(plan):
    before = build_baseline_year_inputs(plan)
    compose_scenario_year_inputs(plan, [_card([TargetedOverride("spend.housing", "set", 31, 0)], 1)])

    assert build_baseline_year_inputs(plan) == before


def test_cards_apply_in_creation_order_then_draft(plan):
    late = _card([TargetedOverride("spend.lifestyle", "set", 31, 5_000)], created_at=200)
    early = _card([TargetedOverride("spend.lifestyle", "set", 31, 4_000)], created_at=100)
    draft = [TargetedOverride("spend.lifestyle", "set", 31, 4_500)]

    without_draft = compose_scenario_year_inputs(plan, [late, early])
    with_draft = compose_scenario_year_inputs(plan, [late, early], draft)

    assert without_draft[1].lifestyle_monthly == 5_000
    assert with_draft[1].lifestyle_monthly == 4_500


def test_created_at_ties_break_on_card_id(plan):
    a = _card([TargetedOverride("spend.housing", "set", 31, 1_000)], created_at=5, card_id="a")
    b = _card([TargetedOverride("spend.housing", "set", 31, 9_000)], created_at=5, card_id="b")

    assert collect_active_overrides([b, a]) == list(a.overrides) + list(b.overrides)
    assert compose_scenario_year_inputs(plan, [b, a])[1].housing_monthly == 9_000


def test_disabled_cards_are_skipped(plan):
    on = _card([TargetedOverride("spend.housing", "add", 31, 100)], created_at=1)
    off = _card([TargetedOverride("spend.housing", "add", 31, 10_000)], created_at=2, enabled=False)

    rows = compose_scenario_year_inputs(plan, [on, off])

    assert rows[1].housing_monthly == 2_100


def test_invalid_override_aborts_whole_scenario(plan):
    card = _card(
        [
            TargetedOverride("spend.housing", "set", 31, 2_500),
            TargetedOverride("income.partner.base", "set", 31, 1),
        ],
        created_at=1,
    )

    with pytest.raises(StructuralError):
        compose_scenario_year_inputs(plan, [card])


def test_card_input_order_does_not_matter(plan):
    first = _card([TargetedOverride("income.user.base", "mult", 31, 1.1)], created_at=1)
    second = _card([TargetedOverride("income.user.base", "set", 31, 90_000)], created_at=2)
    draft = [TargetedOverride("income.user.bonus", "add", 32, 1_000)]

    forward = compose_scenario_year_inputs(plan, [first, second], draft)
    backward = compose_scenario_year_inputs(plan, [second, first], draft)

    assert forward == backward
    assert forward[1].user.base_annual == 90_000
