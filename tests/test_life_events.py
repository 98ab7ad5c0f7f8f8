import pytest

from planlife.data_model import TargetedOverride
from planlife.engine import build_scenario_year_inputs_from_overrides
from planlife.errors import StructuralError
from planlife.scenario import (
    AgeBounds,
    LifeEvent,
    Mutation,
    build_overrides_from_life_event,
    build_overrides_from_life_events,
    life_event_from_dict,
)
from planlife.scenario.life_events import mutation_to_overrides


def test_one_time_bonus_is_single_year_add():
    ops = mutation_to_overrides(Mutation("income_one_time_bonus", age=31, amount=10_000))

    assert ops == [TargetedOverride("income.user.bonus", "add", 31, 10_000, 31)]


def test_set_range_for_both_people():
    ops = mutation_to_overrides(
        Mutation("income_set_range", applies_to="both", start_age=32, end_age=34, base_annual=0)
    )

    assert ops == [
        TargetedOverride("income.user.base", "set", 32, 0.0, 34),
        TargetedOverride("income.partner.base", "set", 32, 0.0, 34),
    ]


def test_cap_range_clamps_to_bounds():
    ops = mutation_to_overrides(
        Mutation("income_cap_range", start_age=25, end_age=80, base_cap_annual=150_000),
        AgeBounds(min_age=30, max_age=60),
    )

    assert ops == [TargetedOverride("income.user.base", "cap", 30, 150_000, 60)]


def test_clamp_range():
    assert AgeBounds(min_age=40, max_age=90).clamp_range(30, 35) == (40, 40)
    assert AgeBounds(max_age=60).clamp_range(55, None) == (55, None)
    # An end before the start becomes open-ended.
    assert AgeBounds().clamp_range(50, 45) == (50, None)


def test_growth_step_sets_every_growth_target():
    ops = mutation_to_overrides(Mutation("income_growth_step", applies_to="partner", age=40, growth_pct=4))

    assert [op.target for op in ops] == ["income.partner.base.growthPct", "income.partner.bonus.growthPct"]
    assert all(op.value == pytest.approx(0.04) for op in ops)


def test_milestone_sets_income_and_growth():
    ops = mutation_to_overrides(
        Mutation("income_milestone", age=35, base_annual=180_000, bonus_annual=30_000, growth_pct=3)
    )

    assert [op.target for op in ops] == [
        "income.user.base",
        "income.user.bonus",
        "income.user.base.growthPct",
        "income.user.bonus.growthPct",
    ]


def test_growth_range_drops_end_age():
    ops = mutation_to_overrides(
        Mutation("income_growth_range", start_age=33, end_age=36, base_growth_pct=1.5)
    )

    assert ops == [TargetedOverride("income.user.base.growthPct", "set", 33, pytest.approx(0.015))]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kind": "income_teleport", "age": 30},
        {"kind": "income_milestone"},
        {"kind": "income_set_range", "age": 30},
        {"kind": "income_milestone", "age": 30, "applies_to": "dog"},
        {"kind": "income_milestone", "age": "35"},
        {"kind": "income_set_range", "start_age": 31, "end_age": True},
    ],
)
def test_invalid_mutations_raise(kwargs):
    with pytest.raises(StructuralError):
        Mutation(**kwargs)


def test_disabled_events_are_skipped():
    grad_school = LifeEvent(
        id="grad",
        title="Grad school",
        mutations=(Mutation("income_set_range", start_age=31, end_age=32, base_annual=0, bonus_annual=0),),
    )
    windfall = LifeEvent(
        id="windfall",
        title="Windfall",
        enabled=False,
        mutations=(Mutation("income_one_time_bonus", age=31, amount=5_000),),
    )

    ops = build_overrides_from_life_events([grad_school, windfall])

    assert ops == build_overrides_from_life_event(grad_school)
    assert len(ops) == 2


def test_life_event_from_dict_feeds_the_composer(plan):
    event = life_event_from_dict(
        {
            "id": "sabbatical",
            "title": "Sabbatical",
            "summary": ["Unpaid year at 31"],
            "mutations": [
                {"kind": "income_set_range", "appliesTo": "user", "startAge": 31, "endAge": 31, "baseAnnual": 0},
                {"kind": "income_one_time_bonus", "age": 32, "amount": 7_500},
            ],
        }
    )

    rows = build_scenario_year_inputs_from_overrides(plan, build_overrides_from_life_event(event))

    assert event.summary == ("Unpaid year at 31",)
    assert rows[1].user.base_annual == 0
    assert rows[2].user.base_annual == 0
    assert rows[2].user.bonus_annual == pytest.approx(22_050 + 7_500)


def test_life_event_from_dict_requires_id():
    with pytest.raises(StructuralError):
        life_event_from_dict({"title": "No id"})


@pytest.mark.parametrize(
    "mutation",
    [
        {"kind": "income_one_time_bonus", "age": 32, "amount": "7500"},
        {"kind": "income_cap_range", "startAge": 31, "baseCapAnnual": [150_000]},
        {"kind": "income_growth_step", "age": 40, "growthPct": False},
    ],
)
def test_life_event_from_dict_rejects_non_numeric_fields(mutation):
    with pytest.raises(StructuralError, match="must be a number"):
        life_event_from_dict({"id": "bad", "mutations": [mutation]})
