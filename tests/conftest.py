"""Shared test fixtures for planlife."""

import pytest

from planlife.config import Settings
from planlife.data_model import plan_state_from_dict


def _plan_payload(end_age=33, has_bonus=True, has_partner=False, growth=0.05):
    household = {
        "user": {
            "age": 30,
            "income": {
                "baseAnnual": 100_000,
                "hasBonus": has_bonus,
                "bonusAnnual": 20_000 if has_bonus else None,
                "incomeGrowthRate": growth,
            },
        },
        "hasPartner": has_partner,
        "housing": {"status": "rent", "monthlyRent": 2_000},
    }
    if has_partner:
        household["partner"] = {
            "age": 31,
            "income": {"baseAnnual": 80_000, "hasBonus": False, "incomeGrowthRate": 0.03},
        }
    return {
        "startAge": 30,
        "endAge": end_age,
        "household": household,
        "expenses": {"mode": "total", "lifestyleMonthly": 3_000},
    }


@pytest.fixture
def make_plan_payload():
    return _plan_payload


@pytest.fixture
def make_plan():
    def _make(**kwargs):
        return plan_state_from_dict(_plan_payload(**kwargs))

    return _make


@pytest.fixture
def plan(make_plan):
    return make_plan()


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=str(tmp_path / "user_data"))
