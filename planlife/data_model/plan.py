# data_model/plan.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from ..errors import NumericError, StructuralError

HOUSING_STATUSES = ("rent", "own")
EXPENSE_MODES = ("total", "itemized")


@dataclass(frozen=True)
class Income:
    base_annual: float
    income_growth_rate: float = 0.0
    has_bonus: bool = False
    bonus_annual: Optional[float] = None

    def starting_bonus(self) -> float:
        return (self.bonus_annual or 0.0) if self.has_bonus else 0.0


@dataclass(frozen=True)
class Person:
    age: int
    income: Income


@dataclass(frozen=True)
class Housing:
    status: Literal["rent", "own"] = "rent"
    monthly_rent: float = 0.0
    monthly_payment_piti: float = 0.0

    def monthly_cost(self) -> float:
        return self.monthly_rent if self.status == "rent" else self.monthly_payment_piti


@dataclass(frozen=True)
class ExpenseItem:
    label: str
    monthly_amount: float


@dataclass(frozen=True)
class Expenses:
    mode: Literal["total", "itemized"] = "total"
    lifestyle_monthly: float = 0.0
    items: List[ExpenseItem] = field(default_factory=list)

    def lifestyle_total(self) -> float:
        if self.mode == "total":
            return self.lifestyle_monthly
        return sum(item.monthly_amount for item in self.items)


@dataclass(frozen=True)
class PlanState:
    """Baseline household configuration; the source every computation derives from."""

    start_age: int
    end_age: int
    user: Person
    housing: Housing = field(default_factory=Housing)
    expenses: Expenses = field(default_factory=Expenses)
    has_partner: bool = False
    partner: Optional[Person] = None

    @property
    def partner_enabled(self) -> bool:
        return bool(self.has_partner and self.partner is not None)


def _number(payload: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    raw = payload.get(key, default)
    if raw is None:
        raise StructuralError(f"Missing required field '{key}'.")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise StructuralError(f"Field '{key}' must be a number (got {raw!r}).")
    value = float(raw)
    if not math.isfinite(value):
        raise NumericError(f"Field '{key}' must be finite.")
    return value


def _non_negative(payload: Dict[str, Any], key: str, label: str, default: Optional[float] = None) -> float:
    value = _number(payload, key, default)
    if value < 0:
        raise NumericError(f"{label} must be >= 0.")
    return value


def _age(payload: Dict[str, Any], key: str) -> Any:
    value = _number(payload, key)
    # Fractional ages are rejected later by the timeline.
    return int(value) if value.is_integer() else value


def _record(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise StructuralError(f"Field '{key}' must be an object.")
    return value


def _parse_person(raw: Dict[str, Any], label: str) -> Person:
    income_raw = _record(raw, "income")
    has_bonus = bool(income_raw.get("hasBonus", False))
    bonus = _non_negative(income_raw, "bonusAnnual", f"{label} bonus", default=0.0) if has_bonus else None
    income = Income(
        base_annual=_non_negative(income_raw, "baseAnnual", f"{label} income"),
        income_growth_rate=_number(income_raw, "incomeGrowthRate", default=0.0),
        has_bonus=has_bonus,
        bonus_annual=bonus,
    )
    age = int(_number(raw, "age", default=0))
    return Person(age=age, income=income)


def _parse_housing(raw: Dict[str, Any]) -> Housing:
    status = str(raw.get("status", "rent"))
    if status not in HOUSING_STATUSES:
        raise StructuralError(f"Housing status must be one of {HOUSING_STATUSES} (got {status!r}).")
    if status == "rent":
        return Housing(status="rent", monthly_rent=_non_negative(raw, "monthlyRent", "Housing (monthly)", default=0.0))
    return Housing(
        status="own",
        monthly_payment_piti=_non_negative(raw, "monthlyPaymentPITI", "Housing (monthly)", default=0.0),
    )


def _parse_expenses(raw: Dict[str, Any]) -> Expenses:
    mode = str(raw.get("mode", "total"))
    if mode not in EXPENSE_MODES:
        raise StructuralError(f"Expense mode must be one of {EXPENSE_MODES} (got {mode!r}).")
    if mode == "total":
        return Expenses(mode="total", lifestyle_monthly=_non_negative(raw, "lifestyleMonthly", "Lifestyle (monthly)"))
    items: List[ExpenseItem] = []
    for row in raw.get("items") or []:
        if not isinstance(row, dict):
            raise StructuralError("Expense items must be objects.")
        items.append(
            ExpenseItem(
                label=str(row.get("label", "")).strip() or "Expense",
                monthly_amount=_non_negative(row, "monthlyAmount", "Expense item (monthly)", default=0.0),
            )
        )
    return Expenses(mode="itemized", items=items)


def plan_state_from_dict(payload: Any) -> PlanState:
    """Build a PlanState from the camelCase JSON the planner front end stores."""
    if not isinstance(payload, dict):
        raise StructuralError("Plan must be an object.")
    household = _record(payload, "household")
    user = _parse_person(_record(household, "user"), "User")

    has_partner = bool(household.get("hasPartner", False))
    partner = None
    if has_partner:
        if not isinstance(household.get("partner"), dict):
            raise StructuralError("Partner details are required when hasPartner is true.")
        partner = _parse_person(household["partner"], "Partner")

    housing_raw = household.get("housing") or {}
    expenses_raw = payload.get("expenses") or {"mode": "total", "lifestyleMonthly": 0.0}
    if not isinstance(housing_raw, dict) or not isinstance(expenses_raw, dict):
        raise StructuralError("Housing and expenses must be objects.")

    return PlanState(
        start_age=_age(payload, "startAge"),
        end_age=_age(payload, "endAge"),
        user=user,
        housing=_parse_housing(housing_raw),
        expenses=_parse_expenses(expenses_raw),
        has_partner=has_partner,
        partner=partner,
    )
