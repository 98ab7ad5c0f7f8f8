from __future__ import annotations

from ..data_model import (
    ComponentSpec,
    GrowthRule,
    IncomeSpecs,
    Person,
    PersonIncomeSpecs,
    PlanState,
    RuleSpecInputs,
    SpendSpecs,
    make_timeline,
)


def _person_specs(person: Person) -> PersonIncomeSpecs:
    growth = GrowthRule.pct(person.income.income_growth_rate)
    return PersonIncomeSpecs(
        base=ComponentSpec(start_value=person.income.base_annual, growth=growth),
        bonus=ComponentSpec(start_value=person.income.starting_bonus(), growth=growth),
    )


def derive_rule_spec_inputs(plan: PlanState) -> RuleSpecInputs:
    """Fresh baseline spec tree for one computation.

    Base and bonus compound at the person's income growth rate; lifestyle and
    housing spend stay flat (0% growth) unless overridden.
    """
    partner_enabled = plan.partner_enabled
    income = IncomeSpecs(
        user=_person_specs(plan.user),
        partner=_person_specs(plan.partner) if partner_enabled and plan.partner is not None else None,
    )
    spend = SpendSpecs(
        lifestyle_monthly=ComponentSpec(start_value=plan.expenses.lifestyle_total(), growth=GrowthRule.pct(0.0)),
        housing_monthly=ComponentSpec(start_value=plan.housing.monthly_cost(), growth=GrowthRule.pct(0.0)),
    )
    return RuleSpecInputs(
        timeline=make_timeline(plan.start_age, plan.end_age),
        partner_enabled=partner_enabled,
        income=income,
        spend=spend,
    )
