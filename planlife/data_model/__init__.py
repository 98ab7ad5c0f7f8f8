from .plan import (
    ExpenseItem,
    Expenses,
    Housing,
    Income,
    Person,
    PlanState,
    plan_state_from_dict,
)
from .rulespec import (
    GROWTH_TARGETS,
    OBSERVED_TARGETS,
    OVERRIDE_KINDS,
    PARTNER_TARGETS,
    TARGET_KEYS,
    ComponentSpec,
    GrowthOverride,
    GrowthRule,
    IncomeSpecs,
    Override,
    PersonIncomeSpecs,
    RuleSpecInputs,
    SpendSpecs,
    TargetedOverride,
    targeted_override_from_dict,
)
from .timeline import Timeline, make_timeline, year_index_from_age
from .year_inputs import PersonYearInputs, YearInputs, year_inputs_to_frame

__all__ = [
    "GROWTH_TARGETS",
    "OBSERVED_TARGETS",
    "OVERRIDE_KINDS",
    "PARTNER_TARGETS",
    "TARGET_KEYS",
    "ComponentSpec",
    "ExpenseItem",
    "Expenses",
    "GrowthOverride",
    "GrowthRule",
    "Housing",
    "Income",
    "IncomeSpecs",
    "Override",
    "Person",
    "PersonIncomeSpecs",
    "PersonYearInputs",
    "PlanState",
    "RuleSpecInputs",
    "SpendSpecs",
    "TargetedOverride",
    "Timeline",
    "YearInputs",
    "make_timeline",
    "plan_state_from_dict",
    "targeted_override_from_dict",
    "year_index_from_age",
    "year_inputs_to_frame",
]
