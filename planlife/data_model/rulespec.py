from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Tuple

from ..errors import StructuralError
from .timeline import Timeline

OverrideKind = Literal["set", "add", "mult", "cap"]
OVERRIDE_KINDS: Tuple[str, ...] = ("set", "add", "mult", "cap")

GrowthKind = Literal["pct", "flat"]

TargetKey = Literal[
    "income.user.base",
    "income.user.bonus",
    "income.partner.base",
    "income.partner.bonus",
    "income.user.base.growthPct",
    "income.user.bonus.growthPct",
    "income.partner.base.growthPct",
    "income.partner.bonus.growthPct",
    "income.user.observedBaseNetPayMonthly",
    "income.partner.observedBaseNetPayMonthly",
    "spend.lifestyle",
    "spend.housing",
]

TARGET_KEYS: Tuple[str, ...] = (
    "income.user.base",
    "income.user.bonus",
    "income.partner.base",
    "income.partner.bonus",
    "income.user.base.growthPct",
    "income.user.bonus.growthPct",
    "income.partner.base.growthPct",
    "income.partner.bonus.growthPct",
    "income.user.observedBaseNetPayMonthly",
    "income.partner.observedBaseNetPayMonthly",
    "spend.lifestyle",
    "spend.housing",
)
PARTNER_TARGETS = frozenset(key for key in TARGET_KEYS if key.startswith("income.partner."))
GROWTH_TARGETS = frozenset(key for key in TARGET_KEYS if key.endswith(".growthPct"))
OBSERVED_TARGETS = frozenset(key for key in TARGET_KEYS if key.endswith(".observedBaseNetPayMonthly"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class GrowthRule:
    """Growth absent overrides: a decimal annual rate or a flat dollar delta per year."""

    kind: GrowthKind = "pct"
    annual_pct: float = 0.0
    annual_amount: float = 0.0

    @classmethod
    def pct(cls, rate: float) -> "GrowthRule":
        return cls(kind="pct", annual_pct=rate)

    @classmethod
    def flat(cls, amount: float) -> "GrowthRule":
        return cls(kind="flat", annual_amount=amount)

    @property
    def is_pct(self) -> bool:
        return self.kind == "pct"


@dataclass(frozen=True)
class Override:
    kind: OverrideKind
    from_age: int
    value: float
    to_age: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in OVERRIDE_KINDS:
            raise StructuralError(f"Unknown override kind: {self.kind!r}.")
        if not _is_number(self.from_age):
            raise StructuralError(f"Override fromAge must be a number (got {self.from_age!r}).")
        if self.to_age is not None:
            if not _is_number(self.to_age):
                raise StructuralError(f"Override toAge must be a number (got {self.to_age!r}).")
            if self.to_age < self.from_age:
                raise StructuralError(
                    f"Override toAge ({self.to_age}) must be >= fromAge ({self.from_age})."
                )


@dataclass(frozen=True)
class GrowthOverride:
    """From this age onward use this rate (decimal, e.g. 0.04)."""

    from_age: int
    value: float


@dataclass(frozen=True)
class ComponentSpec:
    start_value: float
    growth: GrowthRule = field(default_factory=GrowthRule)
    overrides: Tuple[Override, ...] = ()
    growth_overrides: Tuple[GrowthOverride, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "overrides", tuple(self.overrides))
        object.__setattr__(self, "growth_overrides", tuple(self.growth_overrides))


@dataclass(frozen=True)
class PersonIncomeSpecs:
    base: ComponentSpec
    bonus: ComponentSpec
    # Reported monthly take-home from base pay; resolved per year, never compounded.
    observed_base_net_pay_monthly: Tuple[Override, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "observed_base_net_pay_monthly", tuple(self.observed_base_net_pay_monthly))


@dataclass(frozen=True)
class IncomeSpecs:
    user: PersonIncomeSpecs
    partner: Optional[PersonIncomeSpecs] = None


@dataclass(frozen=True)
class SpendSpecs:
    lifestyle_monthly: ComponentSpec
    housing_monthly: ComponentSpec


@dataclass(frozen=True)
class RuleSpecInputs:
    timeline: Timeline
    partner_enabled: bool
    income: IncomeSpecs
    spend: SpendSpecs

    def __post_init__(self) -> None:
        if self.partner_enabled and self.income.partner is None:
            raise StructuralError("Partner is enabled but partner income specs are missing.")
        if not self.partner_enabled and self.income.partner is not None:
            raise StructuralError("Partner income specs given while partner is disabled.")


@dataclass(frozen=True)
class TargetedOverride:
    target: str
    kind: str
    from_age: int
    value: float
    to_age: Optional[int] = None

    @property
    def is_partner_scoped(self) -> bool:
        return self.target in PARTNER_TARGETS

    @property
    def is_growth_target(self) -> bool:
        return self.target in GROWTH_TARGETS

    @property
    def is_observed_target(self) -> bool:
        return self.target in OBSERVED_TARGETS

    def to_override(self) -> Override:
        return Override(kind=self.kind, from_age=self.from_age, value=self.value, to_age=self.to_age)

    def to_growth_override(self) -> GrowthOverride:
        return GrowthOverride(from_age=self.from_age, value=self.value)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "target": self.target,
            "kind": self.kind,
            "fromAge": self.from_age,
            "value": self.value,
        }
        if self.to_age is not None:
            payload["toAge"] = self.to_age
        return payload


def targeted_override_from_dict(raw: Any) -> TargetedOverride:
    """Parse a `{target, kind, fromAge, toAge?, value}` payload.

    Only shape and type are checked here; value ranges are the caller's job and
    sign rules are enforced when the series is built.
    """
    if not isinstance(raw, dict):
        raise StructuralError(f"Override must be an object (got {type(raw).__name__}).")
    target = raw.get("target")
    if target not in TARGET_KEYS:
        raise StructuralError(f"Unknown override target: {target!r}.")
    kind = raw.get("kind")
    if kind not in OVERRIDE_KINDS:
        raise StructuralError(f"Unknown override kind: {kind!r}.")
    from_age = raw.get("fromAge", raw.get("from_age"))
    value = raw.get("value")
    to_age = raw.get("toAge", raw.get("to_age"))
    if not _is_number(from_age):
        raise StructuralError(f"Override fromAge must be a number (got {from_age!r}).")
    if not _is_number(value):
        raise StructuralError(f"Override value must be a number (got {value!r}).")
    if to_age is not None and not _is_number(to_age):
        raise StructuralError(f"Override toAge must be a number (got {to_age!r}).")
    if to_age is not None and to_age < from_age:
        raise StructuralError(f"Override toAge ({to_age}) must be >= fromAge ({from_age}).")
    return TargetedOverride(
        target=target,
        kind=kind,
        from_age=int(from_age) if float(from_age).is_integer() else from_age,
        value=float(value),
        to_age=None if to_age is None else (int(to_age) if float(to_age).is_integer() else to_age),
    )
