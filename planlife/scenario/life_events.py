"""Life-event mutations (grad school, raises, one-off bonuses...) as targeted overrides."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from ..data_model import TargetedOverride
from ..errors import StructuralError

AppliesTo = Literal["user", "partner", "both"]

MUTATION_KINDS = (
    "income_set_range",
    "income_growth_range",
    "income_milestone",
    "income_one_time_bonus",
    "income_cap_range",
    "income_growth_step",
)

GROWTH_PCT_TO_DECIMAL = 0.01

_AGE_FIELDS = ("age", "start_age", "end_age")
_AMOUNT_FIELDS = (
    "base_annual",
    "bonus_annual",
    "amount",
    "base_cap_annual",
    "bonus_cap_annual",
    "growth_pct",
    "base_growth_pct",
    "bonus_growth_pct",
)


@dataclass(frozen=True)
class Mutation:
    """One change inside a life event.

    Ages are plan ages; growth figures are percents (4 means 4%). Fields a
    kind does not use stay None.
    """

    kind: str
    applies_to: AppliesTo = "user"
    age: Optional[int] = None
    start_age: Optional[int] = None
    end_age: Optional[int] = None
    base_annual: Optional[float] = None
    bonus_annual: Optional[float] = None
    amount: Optional[float] = None
    base_cap_annual: Optional[float] = None
    bonus_cap_annual: Optional[float] = None
    growth_pct: Optional[float] = None
    base_growth_pct: Optional[float] = None
    bonus_growth_pct: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind not in MUTATION_KINDS:
            raise StructuralError(f"Unknown life event mutation: {self.kind!r}.")
        if self.applies_to not in ("user", "partner", "both"):
            raise StructuralError(f"Unknown appliesTo: {self.applies_to!r}.")
        required = "start_age" if self.kind.endswith("_range") else "age"
        if getattr(self, required) is None:
            raise StructuralError(f"{self.kind} needs '{required}'.")
        for name in _AGE_FIELDS + _AMOUNT_FIELDS:
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise StructuralError(f"{self.kind} field '{name}' must be a number (got {value!r}).")


@dataclass(frozen=True)
class LifeEvent:
    id: str
    title: str
    enabled: bool = True
    summary: Tuple[str, ...] = ()
    mutations: Tuple[Mutation, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AgeBounds:
    """Inclusive clamp for emitted ages; None leaves that side open."""

    min_age: Optional[int] = None
    max_age: Optional[int] = None

    def clamp(self, age: int) -> int:
        if self.min_age is not None:
            age = max(age, self.min_age)
        if self.max_age is not None:
            age = min(age, self.max_age)
        return age

    def clamp_range(self, start: int, end: Optional[int]) -> Tuple[int, Optional[int]]:
        from_age = self.clamp(start)
        if end is None:
            return from_age, None
        to_age = self.clamp(end)
        if to_age < from_age:
            return from_age, None
        return from_age, to_age


def _ok(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def _people(applies_to: AppliesTo) -> List[str]:
    if applies_to == "both":
        return ["user", "partner"]
    return [applies_to]


def _income_targets(applies_to: AppliesTo, part: str) -> List[str]:
    return [f"income.{who}.{part}" for who in _people(applies_to)]


def _growth_targets(applies_to: AppliesTo, part: Optional[str] = None) -> List[str]:
    parts = [part] if part else ["base", "bonus"]
    return [f"income.{who}.{p}.growthPct" for who in _people(applies_to) for p in parts]


def mutation_to_overrides(m: Mutation, bounds: Optional[AgeBounds] = None) -> List[TargetedOverride]:
    bounds = bounds or AgeBounds()
    out: List[TargetedOverride] = []

    if m.kind == "income_set_range":
        from_age, to_age = bounds.clamp_range(m.start_age, m.end_age)
        for part, amount in (("base", m.base_annual), ("bonus", m.bonus_annual)):
            if _ok(amount):
                for target in _income_targets(m.applies_to, part):
                    out.append(TargetedOverride(target, "set", from_age, max(0.0, amount), to_age))

    elif m.kind == "income_one_time_bonus":
        age = bounds.clamp(m.age)
        amount = m.amount if _ok(m.amount) else 0.0
        for target in _income_targets(m.applies_to, "bonus"):
            out.append(TargetedOverride(target, "add", age, amount, age))

    elif m.kind == "income_cap_range":
        from_age, to_age = bounds.clamp_range(m.start_age, m.end_age)
        for part, cap in (("base", m.base_cap_annual), ("bonus", m.bonus_cap_annual)):
            if _ok(cap):
                for target in _income_targets(m.applies_to, part):
                    out.append(TargetedOverride(target, "cap", from_age, max(0.0, cap), to_age))

    elif m.kind == "income_growth_step":
        age = bounds.clamp(m.age)
        rate = m.growth_pct * GROWTH_PCT_TO_DECIMAL if _ok(m.growth_pct) else 0.0
        for target in _growth_targets(m.applies_to):
            out.append(TargetedOverride(target, "set", age, rate))

    elif m.kind == "income_milestone":
        age = bounds.clamp(m.age)
        for part, amount in (("base", m.base_annual), ("bonus", m.bonus_annual)):
            if _ok(amount):
                for target in _income_targets(m.applies_to, part):
                    out.append(TargetedOverride(target, "set", age, max(0.0, amount)))
        if _ok(m.growth_pct):
            for target in _growth_targets(m.applies_to):
                out.append(TargetedOverride(target, "set", age, m.growth_pct * GROWTH_PCT_TO_DECIMAL))

    elif m.kind == "income_growth_range":
        # Growth overrides run from an age to the end, so the range end is dropped.
        from_age = bounds.clamp(m.start_age)
        for part, pct in (("base", m.base_growth_pct), ("bonus", m.bonus_growth_pct)):
            if _ok(pct):
                for target in _growth_targets(m.applies_to, part):
                    out.append(TargetedOverride(target, "set", from_age, pct * GROWTH_PCT_TO_DECIMAL))

    return out


def build_overrides_from_life_event(event: LifeEvent, bounds: Optional[AgeBounds] = None) -> List[TargetedOverride]:
    out: List[TargetedOverride] = []
    for mutation in event.mutations:
        out.extend(mutation_to_overrides(mutation, bounds))
    return out


def build_overrides_from_life_events(
    events: Sequence[LifeEvent], bounds: Optional[AgeBounds] = None
) -> List[TargetedOverride]:
    out: List[TargetedOverride] = []
    for event in events:
        if event.enabled:
            out.extend(build_overrides_from_life_event(event, bounds))
    return out


_MUTATION_FIELDS: Dict[str, str] = {
    "appliesTo": "applies_to",
    "age": "age",
    "startAge": "start_age",
    "endAge": "end_age",
    "baseAnnual": "base_annual",
    "bonusAnnual": "bonus_annual",
    "amount": "amount",
    "baseCapAnnual": "base_cap_annual",
    "bonusCapAnnual": "bonus_cap_annual",
    "growthPct": "growth_pct",
    "baseGrowthPct": "base_growth_pct",
    "bonusGrowthPct": "bonus_growth_pct",
}


def mutation_from_dict(raw: Any) -> Mutation:
    if not isinstance(raw, dict):
        raise StructuralError("Life event mutation must be an object.")
    kwargs: Dict[str, Any] = {"kind": raw.get("kind")}
    for key, attr in _MUTATION_FIELDS.items():
        if raw.get(key) is not None:
            kwargs[attr] = raw[key]
    return Mutation(**kwargs)


def life_event_from_dict(raw: Any) -> LifeEvent:
    if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
        raise StructuralError("Life event must be an object with a string id.")
    return LifeEvent(
        id=raw["id"],
        title=str(raw.get("title", "")),
        enabled=bool(raw.get("enabled", True)),
        summary=tuple(str(line) for line in raw.get("summary") or []),
        mutations=tuple(mutation_from_dict(m) for m in raw.get("mutations") or []),
    )
