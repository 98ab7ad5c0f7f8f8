from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..data_model import PlanState, TargetedOverride, targeted_override_from_dict
from ..errors import StructuralError


@dataclass(frozen=True)
class IncomeCardConfig:
    """Stable card config; enough to regenerate the card's overrides."""

    start_age: int
    base_annual: float
    bonus_annual: float = 0.0
    growth_rate: Optional[float] = None
    # Monthly take-home from base pay only; drives cashflow, taxes still use gross.
    observed_base_net_pay_monthly: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": "income",
            "startAge": self.start_age,
            "baseAnnual": self.base_annual,
            "bonusAnnual": self.bonus_annual,
        }
        if self.growth_rate is not None:
            payload["growthRate"] = self.growth_rate
        if self.observed_base_net_pay_monthly is not None:
            payload["observedBaseNetPayMonthly"] = self.observed_base_net_pay_monthly
        return payload


@dataclass(frozen=True)
class ScenarioCard:
    id: str
    created_at: float
    title: str
    summary: str
    enabled: bool
    overrides: Tuple[TargetedOverride, ...] = ()
    config: Optional[IncomeCardConfig] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "overrides", tuple(self.overrides))

    def with_enabled(self, enabled: bool) -> "ScenarioCard":
        return replace(self, enabled=bool(enabled))

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "createdAt": self.created_at,
            "title": self.title,
            "summary": self.summary,
            "enabled": self.enabled,
            "overrides": [op.to_dict() for op in self.overrides],
        }
        if self.config is not None:
            payload["config"] = self.config.to_dict()
        return payload


def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def income_card_config_from_dict(raw: Any) -> Optional[IncomeCardConfig]:
    if not isinstance(raw, dict) or raw.get("type") != "income":
        return None
    start_age, base, bonus = raw.get("startAge"), raw.get("baseAnnual"), raw.get("bonusAnnual")
    if not (_finite(start_age) and _finite(base) and _finite(bonus)):
        return None
    growth = raw.get("growthRate")
    observed = raw.get("observedBaseNetPayMonthly")
    return IncomeCardConfig(
        start_age=int(start_age),
        base_annual=float(base),
        bonus_annual=float(bonus),
        growth_rate=float(growth) if _finite(growth) else None,
        observed_base_net_pay_monthly=float(observed) if _finite(observed) else None,
    )


def scenario_card_from_dict(raw: Any) -> ScenarioCard:
    if not isinstance(raw, dict):
        raise StructuralError("Scenario card must be an object.")
    card_id = raw.get("id")
    created_at = raw.get("createdAt")
    title, summary, enabled = raw.get("title"), raw.get("summary"), raw.get("enabled")
    overrides = raw.get("overrides")
    if not isinstance(card_id, str) or not card_id:
        raise StructuralError("Scenario card id must be a non-empty string.")
    if not _finite(created_at):
        raise StructuralError("Scenario card createdAt must be a finite number.")
    if not isinstance(title, str) or not isinstance(summary, str):
        raise StructuralError("Scenario card title and summary must be strings.")
    if not isinstance(enabled, bool):
        raise StructuralError("Scenario card enabled must be a boolean.")
    if not isinstance(overrides, list):
        raise StructuralError("Scenario card overrides must be a list.")
    return ScenarioCard(
        id=card_id,
        created_at=created_at,
        title=title or "Untitled change",
        summary=summary,
        enabled=enabled,
        overrides=tuple(targeted_override_from_dict(op) for op in overrides),
        config=income_card_config_from_dict(raw.get("config")),
    )


def create_scenario_card(
    title: str,
    summary: str,
    overrides: Sequence[TargetedOverride],
    config: Optional[IncomeCardConfig] = None,
    now_ms: Optional[float] = None,
) -> ScenarioCard:
    return ScenarioCard(
        id=str(uuid.uuid4()),
        created_at=now_ms if now_ms is not None else int(time.time() * 1000),
        title=title or "Untitled change",
        summary=summary or "",
        enabled=True,
        overrides=tuple(overrides),
        config=config,
    )


def build_overrides_from_card_config(plan: PlanState, config: IncomeCardConfig) -> List[TargetedOverride]:
    """Deterministic: the same config and plan bounds give the same overrides in the same order.

    Values anchor at start_age with a `set`; the series compounds forward from
    there, so the change persists for every later year.
    """
    start_age = max(config.start_age, plan.start_age)
    out = [
        TargetedOverride("income.user.base", "set", start_age, max(0.0, config.base_annual)),
        # Always emitted so a zero bonus never re-exposes the baseline bonus.
        TargetedOverride("income.user.bonus", "set", start_age, max(0.0, config.bonus_annual or 0.0)),
    ]
    if config.growth_rate is not None and math.isfinite(config.growth_rate):
        out.append(TargetedOverride("income.user.base.growthPct", "set", start_age, config.growth_rate))
        out.append(TargetedOverride("income.user.bonus.growthPct", "set", start_age, config.growth_rate))
    observed = config.observed_base_net_pay_monthly
    if observed is not None and math.isfinite(observed):
        out.append(
            TargetedOverride("income.user.observedBaseNetPayMonthly", "set", start_age, max(0.0, observed))
        )
    return out


def income_summary(config: IncomeCardConfig) -> str:
    text = (
        f"Base ${config.base_annual / 1000:.0f}k, bonus ${(config.bonus_annual or 0.0) / 1000:.0f}k "
        f"from age {config.start_age}"
    )
    if config.observed_base_net_pay_monthly is not None:
        text += (
            ". Using observed monthly take-home for cashflow; taxes still estimated from gross income."
            " Observed take-home excludes bonuses/equity."
        )
    return text


def create_scenario_card_from_config(
    plan: PlanState, config: IncomeCardConfig, now_ms: Optional[float] = None
) -> ScenarioCard:
    return create_scenario_card(
        title="Income change",
        summary=income_summary(config),
        overrides=build_overrides_from_card_config(plan, config),
        config=config,
        now_ms=now_ms,
    )
