from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

FRAME_COLUMNS = [
    "YearIndex",
    "Age",
    "UserBaseAnnual",
    "UserBonusAnnual",
    "UserObservedNetPayMonthly",
    "PartnerBaseAnnual",
    "PartnerBonusAnnual",
    "PartnerObservedNetPayMonthly",
    "LifestyleMonthly",
    "HousingMonthly",
]


@dataclass(frozen=True)
class PersonYearInputs:
    base_annual: float
    bonus_annual: float
    observed_base_net_pay_monthly: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"baseAnnual": self.base_annual, "bonusAnnual": self.bonus_annual}
        if self.observed_base_net_pay_monthly is not None:
            payload["observedBaseNetPayMonthly"] = self.observed_base_net_pay_monthly
        return payload


@dataclass(frozen=True)
class YearInputs:
    """Materialized inputs for one projection year, handed to the projection engine."""

    year_index: int
    age: int
    user: PersonYearInputs
    lifestyle_monthly: float
    housing_monthly: float
    partner: Optional[PersonYearInputs] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "yearIndex": self.year_index,
            "age": self.age,
            "user": self.user.to_dict(),
            "lifestyleMonthly": self.lifestyle_monthly,
            "housingMonthly": self.housing_monthly,
        }
        if self.partner is not None:
            payload["partner"] = self.partner.to_dict()
        return payload


def year_inputs_to_frame(rows: Sequence[YearInputs]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    records: List[Dict[str, Any]] = []
    for row in rows:
        partner = row.partner
        records.append(
            {
                "YearIndex": row.year_index,
                "Age": row.age,
                "UserBaseAnnual": row.user.base_annual,
                "UserBonusAnnual": row.user.bonus_annual,
                "UserObservedNetPayMonthly": row.user.observed_base_net_pay_monthly,
                "PartnerBaseAnnual": partner.base_annual if partner else None,
                "PartnerBonusAnnual": partner.bonus_annual if partner else None,
                "PartnerObservedNetPayMonthly": partner.observed_base_net_pay_monthly if partner else None,
                "LifestyleMonthly": row.lifestyle_monthly,
                "HousingMonthly": row.housing_monthly,
            }
        )
    return pd.DataFrame(records, columns=FRAME_COLUMNS)
