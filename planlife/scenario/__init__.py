from .cards import (
    IncomeCardConfig,
    ScenarioCard,
    build_overrides_from_card_config,
    create_scenario_card,
    create_scenario_card_from_config,
    income_card_config_from_dict,
    scenario_card_from_dict,
)
from .life_events import (
    AgeBounds,
    LifeEvent,
    Mutation,
    build_overrides_from_life_event,
    build_overrides_from_life_events,
    life_event_from_dict,
)

__all__ = [
    "AgeBounds",
    "IncomeCardConfig",
    "LifeEvent",
    "Mutation",
    "ScenarioCard",
    "build_overrides_from_card_config",
    "build_overrides_from_life_event",
    "build_overrides_from_life_events",
    "create_scenario_card",
    "create_scenario_card_from_config",
    "income_card_config_from_dict",
    "life_event_from_dict",
    "scenario_card_from_dict",
]
