# engine/state.py
import logging
from typing import Dict, List

from ..errors import StructuralError
from ..scenario.cards import ScenarioCard
from .storage import load_cards, load_plans, save_cards, save_plans

logger = logging.getLogger(__name__)


class ScenarioCardStore:
    def __init__(self, storage_path: str = "user_data/scenario_cards.json"):
        self.storage_path = storage_path
        self.cards: List[ScenarioCard] = load_cards(storage_path)

    def list(self) -> List[ScenarioCard]:
        return list(self.cards)

    def get(self, card_id: str) -> ScenarioCard:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise KeyError(card_id)

    def add(self, card: ScenarioCard) -> None:
        self.cards.append(card)
        self.cards.sort(key=lambda c: (c.created_at, c.id))
        self._save()
        logger.info("Added scenario card %s (%s).", card.id, card.title)

    def set_enabled(self, card_id: str, enabled: bool) -> ScenarioCard:
        updated = self.get(card_id).with_enabled(enabled)
        self.cards = [updated if c.id == card_id else c for c in self.cards]
        self._save()
        logger.info("Scenario card %s enabled=%s.", card_id, updated.enabled)
        return updated

    def delete(self, card_id: str) -> None:
        self.get(card_id)
        self.cards = [c for c in self.cards if c.id != card_id]
        self._save()
        logger.info("Deleted scenario card %s.", card_id)

    def clear(self) -> None:
        self.cards = []
        self._save()

    def _save(self) -> None:
        save_cards(self.storage_path, self.cards)


class PlanStore:
    """Named baseline plans, stored as the camelCase payloads the API receives."""

    def __init__(self, storage_path: str = "user_data/plans.json"):
        self.storage_path = storage_path
        self.plans: Dict[str, dict] = load_plans(storage_path)

    def list_names(self) -> List[str]:
        return sorted(self.plans)

    def get(self, name: str) -> dict:
        if name not in self.plans:
            raise KeyError(name)
        return self.plans[name]

    def save(self, name: str, payload: dict) -> None:
        key = name.strip()
        if not key:
            raise StructuralError("Plan name must not be blank.")
        replaced = key in self.plans
        self.plans[key] = payload
        self._save()
        logger.info("%s baseline plan %r.", "Replaced" if replaced else "Saved", key)

    def delete(self, name: str) -> None:
        self.get(name)
        del self.plans[name]
        self._save()
        logger.info("Deleted baseline plan %r.", name)

    def _save(self) -> None:
        save_plans(self.storage_path, self.plans)
