# engine/storage.py
import json
import logging
import math
import os
from typing import Any, Dict, List

from ..errors import RuleSpecError
from ..scenario.cards import ScenarioCard, scenario_card_from_dict

logger = logging.getLogger(__name__)


def ensure_user_data_dir(path: str) -> None:
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def _sanitize_json_compat(value: Any):
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_compat(item) for item in value]
    return value


def _read_json(path: str, default):
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
            if not raw_text:
                return default
            return json.loads(raw_text)
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s; starting empty.", path)
        return default


def _write_json(path: str, data: Any) -> None:
    ensure_user_data_dir(path)
    tmp_path = f"{path}.tmp"
    clean = _sanitize_json_compat(data)
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(clean, f, allow_nan=False)
    os.replace(tmp_path, path)


def load_cards(path: str) -> List[ScenarioCard]:
    raw = _read_json(path, [])
    if not isinstance(raw, list):
        return []
    cards: List[ScenarioCard] = []
    for item in raw:
        try:
            cards.append(scenario_card_from_dict(item))
        except RuleSpecError as exc:
            logger.warning("Skipping stored scenario card: %s", exc)
    return sorted(cards, key=lambda card: (card.created_at, card.id))


def save_cards(path: str, cards: List[ScenarioCard]) -> None:
    _write_json(path, [card.to_dict() for card in cards])


def load_plans(path: str) -> Dict[str, dict]:
    data = _read_json(path, {})
    if not isinstance(data, dict):
        return {}
    return _sanitize_json_compat(data)


def save_plans(path: str, plans: Dict[str, dict]) -> None:
    _write_json(path, plans)
