"""REST backend for household what-if previews."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from .config import Settings, configure_logging, load_settings
from .data_model import (
    GROWTH_TARGETS,
    OBSERVED_TARGETS,
    OVERRIDE_KINDS,
    PARTNER_TARGETS,
    TARGET_KEYS,
    PlanState,
    YearInputs,
    plan_state_from_dict,
    targeted_override_from_dict,
)
from .engine import build_baseline_year_inputs, compose_scenario_year_inputs
from .engine.state import PlanStore, ScenarioCardStore
from .errors import RuleSpecError, StructuralError
from .scenario import (
    create_scenario_card,
    create_scenario_card_from_config,
    income_card_config_from_dict,
    scenario_card_from_dict,
)

logger = logging.getLogger(__name__)


def _rows_payload(rows: List[YearInputs]) -> List[Dict[str, Any]]:
    return [row.to_dict() for row in rows]


def _extract_payload_value(payload: dict, *keys: str, default=None):
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def _plan_from_payload(payload: dict, plan_store: PlanStore) -> PlanState:
    plan_raw = payload.get("plan")
    if plan_raw is None and payload.get("planName"):
        name = str(payload["planName"])
        try:
            plan_raw = plan_store.get(name)
        except KeyError:
            raise StructuralError(f"No saved plan named {name!r}.") from None
    if plan_raw is None:
        raise StructuralError("Request must include a plan or the name of a saved plan.")
    return plan_state_from_dict(plan_raw)


def _overrides_from_payload(raw: Any) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise StructuralError("Overrides must be a list.")
    return [targeted_override_from_dict(item) for item in raw]


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or load_settings()
    app = Flask(__name__)
    card_store = ScenarioCardStore(settings.cards_path)
    plan_store = PlanStore(settings.plans_path)
    app.config["PLANLIFE_SETTINGS"] = settings

    @app.after_request
    def apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = settings.cors_origin
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(RuleSpecError)
    def handle_rule_spec_error(exc: RuleSpecError):
        logger.warning("Rejected request %s %s: %s", request.method, request.path, exc)
        return _error(str(exc))

    @app.get("/api/health")
    def healthcheck():
        return jsonify({"status": "ok"})

    @app.get("/api/schema")
    def get_schema():
        return jsonify(
            {
                "targets": list(TARGET_KEYS),
                "partnerTargets": sorted(PARTNER_TARGETS),
                "growthTargets": sorted(GROWTH_TARGETS),
                "observedTargets": sorted(OBSERVED_TARGETS),
                "overrideKinds": list(OVERRIDE_KINDS),
            }
        )

    @app.post("/api/baseline")
    def baseline():
        payload = request.get_json(silent=True) or {}
        plan = _plan_from_payload(payload, plan_store)
        return jsonify({"rows": _rows_payload(build_baseline_year_inputs(plan))})

    @app.post("/api/preview")
    def preview():
        payload = request.get_json(silent=True) or {}
        plan = _plan_from_payload(payload, plan_store)
        cards_raw = payload.get("cards")
        if cards_raw is None:
            cards = card_store.list()
        elif isinstance(cards_raw, list):
            cards = [scenario_card_from_dict(item) for item in cards_raw]
        else:
            raise StructuralError("Cards must be a list.")
        draft = _overrides_from_payload(_extract_payload_value(payload, "draft", "draftOverrides"))

        rows = compose_scenario_year_inputs(plan, cards, draft)
        if not rows:
            return jsonify({"useBaseline": True, "rows": _rows_payload(build_baseline_year_inputs(plan))})
        return jsonify({"useBaseline": False, "rows": _rows_payload(rows)})

    @app.get("/api/cards")
    def list_cards():
        return jsonify({"cards": [card.to_dict() for card in card_store.list()]})

    @app.post("/api/cards")
    def add_card():
        payload = request.get_json(silent=True) or {}
        config = income_card_config_from_dict(payload.get("config"))
        if config is not None:
            plan = _plan_from_payload(payload, plan_store)
            card = create_scenario_card_from_config(plan, config)
        else:
            overrides = _overrides_from_payload(payload.get("overrides"))
            if not overrides:
                return _error("A card needs at least one override or an income config.")
            card = create_scenario_card(
                title=str(payload.get("title", "")).strip(),
                summary=str(payload.get("summary", "")),
                overrides=overrides,
            )
        card_store.add(card)
        return jsonify({"card": card.to_dict()}), 201

    @app.post("/api/cards/<card_id>/toggle")
    def toggle_card(card_id: str):
        payload = request.get_json(silent=True) or {}
        enabled = payload.get("enabled")
        if not isinstance(enabled, bool):
            return _error("Field 'enabled' must be a boolean.")
        try:
            card = card_store.set_enabled(card_id, enabled)
        except KeyError:
            return _error(f"Card '{card_id}' not found.", 404)
        return jsonify({"card": card.to_dict()})

    @app.delete("/api/cards/<card_id>")
    def delete_card(card_id: str):
        try:
            card_store.delete(card_id)
        except KeyError:
            return _error(f"Card '{card_id}' not found.", 404)
        return jsonify({"message": "Card deleted.", "cards": [c.to_dict() for c in card_store.list()]})

    @app.delete("/api/cards")
    def clear_cards():
        card_store.clear()
        return jsonify({"message": "All cards cleared.", "cards": []})

    @app.get("/api/plans")
    def list_saved_plans():
        return jsonify({"plans": plan_store.list_names()})

    @app.get("/api/plans/<name>")
    def get_saved_plan(name: str):
        try:
            plan = plan_store.get(name)
        except KeyError:
            return _error(f"Plan '{name}' not found.", 404)
        return jsonify({"name": name, "plan": plan})

    @app.post("/api/plans/<name>")
    def save_plan(name: str):
        payload = request.get_json(silent=True) or {}
        plan_raw = payload.get("plan")
        # Parse to reject a malformed baseline before it is stored.
        plan_state_from_dict(plan_raw)
        plan_store.save(name, plan_raw)
        return jsonify({"message": "Plan saved.", "plans": plan_store.list_names()})

    @app.delete("/api/plans/<name>")
    def delete_plan(name: str):
        try:
            plan_store.delete(name)
        except KeyError:
            return _error(f"Plan '{name}' not found.", 404)
        return jsonify({"message": "Plan deleted.", "plans": plan_store.list_names()})

    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    app = create_app(settings)
    app.run(debug=settings.api_debug, port=settings.api_port)


if __name__ == "__main__":
    main()
