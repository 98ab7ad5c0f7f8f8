from __future__ import annotations

import logging
import os
from dataclasses import dataclass

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: str = "user_data"
    log_level: str = "INFO"
    api_port: int = 8000
    api_debug: bool = False
    cors_origin: str = "*"

    @property
    def cards_path(self) -> str:
        return os.path.join(self.data_dir, "scenario_cards.json")

    @property
    def plans_path(self) -> str:
        return os.path.join(self.data_dir, "plans.json")


def load_settings() -> Settings:
    """Reads settings from the environment.

    Env vars:
      PLANLIFE_DATA_DIR=<dir>      -> where card and plan JSON files live
      PLANLIFE_LOG_LEVEL=INFO      -> root logging level
      PLANLIFE_API_PORT=8000       -> port for the development server
      PLANLIFE_API_DEBUG=1         -> run Flask in debug mode
      PLANLIFE_CORS_ORIGIN=*       -> Access-Control-Allow-Origin value
    """
    try:
        port = int(os.getenv("PLANLIFE_API_PORT", 8000))
    except ValueError:
        port = 8000
    return Settings(
        data_dir=os.getenv("PLANLIFE_DATA_DIR", "user_data"),
        log_level=os.getenv("PLANLIFE_LOG_LEVEL", "INFO").upper(),
        api_port=port,
        api_debug=str(os.getenv("PLANLIFE_API_DEBUG", "")).lower() in TRUTHY,
        cors_origin=os.getenv("PLANLIFE_CORS_ORIGIN", "*"),
    )


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
