"""Rule settings from config/settings.yaml, with .env overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

SEED_ENV = "XIUXIAN_SEED"
LOG_FILE_ENV = "XIUXIAN_LOG_FILE"


def _resolve_env(cfg: dict) -> dict:
    """Runtime values: the environment wins over ``storage`` settings."""
    storage = cfg.get("storage") or {}
    return {
        "seed": os.getenv(SEED_ENV, "").strip(),
        "log_file": os.getenv(LOG_FILE_ENV) or storage.get("log_file") or "",
    }


def load_config(config_dir: str | Path | None = None) -> dict:
    """Read settings.yaml and resolve runtime values into ``cfg["_env"]``.

    A ``.env`` beside the settings file is optional. A missing settings
    file raises FileNotFoundError.
    """
    config_dir = Path(config_dir) if config_dir is not None else CONFIG_DIR
    load_dotenv(config_dir / ".env")

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Config not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    cfg["_env"] = _resolve_env(cfg)
    logger.debug("Loaded settings from %s", settings_path)
    return cfg


def seed_from_config(cfg: dict) -> int | None:
    """Integer seed from XIUXIAN_SEED, or None for an unseeded source."""
    raw = str(cfg.get("_env", {}).get("seed", "")).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", SEED_ENV, raw)
        return None
