"""Load the content tables from YAML and check their shape."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from engine.shuffler import reshuffle

from .models import Event, NpcEncounter

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

DAILY_FILE = "daily_events.yaml"
WEEKLY_FILE = "weekly_events.yaml"
NPC_FILE = "npcs.yaml"

OPTIONS_PER_EVENT = 3


class CatalogError(Exception):
    """Raised when a content table is missing or malformed."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


@dataclass
class Catalog:
    """Template tables. Working copies are cloned out of these each day."""

    daily_events: list[Event] = field(default_factory=list)
    weekly_events: list[Event] = field(default_factory=list)
    npcs: list[NpcEncounter] = field(default_factory=list)


def _read_table(path: Path, key: str) -> list[dict]:
    if not path.exists():
        raise CatalogError("table not found", source=str(path))
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"invalid YAML ({e})", source=str(path)) from e

    rows = (raw or {}).get(key) if isinstance(raw, dict) else None
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise CatalogError(f"'{key}' must be a list", source=str(path))
    return rows


def parse_events(rows: list[dict], kind: str, source: str = "") -> list[Event]:
    """Build event templates, enforcing exactly three options and unique ids."""
    events: list[Event] = []
    seen_ids: set[int] = set()
    for pos, row in enumerate(rows):
        if not isinstance(row, dict):
            raise CatalogError(f"entry {pos} is not a mapping", source=source)
        options = row.get("options") or []
        if len(options) != OPTIONS_PER_EVENT:
            raise CatalogError(
                f"event {row.get('name', pos)!r} has {len(options)} options, "
                f"expected {OPTIONS_PER_EVENT}",
                source=source,
            )
        try:
            event = Event.from_dict(row, kind=kind)
        except (AttributeError, TypeError, ValueError) as e:
            raise CatalogError(f"event {row.get('name', pos)!r}: {e}", source=source) from e
        if event.id in seen_ids:
            raise CatalogError(f"duplicate event id {event.id}", source=source)
        seen_ids.add(event.id)
        events.append(event)
    return events


def parse_npcs(rows: list[dict], source: str = "") -> list[NpcEncounter]:
    """Build NPC templates; each needs prompt lines plus accept and reject options."""
    npcs: list[NpcEncounter] = []
    for pos, row in enumerate(rows):
        if not isinstance(row, dict):
            raise CatalogError(f"entry {pos} is not a mapping", source=source)
        name = row.get("name", pos)
        for key in ("accept", "reject"):
            if not isinstance(row.get(key), dict):
                raise CatalogError(f"npc {name!r} is missing its '{key}' option", source=source)
        try:
            npc = NpcEncounter.from_dict(row)
        except (AttributeError, TypeError, ValueError) as e:
            raise CatalogError(f"npc {name!r}: {e}", source=source) from e
        if not npc.prompts:
            raise CatalogError(f"npc {name!r} has no prompt lines", source=source)
        npcs.append(npc)
    return npcs


def load_catalog(
    data_dir: str | Path | None = None,
    rng: random.Random | None = None,
) -> Catalog:
    """Load the daily, weekly and NPC tables from ``data_dir``.

    Defaults to the tables bundled with the package. Each event gets its
    first shuffle here; later draws reshuffle their own copies.
    """
    data_dir = Path(data_dir) if data_dir else DATA_DIR
    rng = rng or random.Random()

    daily_path = data_dir / DAILY_FILE
    weekly_path = data_dir / WEEKLY_FILE
    npc_path = data_dir / NPC_FILE

    daily = parse_events(_read_table(daily_path, "events"), "daily", source=str(daily_path))
    weekly = parse_events(_read_table(weekly_path, "events"), "weekly", source=str(weekly_path))
    npcs = parse_npcs(_read_table(npc_path, "npcs"), source=str(npc_path))

    if not daily:
        raise CatalogError("no daily events defined", source=str(daily_path))
    if not weekly:
        raise CatalogError("no weekly events defined", source=str(weekly_path))

    for event in daily + weekly:
        reshuffle(event, rng)

    logger.debug(
        "Loaded catalog from %s: %d daily, %d weekly, %d npcs",
        data_dir, len(daily), len(weekly), len(npcs),
    )
    return Catalog(daily_events=daily, weekly_events=weekly, npcs=npcs)
