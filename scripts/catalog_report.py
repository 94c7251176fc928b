"""Audit the content tables.

Usage:
    python scripts/catalog_report.py
    python scripts/catalog_report.py --data-dir path/to/tables

Loads every table through the same checks the engine uses and prints
counts plus reward ranges. Exits 1 when a table is malformed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from catalog.loader import CatalogError, load_catalog


def _range(values: list[int]) -> str:
    if not values:
        return "-"
    return f"{min(values)}..{max(values)}"


def _event_lines(title: str, events) -> list[str]:
    skills = [o.skill_delta for e in events for o in e.options]
    stresses = [o.stress_delta for e in events for o in e.options]
    return [
        f"{title}: {len(events)} events",
        f"  skill {_range(skills)} | stress {_range(stresses)}",
    ]


@click.command()
@click.option("--data-dir", type=click.Path(), default=None, help="Directory with the YAML tables")
@click.option("--list", "list_all", is_flag=True, help="List every entry by name")
def report(data_dir: str | None, list_all: bool) -> None:
    """Print a summary of the daily, weekly and NPC tables."""

    try:
        catalog = load_catalog(data_dir)
    except CatalogError as e:
        click.echo(f"Catalog check failed: {e}", err=True)
        sys.exit(1)

    for line in _event_lines("Daily", catalog.daily_events):
        click.echo(line)
    for line in _event_lines("Weekly", catalog.weekly_events):
        click.echo(line)

    npc_skills = [opt.skill_delta for n in catalog.npcs for opt in (n.accept, n.reject)]
    npc_stress = [opt.stress_delta for n in catalog.npcs for opt in (n.accept, n.reject)]
    click.echo(f"NPCs: {len(catalog.npcs)}")
    click.echo(f"  skill {_range(npc_skills)} | stress {_range(npc_stress)}")

    if list_all:
        click.echo()
        for event in catalog.daily_events + catalog.weekly_events:
            rewards = " ".join(f"{o.slot}{o.reward}" for o in event.options)
            click.echo(f"  [{event.kind}] {event.id:>2} {event.name}  {rewards}")
        for npc in catalog.npcs:
            click.echo(f"  [npc] {npc.name} ({npc.model}) prompts={len(npc.prompts)}")


if __name__ == "__main__":
    report()
