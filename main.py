"""Entry point for the office cultivation simulator.

Usage:
    python main.py                          # Auto-play 30 days
    python main.py --days 100 --seed 7      # Reproducible longer run
    python main.py --name 凌霄程序侠 --verbose
"""

from __future__ import annotations

import logging
import sys

import click

from engine.config import load_config, seed_from_config
from engine.npc import NpcDecision
from engine.probability import chance, new_rng
from engine.session import GameSession, Phase


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s — %(name)s — %(levelname)s — %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def _day_line(session: GameSession) -> str:
    snap = session.state.snapshot()
    return (
        f"第{snap.day}天 | 第{snap.week}周 | {snap.tier} | "
        f"技能 {snap.skill} | 压力 {snap.stress}"
    )


def _play_day(session: GameSession, rng) -> None:
    state = session.state
    session.choose(rng.randint(1, len(state.today_event.presented_options)))
    if session.phase is Phase.WEEKLY_EVENT:
        click.echo(f"  周事件：{state.weekly_event.name}")
        session.choose(rng.randint(1, 3))

    if state.today_npcs:
        session.probe_npc(0)
        decision = NpcDecision.ACCEPT if chance(rng, 0.5) else NpcDecision.REJECT
        session.resolve_npc(decision)

    phase = session.end_day()
    if phase is Phase.PROMOTION:
        result = session.accept_promotion()
        if result is not None:
            click.echo(f"  {result.message.splitlines()[0]}")
        if session.phase is Phase.PROMOTION:
            session.decline_promotion()


@click.command()
@click.option("--name", default="凌霄程序侠", help="Player name")
@click.option("--days", default=30, type=int, help="Stop after this many days")
@click.option("--seed", default=None, type=int, help="Seed for the random source")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
def main(name: str, days: int, seed: int | None, verbose: bool, config_dir: str | None) -> None:
    """从 996 到飞升: auto-play a headless session."""

    cfg = load_config(config_dir)

    _setup_logging(verbose=verbose, log_file=cfg["_env"]["log_file"] or None)

    if seed is None:
        seed = seed_from_config(cfg)
    rng = new_rng(seed)

    session = GameSession(config=cfg, rng=rng)
    if not session.start(name):
        click.echo("Player name must not be blank.", err=True)
        sys.exit(1)

    for _ in range(days):
        click.echo(_day_line(session))
        _play_day(session, rng)
        if session.phase is Phase.GAME_OVER:
            click.echo(f"\n{session.message}\n")
            return

    click.echo(f"\n{session.state.player.name} survived {days} days.")
    click.echo(_day_line(session))


if __name__ == "__main__":
    main()
