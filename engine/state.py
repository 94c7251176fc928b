"""GameState: owns the player, the catalog and everything drawn for today.

``next_day`` is the single point where "today" rotates: new daily event,
optional weekly event, fresh NPC subset, cleared choice guards. Promotion
and death checks for the day must be settled before calling it.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass

from catalog.loader import Catalog, load_catalog
from catalog.models import Event, NpcEncounter, Option
from narrative import format_elapsed, is_week_boundary

from .npc import DEFAULT_DAILY_LIMIT, ActiveNpcPrompt, NpcDecision, NpcInteractions, NpcSummary
from .player import PlayerRecord, PlayerRules
from .shuffler import draw

logger = logging.getLogger(__name__)

DEFAULT_DAYS_PER_WEEK = 7

ALREADY_CHOSEN_MESSAGE = "今天已经选择过了！"
WEEKLY_DONE_MESSAGE = "本周事件已完成！"
NO_WEEKLY_MESSAGE = "今天没有周事件。"
LEFT_COMPANY_MESSAGE = "你已离开公司，无法继续做出选择。"


@dataclass
class ChoiceOutcome:
    """Result of a daily or weekly choice request."""

    applied: bool
    message: str
    option: Option | None = None
    event_name: str = ""


@dataclass(frozen=True)
class PlayerSnapshot:
    name: str
    tier: str
    skill: int
    stress: int
    experience: int
    tier_level: int
    day: int
    week: int
    elapsed: str
    alive: bool


@dataclass(frozen=True)
class EventView:
    name: str
    description: str
    options: tuple[str, ...]
    weekly: bool
    can_choose: bool


def _view(event: Event, can_choose: bool) -> EventView:
    return EventView(
        name=event.name,
        description=event.description,
        options=tuple(option.display_text for option in event.presented_options),
        weekly=event.is_weekly,
        can_choose=can_choose,
    )


class GameState:
    """One play session's engine state."""

    def __init__(
        self,
        player_name: str,
        config: dict | None = None,
        catalog: Catalog | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        cfg = config or {}
        game_cfg = cfg.get("game", {})
        self._rng = rng or random.Random()
        self._days_per_week = int(game_cfg.get("days_per_week", DEFAULT_DAYS_PER_WEEK))

        if catalog is None:
            data_dir = cfg.get("catalog", {}).get("data_dir") or None
            catalog = load_catalog(data_dir, rng=self._rng)
        self.catalog = catalog

        self.player = PlayerRecord(
            name=player_name,
            rules=PlayerRules.from_config(cfg),
            rng=self._rng,
        )
        self.day = 1
        self.week = 1
        self.today_event = draw(self.catalog.daily_events, self._rng)
        self.weekly_event: Event | None = None
        self.daily_chosen = False
        self.weekly_chosen = False

        self.npcs = NpcInteractions(
            self.catalog.npcs,
            self._rng,
            daily_limit=int(game_cfg.get("daily_npc_limit", DEFAULT_DAILY_LIMIT)),
        )
        self.npcs.refresh_subset()

        self._clock = clock
        self._started_at = clock()
        logger.info("New session for %s, day 1: %s", player_name, self.today_event.name)

    # ── Queries ─────────────────────────────────────────────────

    @property
    def today_npcs(self) -> list[NpcEncounter]:
        return self.npcs.today

    @property
    def active_prompt(self) -> ActiveNpcPrompt | None:
        return self.npcs.active_prompt

    @property
    def npc_message(self) -> str:
        return self.npcs.message

    @property
    def history(self) -> list[str]:
        """History lines, oldest first."""
        return list(self.player.history)

    def elapsed_seconds(self) -> int:
        return int(self._clock() - self._started_at)

    def format_elapsed(self) -> str:
        return format_elapsed(self.elapsed_seconds())

    def snapshot(self) -> PlayerSnapshot:
        p = self.player
        return PlayerSnapshot(
            name=p.name,
            tier=p.tier.display_name,
            skill=p.skill,
            stress=p.stress,
            experience=p.experience,
            tier_level=p.tier_level,
            day=self.day,
            week=self.week,
            elapsed=self.format_elapsed(),
            alive=p.alive,
        )

    def daily_view(self) -> EventView:
        return _view(self.today_event, self.can_choose_daily())

    def weekly_view(self) -> EventView | None:
        if self.weekly_event is None:
            return None
        return _view(self.weekly_event, self.can_choose_weekly())

    def npc_summaries(self) -> list[NpcSummary]:
        return self.npcs.summaries()

    def can_choose_daily(self) -> bool:
        return self.player.alive and not self.daily_chosen

    def can_choose_weekly(self) -> bool:
        return self.player.alive and self.weekly_event is not None and not self.weekly_chosen

    # ── Commands ────────────────────────────────────────────────

    def _apply(self, event: Event, option: Option, prefix: str = "") -> None:
        self.player.gain_reward(option.skill_delta, option.stress_delta)
        self.player.add_history(
            f"{prefix}{event.name} - {option.label}\n💬 {option.story}",
            option.skill_delta,
            option.stress_delta,
        )

    def apply_daily_choice(self, position: int) -> ChoiceOutcome | None:
        """Apply the option shown at 1-based ``position`` of today's event.

        Returns None, leaving state untouched, when the position is not one
        of the presented options.
        """
        if not self.player.alive:
            return ChoiceOutcome(applied=False, message=LEFT_COMPANY_MESSAGE)
        if self.daily_chosen:
            return ChoiceOutcome(applied=False, message=ALREADY_CHOSEN_MESSAGE)

        event = self.today_event
        option = event.option_at(position)
        if option is None:
            logger.debug("Daily choice ignored: position %r out of range", position)
            return None

        self._apply(event, option)
        self.daily_chosen = True
        logger.debug("Day %d: chose slot %s of %s", self.day, option.slot, event.name)
        return ChoiceOutcome(applied=True, message=option.story, option=option, event_name=event.name)

    def apply_weekly_choice(self, position: int) -> ChoiceOutcome | None:
        """Apply a weekly option; the weekly event is cleared for the rest of the day."""
        if not self.player.alive:
            return ChoiceOutcome(applied=False, message=LEFT_COMPANY_MESSAGE)
        if self.weekly_chosen:
            return ChoiceOutcome(applied=False, message=WEEKLY_DONE_MESSAGE)

        event = self.weekly_event
        if event is None:
            return ChoiceOutcome(applied=False, message=NO_WEEKLY_MESSAGE)
        option = event.option_at(position)
        if option is None:
            logger.debug("Weekly choice ignored: position %r out of range", position)
            return None

        self._apply(event, option, prefix="【周事件】")
        self.weekly_chosen = True
        self.weekly_event = None
        logger.debug("Week %d: chose slot %s of %s", self.week, option.slot, event.name)
        return ChoiceOutcome(applied=True, message=option.story, option=option, event_name=event.name)

    def probe_npc(self, index: int) -> str | None:
        return self.npcs.probe(index, self.player)

    def resolve_npc(self, decision: NpcDecision) -> str | None:
        return self.npcs.resolve(decision, self.player)

    def next_day(self) -> None:
        """Rotate today: counters, guards, event draws and NPC subset."""
        self.day += 1
        self.player.days_played += 1
        self.daily_chosen = False
        self.weekly_chosen = False

        if is_week_boundary(self.day, self._days_per_week):
            self.week += 1
            self.weekly_event = draw(self.catalog.weekly_events, self._rng)
            logger.info("Week %d event: %s", self.week, self.weekly_event.name)
        else:
            self.weekly_event = None

        self.today_event = draw(self.catalog.daily_events, self._rng)
        self.npcs.refresh_subset()
        logger.info("Day %d (week %d): %s", self.day, self.week, self.today_event.name)
