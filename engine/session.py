"""Game session: the phase machine a presentation layer drives.

Each command is only legal in certain phases; anything else is ignored and
returns None. The phases:

    START -> EVENT <-> WEEKLY_EVENT
    EVENT -> PROMOTION -> EVENT
    EVENT -> GAME_OVER -> START (restart)
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from enum import Enum

from catalog.loader import Catalog

from .npc import NpcDecision
from .player import PromotionResult
from .state import ChoiceOutcome, GameState

logger = logging.getLogger(__name__)


class Phase(Enum):
    START = "start"
    EVENT = "event"
    WEEKLY_EVENT = "weekly_event"
    PROMOTION = "promotion"
    GAME_OVER = "game_over"


class GameSession:
    """Wrap a GameState with phase guards and player-facing messages."""

    def __init__(
        self,
        config: dict | None = None,
        catalog: Catalog | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._cfg = config or {}
        self._catalog = catalog
        self._rng = rng
        self._clock = clock
        self.phase = Phase.START
        self.state: GameState | None = None
        self.message = ""

    def start(self, name: str) -> bool:
        """Begin a new session; blank names are refused."""
        name = (name or "").strip()
        if not name:
            return False
        self.state = GameState(
            name,
            config=self._cfg,
            catalog=self._catalog,
            rng=self._rng,
            clock=self._clock,
        )
        self.phase = Phase.EVENT
        self.message = ""
        return True

    def restart(self) -> None:
        """Discard the current session and go back to the start screen."""
        if self.state is not None:
            logger.info("Restarting session for %s", self.state.player.name)
        self.state = None
        self.phase = Phase.START
        self.message = ""

    # ── Choices ─────────────────────────────────────────────────

    def choose(self, position: int) -> ChoiceOutcome | None:
        """Pick the option at a 1-based display position for the current event."""
        if self.state is None:
            return None

        if self.phase is Phase.EVENT:
            outcome = self.state.apply_daily_choice(position)
            if outcome is None:
                return None
            if not outcome.applied:
                self.message = outcome.message
                return outcome
            weekly = self.state.weekly_event
            if weekly is not None:
                self.phase = Phase.WEEKLY_EVENT
                self.message = f"📖 {outcome.message}\n\n⚠️ 周事件触发：{weekly.name}"
            else:
                self.message = f"📖 {outcome.message}"
            return outcome

        if self.phase is Phase.WEEKLY_EVENT:
            outcome = self.state.apply_weekly_choice(position)
            if outcome is None:
                return None
            if outcome.applied:
                self.phase = Phase.EVENT
                self.message = f"📖 {outcome.message}\n\n周事件完成！"
            else:
                self.message = outcome.message
            return outcome

        return None

    def probe_npc(self, index: int) -> str | None:
        if self.state is None or self.phase not in (Phase.EVENT, Phase.WEEKLY_EVENT):
            return None
        return self.state.probe_npc(index)

    def resolve_npc(self, decision: NpcDecision) -> str | None:
        if self.state is None or self.phase not in (Phase.EVENT, Phase.WEEKLY_EVENT):
            return None
        return self.state.resolve_npc(decision)

    # ── Day end ─────────────────────────────────────────────────

    def can_advance(self) -> bool:
        return self.state is not None and self.phase is Phase.EVENT

    def end_day(self) -> Phase:
        """Settle today's death and promotion checks, then move on."""
        if not self.can_advance():
            return self.phase

        state = self.state
        player = state.player
        player.check_death()

        if not player.alive:
            self.phase = Phase.GAME_OVER
            self.message = self._game_over_summary()
            logger.info(
                "Game over for %s on day %d: %s",
                player.name, state.day, player.death_cause.value,
            )
        elif player.can_promote():
            self.phase = Phase.PROMOTION
            failure_percent = int(round(player.promotion_failure_chance() * 100))
            self.message = f"你已积累足够经验！\n是否选择晋升？\n(失败率: {failure_percent}%)"
        else:
            state.next_day()
            self.phase = Phase.EVENT
            self.message = ""
        return self.phase

    def accept_promotion(self) -> PromotionResult | None:
        """Roll for promotion. Success moves to the next day; failure stays here
        so the player can roll again or decline.
        """
        if self.state is None or self.phase is not Phase.PROMOTION:
            return None

        result = self.state.player.attempt_promotion()
        self.message = result.message
        if result.success:
            self.state.next_day()
            self.phase = Phase.EVENT
        return result

    def decline_promotion(self) -> None:
        if self.state is None or self.phase is not Phase.PROMOTION:
            return
        self.state.next_day()
        self.phase = Phase.EVENT
        self.message = ""

    def _game_over_summary(self) -> str:
        state = self.state
        player = state.player
        return (
            f"【{player.death_message}】\n\n"
            f"游玩时间: {state.format_elapsed()}\n"
            f"天数: {player.days_played}\n"
            f"技能点: {player.skill}\n"
            f"压力值: {player.stress}\n"
            f"修仙境界: {player.tier.display_name}"
        )
