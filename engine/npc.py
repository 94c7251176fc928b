"""NPC encounters: daily subset, probe-then-resolve protocol.

Probing only picks a prompt line; rewards are granted by ``resolve`` and at
most once per NPC per day.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from catalog.models import NpcEncounter, NpcOption
from narrative import format_delta

from .player import PlayerRecord
from .probability import pick, pick_count, shuffled

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 3

LEFT_COMPANY_MESSAGE = "你已离开公司，无法继续和 NPC 交互。"


class NpcDecision(Enum):
    ACCEPT = "accept"
    REJECT = "reject"

    @property
    def label(self) -> str:
        return "同意" if self is NpcDecision.ACCEPT else "拒绝"


@dataclass(frozen=True)
class ActiveNpcPrompt:
    """The NPC currently mid-interaction and the prompt line it showed."""

    npc_index: int
    prompt: str


@dataclass(frozen=True)
class NpcSummary:
    name: str
    model: str
    interacted: bool


def _option_for(npc: NpcEncounter, decision: NpcDecision) -> NpcOption:
    return npc.accept if decision is NpcDecision.ACCEPT else npc.reject


class NpcInteractions:
    """Today's NPC subset and the interaction in progress."""

    def __init__(
        self,
        roster: Sequence[NpcEncounter],
        rng: random.Random,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
    ):
        self._roster = list(roster)
        self._rng = rng
        self._daily_limit = daily_limit
        self.today: list[NpcEncounter] = []
        self.active_prompt: ActiveNpcPrompt | None = None
        self.message = ""

    def refresh_subset(self) -> list[NpcEncounter]:
        """Draw a fresh random subset of 1..limit NPCs with cleared flags."""
        pool = shuffled(self._rng, (npc.clone() for npc in self._roster))
        take = pick_count(self._rng, min(self._daily_limit, len(pool)))
        self.today = pool[:take]
        self.active_prompt = None
        self.message = ""
        logger.debug("NPCs today: %s", ", ".join(npc.name for npc in self.today) or "none")
        return self.today

    def summaries(self) -> list[NpcSummary]:
        return [NpcSummary(npc.name, npc.model, npc.interacted) for npc in self.today]

    def _get(self, index: int) -> NpcEncounter | None:
        if 0 <= index < len(self.today):
            return self.today[index]
        return None

    def _left_company(self) -> str:
        self.active_prompt = None
        self.message = LEFT_COMPANY_MESSAGE
        return self.message

    def probe(self, index: int, player: PlayerRecord) -> str | None:
        """Show one of the NPC's prompt lines and wait for a decision.

        Returns None when ``index`` does not name one of today's NPCs.
        """
        if not player.alive:
            return self._left_company()

        npc = self._get(index)
        if npc is None:
            logger.debug("Probe ignored: no NPC at index %d", index)
            return None

        if npc.interacted:
            self.active_prompt = None
            self.message = f"{npc.name} 今天的请求已经处理完。"
            return self.message

        prompt = pick(self._rng, npc.prompts) if npc.prompts else npc.description
        self.active_prompt = ActiveNpcPrompt(npc_index=index, prompt=prompt)
        self.message = (
            f"{npc.name} · {npc.model}：{prompt}\n\n"
            f"同意：{npc.accept.summary}\n"
            f"拒绝：{npc.reject.summary}"
        )
        return self.message

    def resolve(self, decision: NpcDecision, player: PlayerRecord) -> str | None:
        """Apply the accept/reject option of the active prompt.

        Returns None when there is no prompt waiting for a decision.
        """
        if not player.alive:
            return self._left_company()

        active = self.active_prompt
        if active is None:
            return None
        npc = self._get(active.npc_index)
        if npc is None:
            self.active_prompt = None
            return None

        if npc.interacted:
            self.active_prompt = None
            self.message = f"{npc.name} 今天已经结束沟通。"
            return self.message

        option = _option_for(npc, decision)
        npc.interacted = True
        player.gain_reward(option.skill_delta, option.stress_delta)
        player.add_history(
            f"【NPC】{npc.name} - {option.detail} ({decision.label})",
            option.skill_delta,
            option.stress_delta,
        )
        self.active_prompt = None
        self.message = (
            f"{npc.name}：{option.summary} | "
            f"技能{format_delta(option.skill_delta)} | 压力{format_delta(option.stress_delta)}"
        )
        logger.debug("NPC %s resolved with %s", npc.name, decision.value)
        return self.message
