"""Player record: resources, realm, death and promotion checks, history.

The realm (``Tier``) is always derived from experience. ``tier_level`` is a
separate promotion counter advanced only by ``attempt_promotion``; the two
are never reconciled.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from narrative import Tier, format_delta, tier_for_experience

from .probability import chance

logger = logging.getLogger(__name__)

# Saturation bounds, matching 32-bit counters.
SKILL_MIN = -(2**31)
SKILL_MAX = 2**31 - 1
EXPERIENCE_MAX = 2**32 - 1
STRESS_MIN = 0
STRESS_MAX = 100

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_ZERO_STRESS_STREAK = 2
DEFAULT_ZERO_STRESS_DEATH_CHANCE = 0.15
DEFAULT_STRESS_DEATH_TABLE = (
    (0, 19, 0.0),
    (20, 29, 0.05),
    (30, 49, 0.08),
    (50, 69, 0.20),
    (70, 100, 0.40),
)
DEFAULT_STRESS_DEATH_FALLBACK = 0.25
DEFAULT_PROMOTION_REQUIREMENTS = {1: 50, 2: 150, 3: 300, 4: 500}
DEFAULT_FAILURE_STEP = 0.05
DEFAULT_FAILURE_CAP = 0.95


class DeathCause(Enum):
    ZERO_STRESS = "zero_stress"
    INSOLVENCY = "insolvency"
    STRESS = "stress"


_CAUSE_MESSAGES = {
    DeathCause.ZERO_STRESS: "你这样子天天都没有压力，跟咸鱼有什么分别？？？？",
    DeathCause.INSOLVENCY: "你小子被开除了，一个技能点都没有还他妈都来应聘，啥也不会",
}

_STRESS_BAND_MESSAGES = (
    (20, 29, "脆弱的弟弟，这就死了"),
    (30, 49, "啊？就这就累死了？还差得远呢，投胎去吧"),
    (50, 69, "辛苦了，但是还不够努力，死的太慢了呢"),
    (70, 100, "该你去死了啊，这么卷不要命了啊"),
)

GAME_OVER_MESSAGE = "游戏结束"


@dataclass(frozen=True)
class PlayerRules:
    """Tunable constants for death and promotion checks."""

    history_limit: int = DEFAULT_HISTORY_LIMIT
    zero_stress_streak: int = DEFAULT_ZERO_STRESS_STREAK
    zero_stress_death_chance: float = DEFAULT_ZERO_STRESS_DEATH_CHANCE
    stress_death_table: tuple[tuple[int, int, float], ...] = DEFAULT_STRESS_DEATH_TABLE
    stress_death_fallback: float = DEFAULT_STRESS_DEATH_FALLBACK
    promotion_requirements: dict[int, int] = field(
        default_factory=lambda: dict(DEFAULT_PROMOTION_REQUIREMENTS)
    )
    failure_step: float = DEFAULT_FAILURE_STEP
    failure_cap: float = DEFAULT_FAILURE_CAP

    @classmethod
    def from_config(cls, config: dict | None = None) -> PlayerRules:
        cfg = config or {}
        game = cfg.get("game", {})
        rules = cfg.get("rules", {})
        zero = rules.get("zero_stress", {})
        promo = rules.get("promotion", {})

        table = rules.get("stress_death_table")
        if table:
            bands = tuple(
                (int(row["min"]), int(row["max"]), float(row["chance"])) for row in table
            )
        else:
            bands = DEFAULT_STRESS_DEATH_TABLE

        requirements = promo.get("requirements") or DEFAULT_PROMOTION_REQUIREMENTS
        return cls(
            history_limit=int(game.get("history_limit", DEFAULT_HISTORY_LIMIT)),
            zero_stress_streak=int(zero.get("streak_days", DEFAULT_ZERO_STRESS_STREAK)),
            zero_stress_death_chance=float(
                zero.get("death_chance", DEFAULT_ZERO_STRESS_DEATH_CHANCE)
            ),
            stress_death_table=bands,
            stress_death_fallback=float(
                rules.get("stress_death_fallback", DEFAULT_STRESS_DEATH_FALLBACK)
            ),
            promotion_requirements={int(k): int(v) for k, v in requirements.items()},
            failure_step=float(promo.get("failure_step", DEFAULT_FAILURE_STEP)),
            failure_cap=float(promo.get("failure_cap", DEFAULT_FAILURE_CAP)),
        )


@dataclass
class PromotionResult:
    success: bool
    message: str
    skill_lost: int = 0
    tier_name: str = ""


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _truncated_half(value: int) -> int:
    """Half of ``value``, rounded toward zero."""
    half = abs(value) // 2
    return half if value >= 0 else -half


@dataclass
class PlayerRecord:
    """Mutable player state for one session."""

    name: str
    experience: int = 0
    skill: int = 0
    stress: int = 0
    days_played: int = 0
    alive: bool = True
    tier_level: int = 1
    promotion_attempts: int = 0
    zero_stress_streak: int = 0
    died_from_zero_stress: bool = False
    history: deque[str] = field(default_factory=deque)
    rules: PlayerRules = field(default_factory=PlayerRules, repr=False)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.history = deque(self.history, maxlen=self.rules.history_limit)

    @property
    def tier(self) -> Tier:
        return tier_for_experience(self.experience)

    # ── Resources ───────────────────────────────────────────────

    def gain_reward(self, skill_delta: int, stress_delta: int) -> None:
        """Apply a reward pair. Only positive skill deltas earn experience."""
        if skill_delta > 0:
            self.experience = min(EXPERIENCE_MAX, self.experience + skill_delta)
        self.skill = _clamp(self.skill + skill_delta, SKILL_MIN, SKILL_MAX)
        self.stress = _clamp(self.stress + stress_delta, STRESS_MIN, STRESS_MAX)

    def add_history(self, text: str, skill_delta: int, stress_delta: int) -> None:
        """Append a tagged line; the oldest line drops out past the limit."""
        self.history.append(
            f"第{self.days_played + 1}天: {text} "
            f"[技能{format_delta(skill_delta)}|压力{format_delta(stress_delta)}]"
        )

    # ── Death ───────────────────────────────────────────────────

    def stress_death_chance(self) -> float:
        for low, high, probability in self.rules.stress_death_table:
            if low <= self.stress <= high:
                return probability
        return self.rules.stress_death_fallback

    def check_death(self) -> None:
        """Run the end-of-day survival checks in their fixed order.

        Zero-stress burnout short-circuits everything after it; negative skill
        is a certain dismissal; otherwise the stress band sets the odds.
        """
        self.died_from_zero_stress = False

        if self.stress == 0:
            self.zero_stress_streak += 1
        else:
            self.zero_stress_streak = 0

        if self.zero_stress_streak >= self.rules.zero_stress_streak and chance(
            self.rng, self.rules.zero_stress_death_chance
        ):
            self.alive = False
            self.died_from_zero_stress = True
            logger.info("%s died after %d zero-stress days", self.name, self.zero_stress_streak)
            return

        if self.skill < 0:
            self.alive = False
            logger.info("%s dismissed with skill %d", self.name, self.skill)
            return

        probability = self.stress_death_chance()
        if chance(self.rng, probability):
            self.alive = False
            logger.info("%s burned out at stress %d (p=%.2f)", self.name, self.stress, probability)

    @property
    def death_cause(self) -> DeathCause | None:
        if self.alive:
            return None
        if self.died_from_zero_stress:
            return DeathCause.ZERO_STRESS
        if self.skill < 0:
            return DeathCause.INSOLVENCY
        return DeathCause.STRESS

    @property
    def death_message(self) -> str:
        cause = self.death_cause
        if cause in _CAUSE_MESSAGES:
            return _CAUSE_MESSAGES[cause]
        for low, high, message in _STRESS_BAND_MESSAGES:
            if low <= self.stress <= high:
                return message
        return GAME_OVER_MESSAGE

    # ── Promotion ───────────────────────────────────────────────

    def promotion_requirement(self) -> int | None:
        """Skill needed to leave the current tier level; None once exhausted."""
        return self.rules.promotion_requirements.get(self.tier_level)

    def can_promote(self) -> bool:
        requirement = self.promotion_requirement()
        if requirement is None:
            return False
        return self.skill >= requirement

    def promotion_failure_chance(self) -> float:
        return min(self.rules.failure_cap, self.rules.failure_step * (self.promotion_attempts + 1))

    def attempt_promotion(self) -> PromotionResult:
        """Roll for promotion. Failure costs half the current skill."""
        if chance(self.rng, self.promotion_failure_chance()):
            lost = _truncated_half(self.skill)
            self.skill -= lost
            self.promotion_attempts += 1
            logger.info(
                "%s failed promotion attempt %d, lost %d skill",
                self.name, self.promotion_attempts, lost,
            )
            return PromotionResult(
                success=False,
                message=f"小垃圾 根本没有这个水平还想晋升\n失去了{lost}技能点",
                skill_lost=lost,
            )

        self.tier_level += 1
        self.promotion_attempts = 0
        tier_name = self.tier.display_name
        logger.info("%s promoted to tier level %d (%s)", self.name, self.tier_level, tier_name)
        return PromotionResult(
            success=True,
            message=f"恭喜晋升到{tier_name}阶！",
            tier_name=tier_name,
        )
