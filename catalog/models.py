"""Data models for the content tables: events, options and NPC encounters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

ORIGIN_SLOTS = ("A", "B", "C")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_reward(value: Any) -> tuple[int, int]:
    """Normalize a ``[skill_delta, stress_delta]`` pair."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"reward must be a [skill, stress] pair, got {value!r}")
    skill, stress = value
    if isinstance(skill, bool) or isinstance(stress, bool):
        raise ValueError(f"reward values must be integers, got {value!r}")
    if not isinstance(skill, int) or not isinstance(stress, int):
        raise ValueError(f"reward values must be integers, got {value!r}")
    return skill, stress


@dataclass(frozen=True)
class Option:
    """One authored choice of an event. Never mutated after creation."""

    skill_delta: int
    stress_delta: int
    label: str
    story: str = ""
    detail: str = ""
    origin_index: int = 0  # authored slot, 0=A 1=B 2=C

    @property
    def reward(self) -> tuple[int, int]:
        return self.skill_delta, self.stress_delta

    @property
    def slot(self) -> str:
        return ORIGIN_SLOTS[self.origin_index]

    @property
    def display_text(self) -> str:
        if not self.detail:
            return self.label
        return f"{self.label} {self.detail}"

    @classmethod
    def from_dict(cls, data: dict, origin_index: int) -> Option:
        skill, stress = _as_reward(data.get("reward"))
        return cls(
            skill_delta=skill,
            stress_delta=stress,
            label=_as_text(data.get("label")),
            story=_as_text(data.get("story")),
            detail=_as_text(data.get("detail")),
            origin_index=origin_index,
        )


@dataclass
class Event:
    """A daily or weekly event with three authored options.

    ``options`` holds the authored A/B/C order; ``presented_options`` is the
    display order for the current draw and is always a permutation of it.
    """

    id: int
    name: str
    description: str
    options: tuple[Option, ...]
    kind: str = "daily"  # "daily" | "weekly"
    presented_options: list[Option] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.presented_options:
            self.presented_options = list(self.options)

    @property
    def is_weekly(self) -> bool:
        return self.kind == "weekly"

    def clone(self) -> Event:
        """Working copy for one day; reshuffling it leaves the template alone."""
        return replace(self, presented_options=list(self.presented_options))

    def option_at(self, position: int) -> Option | None:
        """Option at a 1-based display position, or None when out of range."""
        if position < 1 or position > len(self.presented_options):
            return None
        return self.presented_options[position - 1]

    @classmethod
    def from_dict(cls, data: dict, kind: str = "daily") -> Event:
        raw_options = data.get("options") or []
        return cls(
            id=int(data.get("id", 0)),
            name=_as_text(data.get("name")),
            description=_as_text(data.get("description")),
            options=tuple(
                Option.from_dict(raw, origin_index=i) for i, raw in enumerate(raw_options)
            ),
            kind=kind,
        )


@dataclass(frozen=True)
class NpcOption:
    summary: str
    detail: str
    skill_delta: int
    stress_delta: int

    @property
    def reward(self) -> tuple[int, int]:
        return self.skill_delta, self.stress_delta

    @classmethod
    def from_dict(cls, data: dict) -> NpcOption:
        skill, stress = _as_reward(data.get("reward"))
        return cls(
            summary=_as_text(data.get("summary")),
            detail=_as_text(data.get("detail")),
            skill_delta=skill,
            stress_delta=stress,
        )


@dataclass
class NpcEncounter:
    """A side interaction offered at most once per day."""

    name: str
    description: str
    model: str
    prompts: tuple[str, ...]
    accept: NpcOption
    reject: NpcOption
    interacted: bool = False

    def clone(self) -> NpcEncounter:
        """Fresh copy for today's subset, with the daily flag cleared."""
        return replace(self, interacted=False)

    @classmethod
    def from_dict(cls, data: dict) -> NpcEncounter:
        return cls(
            name=_as_text(data.get("name")),
            description=_as_text(data.get("description")),
            model=_as_text(data.get("model")),
            prompts=tuple(_as_text(p) for p in (data.get("prompts") or []) if p),
            accept=NpcOption.from_dict(data["accept"]),
            reject=NpcOption.from_dict(data["reject"]),
        )
