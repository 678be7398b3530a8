"""
Modifier aggregation for percentile tests.

Every modifier that touches a target number is collected as a named source
with an on/off flag, in the order it was added, and summed in one place.
Sources stack freely; the difficulty ladder is the only single-choice source.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# DIFFICULTY LADDER
# =============================================================================


class Difficulty(str, Enum):
    """Test difficulty, easiest to hardest."""
    TRIVIAL = "trivial"
    EASY = "easy"
    ROUTINE = "routine"
    ORDINARY = "ordinary"
    CHALLENGING = "challenging"
    DIFFICULT = "difficult"
    HARD = "hard"
    VERY_HARD = "veryHard"
    HELLISH = "hellish"

    @property
    def modifier(self) -> int:
        return DIFFICULTY_MODIFIERS[self]

    @property
    def label(self) -> str:
        return DIFFICULTY_LABELS[self]


DIFFICULTY_MODIFIERS: dict[Difficulty, int] = {
    Difficulty.TRIVIAL: 60,
    Difficulty.EASY: 30,
    Difficulty.ROUTINE: 20,
    Difficulty.ORDINARY: 10,
    Difficulty.CHALLENGING: 0,
    Difficulty.DIFFICULT: -10,
    Difficulty.HARD: -20,
    Difficulty.VERY_HARD: -30,
    Difficulty.HELLISH: -60,
}

DIFFICULTY_LABELS: dict[Difficulty, str] = {
    Difficulty.TRIVIAL: "Trivial",
    Difficulty.EASY: "Easy",
    Difficulty.ROUTINE: "Routine",
    Difficulty.ORDINARY: "Ordinary",
    Difficulty.CHALLENGING: "Challenging",
    Difficulty.DIFFICULT: "Difficult",
    Difficulty.HARD: "Hard",
    Difficulty.VERY_HARD: "Very Hard",
    Difficulty.HELLISH: "Hellish",
}

DEFAULT_DIFFICULTY = Difficulty.CHALLENGING

CUSTOM_MODIFIER_STEP = 5


def step_difficulty(current: Difficulty, direction: int) -> Difficulty:
    """
    Move along the ladder: positive direction is harder, negative is easier.
    Stops at either end.
    """
    ladder = list(Difficulty)
    index = ladder.index(current) + direction
    index = max(0, min(len(ladder) - 1, index))
    return ladder[index]


# =============================================================================
# MODIFIER SOURCES
# =============================================================================


@dataclass
class ModifierSource:
    """A single named modifier and whether it currently applies."""
    key: str
    value: int
    active: bool = True
    source: str = ""
    label: str = ""

    @property
    def toggle_key(self) -> str:
        """Key used to toggle situational modifiers: key_source."""
        return f"{self.key}_{self.source}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value,
            "active": self.active,
            "source": self.source,
            "label": self.label,
        }


def aggregate(sources: Iterable[ModifierSource]) -> int:
    """Sum every active source."""
    return sum(s.value for s in sources if s.active)


class ModifierSet:
    """
    Ordered collection of named modifier sources.

    Sources with the same key are grouped in breakdown(), so several
    situational bonuses report as one "situational" entry.
    """

    def __init__(self, sources: Optional[Iterable[ModifierSource]] = None):
        self._sources: list[ModifierSource] = list(sources or [])

    def __iter__(self):
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    @property
    def sources(self) -> list[ModifierSource]:
        return self._sources.copy()

    def add(
        self,
        key: str,
        value: int,
        active: bool = True,
        source: str = "",
        label: str = "",
    ) -> ModifierSource:
        """Append a new modifier source."""
        entry = ModifierSource(key=key, value=value, active=active, source=source, label=label)
        self._sources.append(entry)
        return entry

    def set(self, key: str, value: int, active: bool = True) -> ModifierSource:
        """Replace the value of the first source with this key, or add it."""
        for entry in self._sources:
            if entry.key == key:
                entry.value = value
                entry.active = active
                return entry
        return self.add(key, value, active)

    def get(self, key: str) -> Optional[ModifierSource]:
        for entry in self._sources:
            if entry.key == key:
                return entry
        return None

    def find_toggle(self, toggle_key: str) -> Optional[ModifierSource]:
        for entry in self._sources:
            if entry.toggle_key == toggle_key:
                return entry
        return None

    def toggle(self, toggle_key: str) -> bool:
        """
        Flip a source identified by its key_source toggle key.

        Returns:
            The new active state, or False if no such source exists
        """
        entry = self.find_toggle(toggle_key) or self.get(toggle_key)
        if entry is None:
            logger.debug(f"No modifier to toggle: {toggle_key}")
            return False
        entry.active = not entry.active
        return entry.active

    def total(self) -> int:
        return aggregate(self._sources)

    def total_for(self, key: str) -> int:
        return aggregate(s for s in self._sources if s.key == key)

    def breakdown(self) -> dict[str, int]:
        """Active totals grouped by key, in first-seen order."""
        result: dict[str, int] = {}
        for entry in self._sources:
            if entry.key not in result:
                result[entry.key] = 0
            if entry.active:
                result[entry.key] += entry.value
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "sources": [s.to_dict() for s in self._sources],
            "total": self.total(),
        }


# =============================================================================
# ROLL MODIFIERS
# =============================================================================


@dataclass
class RollModifiers:
    """
    The modifier state of one test: difficulty, situational toggles,
    a custom stepped modifier, and any extra named sources (range, aim,
    attack mode, training).
    """
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    situational: ModifierSet = field(default_factory=ModifierSet)
    custom: int = 0
    extra: ModifierSet = field(default_factory=ModifierSet)

    def step_difficulty(self, direction: int) -> Difficulty:
        self.difficulty = step_difficulty(self.difficulty, direction)
        return self.difficulty

    def add_situational(self, key: str, value: int, source: str = "", active: bool = False) -> ModifierSource:
        """Situational modifiers start switched off."""
        return self.situational.add(key, value, active=active, source=source)

    def toggle_situational(self, toggle_key: str) -> bool:
        return self.situational.toggle(toggle_key)

    def increase_custom(self) -> int:
        self.custom += CUSTOM_MODIFIER_STEP
        return self.custom

    def decrease_custom(self) -> int:
        self.custom -= CUSTOM_MODIFIER_STEP
        return self.custom

    def reset_custom(self) -> None:
        self.custom = 0

    def to_modifier_map(self) -> dict[str, int]:
        """
        Flatten into the named offsets recorded on a roll:
        difficulty, situational, modifier, then any extra keys.
        """
        modifiers = {
            "difficulty": self.difficulty.modifier,
            "situational": self.situational.total(),
            "modifier": self.custom,
        }
        for key, value in self.extra.breakdown().items():
            modifiers[key] = modifiers.get(key, 0) + value
        return modifiers

    def total(self) -> int:
        return sum(self.to_modifier_map().values())


def compute_final_target(base_target: int, modifiers: dict[str, int]) -> int:
    """Base target plus every named offset, never below 0."""
    return max(0, base_target + sum(modifiers.values()))
