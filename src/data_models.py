"""
Shared data structures for the percentile resolution engine.

These structures are plain records: actor characteristics and skills,
combatant classifications, and the centralized dice roller. Every component
reads them, none owns them exclusively.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union
import logging
import math
import random

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class ActorKind(str, Enum):
    """Actor models that carry different untrained-skill rules."""
    ACOLYTE = "acolyte"
    NPC = "npc"
    CREATURE = "creature"


class CombatantType(str, Enum):
    """NPC combatant classifications."""
    TROOP = "troop"
    ELITE = "elite"
    MASTER = "master"
    HORDE = "horde"
    SWARM = "swarm"
    CREATURE = "creature"
    DAEMON = "daemon"
    XENOS = "xenos"


def resolve_combatant_type(value: Union[CombatantType, str, None]) -> CombatantType:
    """Combatant type for a loosely typed value; unknown values fall back to troop."""
    if isinstance(value, CombatantType):
        return value
    try:
        return CombatantType(str(value).lower())
    except ValueError:
        logger.warning(f"Unknown combatant type '{value}', using {CombatantType.TROOP.value}")
        return CombatantType.TROOP


class TrainingLevel(str, Enum):
    """Skill training ladder, lowest to highest."""
    UNTRAINED = "untrained"
    TRAINED = "trained"
    PLUS_10 = "plus10"
    PLUS_20 = "plus20"

    @property
    def rank(self) -> int:
        return list(TrainingLevel).index(self)


class Craftsmanship(str, Enum):
    """Item craftsmanship grades."""
    POOR = "poor"
    COMMON = "common"
    GOOD = "good"
    BEST = "best"


# =============================================================================
# NUMERIC HELPERS
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def coerce_int(value: Any, default: int = 0) -> int:
    """Read an integer field from a loosely typed record."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# =============================================================================
# CHARACTERISTICS AND SKILLS
# =============================================================================


@dataclass
class Characteristic:
    """A characteristic as stored on an actor record."""
    base: int = 0
    advance: int = 0    # 0-4, each step is +5
    modifier: int = 0
    unnatural: int = 0  # Bonus multiplier, only applied at 2 or more
    label: str = ""
    short: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "advance": self.advance,
            "modifier": self.modifier,
            "unnatural": self.unnatural,
            "label": self.label,
            "short": self.short,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Characteristic":
        """Create from a record; missing or malformed numbers become 0."""
        data = data or {}
        return cls(
            base=coerce_int(data.get("base")),
            advance=coerce_int(data.get("advance")),
            modifier=coerce_int(data.get("modifier")),
            unnatural=coerce_int(data.get("unnatural")),
            label=data.get("label", ""),
            short=data.get("short", ""),
        )


@dataclass
class Specialization:
    """A named sub-skill with its own training ladder."""
    name: str
    characteristic: Optional[str] = None  # Falls back to the parent skill
    trained: bool = False
    plus10: bool = False
    plus20: bool = False
    bonus: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "characteristic": self.characteristic,
            "trained": self.trained,
            "plus10": self.plus10,
            "plus20": self.plus20,
            "bonus": self.bonus,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Specialization":
        return cls(
            name=data.get("name", ""),
            characteristic=data.get("characteristic") or None,
            trained=bool(data.get("trained", False)),
            plus10=bool(data.get("plus10", False)),
            plus20=bool(data.get("plus20", False)),
            bonus=coerce_int(data.get("bonus")),
        )


@dataclass
class Skill:
    """A skill with its training ladder and optional specializations."""
    characteristic: str = "perception"
    trained: bool = False
    plus10: bool = False
    plus20: bool = False
    bonus: int = 0
    label: str = ""
    entries: list[Specialization] = field(default_factory=list)

    @property
    def is_specialist(self) -> bool:
        return bool(self.entries)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "characteristic": self.characteristic,
            "trained": self.trained,
            "plus10": self.plus10,
            "plus20": self.plus20,
            "bonus": self.bonus,
            "label": self.label,
        }
        if self.entries:
            data["entries"] = [e.to_dict() for e in self.entries]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Skill":
        return cls(
            characteristic=data.get("characteristic") or "perception",
            trained=bool(data.get("trained", False)),
            plus10=bool(data.get("plus10", False)),
            plus20=bool(data.get("plus20", False)),
            bonus=coerce_int(data.get("bonus")),
            label=data.get("label", ""),
            entries=[Specialization.from_dict(e) for e in data.get("entries", [])],
        )


# =============================================================================
# DICE AND RANDOMIZATION
# =============================================================================


class DiceRoller:
    """
    Centralized randomization interface.
    All dice rolls must go through this class for reproducibility and logging.
    """

    _instance = None
    _seed: Optional[int] = None
    _roll_log: list = []

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set random seed for reproducibility."""
        cls._seed = seed
        random.seed(seed)

    @classmethod
    def roll(cls, dice: str, reason: str = "") -> "DiceResult":
        """
        Roll dice using standard notation (e.g., '1d10', '1d10+3', '2d10-1').

        Args:
            dice: Dice notation string
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual rolls and total
        """
        modifier = 0
        if '+' in dice:
            dice_part, mod_part = dice.split('+')
            modifier = int(mod_part)
        elif '-' in dice:
            dice_part, mod_part = dice.split('-')
            modifier = -int(mod_part)
        else:
            dice_part = dice

        num_dice, die_size = dice_part.lower().split('d')
        num_dice = int(num_dice) if num_dice else 1
        die_size = int(die_size)

        rolls = [random.randint(1, die_size) for _ in range(num_dice)]
        total = sum(rolls) + modifier

        result = DiceResult(
            notation=dice,
            rolls=rolls,
            modifier=modifier,
            total=total,
            reason=reason
        )

        cls._roll_log.append(result)
        return result

    @classmethod
    def roll_d10(cls, num_dice: int = 1, reason: str = "") -> "DiceResult":
        """Convenience method for d10 damage and initiative rolls."""
        return cls.roll(f"{num_dice}d10", reason)

    @classmethod
    def roll_percentile(cls, reason: str = "") -> "DiceResult":
        """Roll d100 for percentile tests."""
        return cls.roll("1d100", reason)

    @classmethod
    def get_roll_log(cls) -> list:
        """Get the complete roll log for the session."""
        return cls._roll_log.copy()

    @classmethod
    def clear_roll_log(cls) -> None:
        """Clear the roll log."""
        cls._roll_log = []


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    modifier: int
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.notation}: {self.rolls} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{self.notation}: {self.rolls} - {abs(self.modifier)} = {self.total}"
        return f"{self.notation}: {self.rolls} = {self.total}"
