"""
Characteristic model.

Derives a characteristic's total and bonus from its stored components:

    total = base + advance * 5 + modifier
    bonus = floor(total / 10) * unnatural   (only when unnatural >= 2)

The unnatural value is an explicit multiplier on the bonus. Values of 0 and 1
both mean "no unnatural characteristic".
"""

from dataclasses import dataclass
from typing import Any, Optional, Union
import logging

from src.data_models import Characteristic, coerce_int

logger = logging.getLogger(__name__)


ADVANCE_STEP = 5
MAX_ADVANCE = 4

# Key -> (label, short)
CHARACTERISTIC_DEFINITIONS: dict[str, tuple[str, str]] = {
    "weaponSkill": ("Weapon Skill", "WS"),
    "ballisticSkill": ("Ballistic Skill", "BS"),
    "strength": ("Strength", "S"),
    "toughness": ("Toughness", "T"),
    "agility": ("Agility", "Ag"),
    "intelligence": ("Intelligence", "Int"),
    "perception": ("Perception", "Per"),
    "willpower": ("Willpower", "WP"),
    "fellowship": ("Fellowship", "Fel"),
    "influence": ("Influence", "Inf"),
}

CHARACTERISTIC_KEYS: list[str] = list(CHARACTERISTIC_DEFINITIONS)

# Short name -> key
CHARACTERISTIC_MAP: dict[str, str] = {
    short: key for key, (_, short) in CHARACTERISTIC_DEFINITIONS.items()
}


@dataclass
class CharacteristicValues:
    """Derived values for one characteristic."""
    key: str
    total: int
    bonus: int

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "total": self.total, "bonus": self.bonus}


CharacteristicInput = Union[Characteristic, dict[str, Any], None]


def _as_characteristic(char: CharacteristicInput) -> Characteristic:
    if isinstance(char, Characteristic):
        return char
    return Characteristic.from_dict(char)


def compute_total(char: CharacteristicInput, include_advance: bool = True) -> int:
    """Total of a characteristic. NPC records omit advances."""
    char = _as_characteristic(char)
    advance = coerce_int(char.advance) if include_advance else 0
    return coerce_int(char.base) + advance * ADVANCE_STEP + coerce_int(char.modifier)


def compute_bonus(total: int, unnatural: int = 0) -> int:
    """Tens digit of the total, multiplied by an unnatural value of 2 or more."""
    bonus = total // 10
    if unnatural >= 2:
        bonus *= unnatural
    return bonus


def compute_total_and_bonus(
    char: CharacteristicInput,
    include_advance: bool = True,
) -> tuple[int, int]:
    """
    Compute the total and bonus of a characteristic.

    Args:
        char: A Characteristic or a plain record with base/advance/modifier/unnatural
        include_advance: False for NPC records, which have no advances

    Returns:
        Tuple of (total, bonus)
    """
    char = _as_characteristic(char)
    total = compute_total(char, include_advance)
    return total, compute_bonus(total, coerce_int(char.unnatural))


def resolve_characteristic_key(name: str) -> Optional[str]:
    """Resolve a key or short name ("WS", "ag") to a characteristic key."""
    if not name:
        return None
    if name in CHARACTERISTIC_DEFINITIONS:
        return name
    lowered = name.lower()
    for short, key in CHARACTERISTIC_MAP.items():
        if short.lower() == lowered or key.lower() == lowered:
            return key
    return None


class CharacteristicSet:
    """
    The characteristics of one actor, with derived totals and bonuses.

    Unknown keys resolve to None rather than raising.
    """

    def __init__(
        self,
        characteristics: Optional[dict[str, CharacteristicInput]] = None,
        include_advance: bool = True,
    ):
        self.include_advance = include_advance
        self._characteristics: dict[str, Characteristic] = {}
        for key, value in (characteristics or {}).items():
            self._characteristics[key] = _as_characteristic(value)

    @classmethod
    def for_npc(cls, characteristics: Optional[dict[str, CharacteristicInput]] = None) -> "CharacteristicSet":
        return cls(characteristics, include_advance=False)

    def get(self, name: str) -> Optional[Characteristic]:
        key = resolve_characteristic_key(name)
        if key is None:
            return self._characteristics.get(name)
        return self._characteristics.get(key)

    def values(self, name: str) -> Optional[CharacteristicValues]:
        """Derived total and bonus for one characteristic, or None if unknown."""
        char = self.get(name)
        if char is None:
            logger.debug(f"Unknown characteristic requested: {name}")
            return None
        key = resolve_characteristic_key(name) or name
        total, bonus = compute_total_and_bonus(char, self.include_advance)
        return CharacteristicValues(key=key, total=total, bonus=bonus)

    def total(self, name: str) -> int:
        """Total of a characteristic; 0 when it is missing."""
        derived = self.values(name)
        return derived.total if derived else 0

    def bonus(self, name: str) -> int:
        """Bonus of a characteristic; 0 when it is missing."""
        derived = self.values(name)
        return derived.bonus if derived else 0

    def compute_all(self) -> dict[str, CharacteristicValues]:
        return {key: self.values(key) for key in self._characteristics}

    def keys(self) -> list[str]:
        return list(self._characteristics)
