"""
Weapon and psychic power maximum range.

Resolves a base range (integer, numeric text, or a simple bonus formula such
as "SB*3"), applies weapon upgrades, and classifies the target distance.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
import logging
import math
import re

from src.range.range_calculator import RangeResult, calculate_range_modifier

logger = logging.getLogger(__name__)


MAXIMAL_RANGE_BONUS = 10
FOREARM_MOUNTING_FACTOR = 0.66
PISTOL_GRIP_FACTOR = 0.5
TELESCOPIC_MODIFICATIONS = ("telescopic sight", "omni-scope")

_FORMULA_PATTERN = re.compile(r"^\s*(?:(\d+)\s*\*\s*([A-Za-z]+)|([A-Za-z]+)\s*\*\s*(\d+)|([A-Za-z]+))\s*$")

RangeValue = Union[int, float, str, None]


def evaluate_range(value: RangeValue, bonuses: Optional[dict[str, int]] = None) -> int:
    """
    Evaluate a range entry.

    Integers and numeric strings are used as-is. "SB*3", "3*SB" and "WPB"
    multiply a named characteristic bonus. Empty, "N/A" and unparseable
    entries give 0 with a warning for the latter.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).strip()
    if text in ("", "N/A"):
        return 0
    if re.fullmatch(r"\d+", text):
        return int(text)

    bonuses = {k.upper(): v for k, v in (bonuses or {}).items()}
    match = _FORMULA_PATTERN.match(text)
    if match:
        if match.group(1):
            factor, name = int(match.group(1)), match.group(2)
        elif match.group(3):
            name, factor = match.group(3), int(match.group(4))
        else:
            name, factor = match.group(5), 1
        if name.upper() in bonuses:
            return bonuses[name.upper()] * factor

    logger.warning(f"Range formula failed - setting to 0: {value}")
    return 0


@dataclass
class WeaponRangeProfile:
    """The range-relevant parts of a weapon."""
    range: RangeValue = 0
    is_melee: bool = False
    qualities: set[str] = field(default_factory=set)
    modifications: list[str] = field(default_factory=list)

    def has_quality(self, name: str) -> bool:
        return name.lower() in {q.lower() for q in self.qualities}

    def has_modification(self, name: str) -> bool:
        return name.lower() in {m.lower() for m in self.modifications}


def calculate_weapon_max_range(
    weapon: Optional[WeaponRangeProfile],
    bonuses: Optional[dict[str, int]] = None,
) -> int:
    """
    Maximum range of a weapon after upgrades.

    Melee weapons have range 1; a missing weapon has range 0.
    """
    if weapon is None:
        return 0
    if weapon.is_melee:
        return 1

    max_range = evaluate_range(weapon.range, bonuses)
    if weapon.has_quality("maximal"):
        max_range += MAXIMAL_RANGE_BONUS
    if weapon.has_modification("forearm weapon mounting"):
        max_range = int(math.floor(max_range * FOREARM_MOUNTING_FACTOR))
    if weapon.has_modification("pistol grip"):
        max_range = int(math.floor(max_range * PISTOL_GRIP_FACTOR))
    return max_range


def calculate_weapon_range(
    weapon: WeaponRangeProfile,
    distance: float,
    aim_modifier: int = 0,
    bonuses: Optional[dict[str, int]] = None,
) -> tuple[int, RangeResult]:
    """
    Maximum range and range bracket of a weapon attack.

    A telescopic sight or omni-scope cancels a negative range modifier
    while the attacker is aiming.

    Returns:
        Tuple of (max_range, RangeResult)
    """
    max_range = calculate_weapon_max_range(weapon, bonuses)
    result = calculate_range_modifier(
        distance=distance,
        weapon_range=max_range,
        weapon_qualities=weapon.qualities,
        is_ranged_weapon=not weapon.is_melee,
    )

    if result.modifier < 0 and aim_modifier > 0:
        if any(weapon.has_modification(m) for m in TELESCOPIC_MODIFICATIONS):
            result.modifier = 0
            result.modified_by = "telescopic-sight"
    return max_range, result


def calculate_psychic_power_range(
    power_range: RangeValue,
    distance: float,
    bonuses: Optional[dict[str, int]] = None,
) -> tuple[int, RangeResult]:
    """Psychic powers use brackets for reach only; they get no range modifier."""
    max_range = evaluate_range(power_range, bonuses)
    result = calculate_range_modifier(distance=distance, weapon_range=max_range)
    result.modifier = 0
    return max_range, result
