"""
Range calculator - weapon range brackets and modifiers.

Classifies a target distance against a weapon's base range:

- Point Blank: <= 2m (+30)
- Short Range: <= weapon range / 2 (+10)
- Standard Range: <= weapon range * 2 (0)
- Long Range: <= weapon range * 3 (-10)
- Extreme Range: > weapon range * 3 (-30)

Distance itself is measured by the caller; calculate_token_distance() folds
an elevation difference into a grid path distance.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional
import logging
import math

logger = logging.getLogger(__name__)


class RangeBracket(str, Enum):
    """Discrete distance classifications."""
    MELEE = "melee"
    SELF = "self"
    POINT_BLANK = "pointBlank"
    SHORT = "short"
    STANDARD = "standard"
    LONG = "long"
    EXTREME = "extreme"


@dataclass(frozen=True)
class BracketDefinition:
    """Label, modifier and upper bound (as a multiple of weapon range)."""
    label: str
    modifier: int
    description: str
    max_multiplier: float


RANGE_BRACKETS: dict[RangeBracket, BracketDefinition] = {
    RangeBracket.MELEE: BracketDefinition("Melee", 0, "Melee range", 0),
    RangeBracket.SELF: BracketDefinition("Self", 0, "Self-target", 0),
    RangeBracket.POINT_BLANK: BracketDefinition("Point Blank", 30, "2 meters or less", 0),
    RangeBracket.SHORT: BracketDefinition("Short Range", 10, "Half weapon range or less", 0.5),
    RangeBracket.STANDARD: BracketDefinition("Standard Range", 0, "Up to double weapon range", 2),
    RangeBracket.LONG: BracketDefinition("Long Range", -10, "Up to triple weapon range", 3),
    RangeBracket.EXTREME: BracketDefinition("Extreme Range", -30, "Beyond triple weapon range", math.inf),
}

POINT_BLANK_DISTANCE = 2
GYRO_STABILISED = "gyro-stabilised"
MELTA = "melta"
GYRO_STABILISED_FLOOR = -10
MELTA_BRACKETS = (RangeBracket.POINT_BLANK, RangeBracket.SHORT)

QUALITY_NAMES = {
    GYRO_STABILISED: "Gyro-Stabilised",
    "telescopic-sight": "Telescopic Sight",
}


@dataclass
class RangeResult:
    """Outcome of a range classification."""
    bracket: RangeBracket
    label: str
    modifier: int
    description: str
    modified_by: Optional[str] = None
    is_melta_range: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "bracket": self.bracket.value,
            "label": self.label,
            "modifier": self.modifier,
            "description": self.description,
            "modifiedBy": self.modified_by,
            "isMeltaRange": self.is_melta_range,
        }


def _result_for(bracket: RangeBracket) -> RangeResult:
    definition = RANGE_BRACKETS[bracket]
    return RangeResult(
        bracket=bracket,
        label=definition.label,
        modifier=definition.modifier,
        description=definition.description,
    )


def normalise_qualities(qualities: Optional[Iterable[str]]) -> set[str]:
    return {q.lower() for q in (qualities or ())}


def calculate_range_bracket(distance: float, weapon_range: float) -> RangeResult:
    """
    Classify a distance against a weapon's base range.

    A distance of exactly 0 with a ranged weapon is a self-targeted attack
    or power. Any other distance of 1m or less, or a weapon range of 1m or
    less, is melee.
    """
    distance = max(0, distance)
    if weapon_range > 1 and distance == 0:
        return _result_for(RangeBracket.SELF)
    if weapon_range <= 1 or distance <= 1:
        return _result_for(RangeBracket.MELEE)

    if distance <= POINT_BLANK_DISTANCE:
        return _result_for(RangeBracket.POINT_BLANK)
    for bracket in (RangeBracket.SHORT, RangeBracket.STANDARD, RangeBracket.LONG):
        if distance <= weapon_range * RANGE_BRACKETS[bracket].max_multiplier:
            return _result_for(bracket)
    return _result_for(RangeBracket.EXTREME)


def apply_quality_modifiers(result: RangeResult, qualities: set[str]) -> RangeResult:
    """Gyro-Stabilised weapons are never worse than Long Range."""
    if GYRO_STABILISED in qualities and result.modifier < GYRO_STABILISED_FLOOR:
        result.modifier = GYRO_STABILISED_FLOOR
        result.modified_by = GYRO_STABILISED
    return result


def is_at_melta_range(bracket: RangeBracket) -> bool:
    """Melta doubles penetration at short range, point blank included."""
    return bracket in MELTA_BRACKETS


def calculate_range_modifier(
    distance: float = 0,
    weapon_range: float = 0,
    weapon_qualities: Optional[Iterable[str]] = None,
    is_ranged_weapon: bool = True,
) -> RangeResult:
    """
    Calculate the range bracket and modifier for an attack.

    Args:
        distance: Distance to target in meters (negative clamps to 0)
        weapon_range: Base weapon range in meters
        weapon_qualities: Weapon quality identifiers
        is_ranged_weapon: False for melee weapons, which never use brackets

    Returns:
        RangeResult with bracket, modifier, modified_by and is_melta_range
    """
    if not is_ranged_weapon:
        return _result_for(RangeBracket.MELEE)

    qualities = normalise_qualities(weapon_qualities)
    result = calculate_range_bracket(distance, weapon_range)
    result = apply_quality_modifiers(result, qualities)
    result.is_melta_range = MELTA in qualities and is_at_melta_range(result.bracket)
    logger.debug(
        f"Range {distance}m vs {weapon_range}m: {result.bracket.value} ({result.modifier:+d})"
    )
    return result


def calculate_token_distance(path_distance: float, elevation_difference: float = 0) -> int:
    """Grid path distance corrected for elevation, floored to whole meters."""
    distance = path_distance or 0
    if elevation_difference:
        distance = math.sqrt(distance ** 2 + abs(elevation_difference) ** 2)
    return int(math.floor(distance))


def is_out_of_range(distance: float, weapon_range: float, max_range_multiplier: float = 3) -> bool:
    """True beyond extreme range. Melee weapons are never out of range."""
    if weapon_range <= 1:
        return False
    return distance > weapon_range * max_range_multiplier


def format_modifier(modifier: int) -> str:
    if modifier == 0:
        return "±0"
    return f"+{modifier}" if modifier > 0 else f"{modifier}"


def format_range_display(result: RangeResult) -> dict[str, Any]:
    """Label, signed modifier text and tooltip for a range result."""
    tooltip = result.description
    if result.modified_by:
        name = QUALITY_NAMES.get(result.modified_by, result.modified_by)
        tooltip += f" (Modified by {name})"
    if result.is_melta_range:
        tooltip += " | Melta: Double Penetration"

    return {
        "label": result.label,
        "modifierText": format_modifier(result.modifier),
        "tooltip": tooltip,
        "isMeltaRange": result.is_melta_range,
    }
