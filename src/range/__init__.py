"""Range module.

Classifies target distance into range brackets and resolves weapon and
psychic power maximum ranges.
"""

from src.range.range_calculator import (
    RANGE_BRACKETS,
    RangeBracket,
    RangeResult,
    calculate_range_bracket,
    calculate_range_modifier,
    calculate_token_distance,
    format_range_display,
    is_out_of_range,
)
from src.range.weapon_range import (
    WeaponRangeProfile,
    calculate_psychic_power_range,
    calculate_weapon_max_range,
    calculate_weapon_range,
    evaluate_range,
)

__all__ = [
    "RANGE_BRACKETS",
    "RangeBracket",
    "RangeResult",
    "calculate_range_bracket",
    "calculate_range_modifier",
    "calculate_token_distance",
    "format_range_display",
    "is_out_of_range",
    "WeaponRangeProfile",
    "calculate_psychic_power_range",
    "calculate_weapon_max_range",
    "calculate_weapon_range",
    "evaluate_range",
]
