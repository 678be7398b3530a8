"""
Roll requests.

A RollRequest is one of four variants, fixed when it is built:

- SimpleRoll: characteristic or skill test
- WeaponRoll: attack with range, aim, attack mode and training modifiers
- PsychicRoll: focus power test; range decides reach but never the target
- ForceFieldRoll: protection check against the field's rating, no modifiers

Each variant carries only its own fields and knows its final target.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union
import logging

from src.data_models import Craftsmanship, DiceRoller
from src.modifiers.attack_options import build_attack_modifiers
from src.modifiers.modifier_aggregator import RollModifiers, compute_final_target
from src.range.range_calculator import RangeResult
from src.range.weapon_range import (
    RangeValue,
    WeaponRangeProfile,
    calculate_psychic_power_range,
    calculate_weapon_range,
)
from src.resolution.roll_resolver import RollOutcome, RollResolver, get_roll_resolver

logger = logging.getLogger(__name__)


class InvalidRollError(Exception):
    """Raised when a roll request cannot be resolved in its current state."""
    pass


class RollType(str, Enum):
    """Roll request variants."""
    SIMPLE = "simple"
    WEAPON = "weapon"
    PSYCHIC = "psychic"
    FORCE_FIELD = "forceField"


OVERLOAD_RATINGS: dict[Craftsmanship, int] = {
    Craftsmanship.POOR: 15,
    Craftsmanship.COMMON: 10,
    Craftsmanship.GOOD: 5,
}
DEFAULT_OVERLOAD_RATING = 1


def overload_rating_for(craftsmanship: Union[Craftsmanship, str, None]) -> int:
    """Force field overload rating by craftsmanship (Best and unknown: 1)."""
    if isinstance(craftsmanship, Craftsmanship):
        return OVERLOAD_RATINGS.get(craftsmanship, DEFAULT_OVERLOAD_RATING)
    try:
        return OVERLOAD_RATINGS.get(Craftsmanship(str(craftsmanship).lower()), DEFAULT_OVERLOAD_RATING)
    except ValueError:
        return DEFAULT_OVERLOAD_RATING


# =============================================================================
# MODIFIED ROLLS
# =============================================================================


@dataclass
class ModifiedRoll:
    """Shared fields of the variants that take modifiers."""
    base_target: int
    name: str = ""
    modifiers: RollModifiers = field(default_factory=RollModifiers)

    roll_type = RollType.SIMPLE

    def modifier_map(self) -> dict[str, int]:
        return self.modifiers.to_modifier_map()

    def final_target(self) -> int:
        return compute_final_target(self.base_target, self.modifier_map())

    def validate(self) -> None:
        """Raise InvalidRollError if the request cannot be rolled."""


@dataclass
class SimpleRoll(ModifiedRoll):
    """Characteristic or skill test."""

    roll_type = RollType.SIMPLE


@dataclass
class WeaponRoll(ModifiedRoll):
    """Weapon attack test."""
    weapon: WeaponRangeProfile = field(default_factory=WeaponRangeProfile)
    distance: float = 0
    attack_mode: str = "standard"
    aim: str = "none"
    conditions: list[str] = field(default_factory=list)
    training_modifier: int = 0
    fire_rate: int = 1  # Rounds available for the chosen mode
    bonuses: dict[str, int] = field(default_factory=dict)

    roll_type = RollType.WEAPON

    @property
    def is_ranged(self) -> bool:
        return not self.weapon.is_melee

    def range_result(self) -> tuple[int, RangeResult]:
        aim_modifier = build_attack_modifiers(self.is_ranged, aim=self.aim).total_for("aim")
        return calculate_weapon_range(self.weapon, self.distance, aim_modifier, self.bonuses)

    def modifier_map(self) -> dict[str, int]:
        modifiers = super().modifier_map()
        attack = build_attack_modifiers(
            self.is_ranged,
            attack_mode=self.attack_mode,
            aim=self.aim,
            conditions=self.conditions,
            training_modifier=self.training_modifier,
        )
        for key, value in attack.breakdown().items():
            modifiers[key] = modifiers.get(key, 0) + value
        _, range_result = self.range_result()
        modifiers["range"] = range_result.modifier
        return modifiers

    def validate(self) -> None:
        if self.fire_rate == 0:
            raise InvalidRollError("Not enough ammo to perform action. Do you need to reload?")


@dataclass
class PsychicRoll(ModifiedRoll):
    """Focus power test."""
    power_name: str = ""
    psy_rating: int = 1
    max_psy_rating: int = 1
    power_range: RangeValue = 0
    distance: float = 0
    bonuses: dict[str, int] = field(default_factory=dict)

    roll_type = RollType.PSYCHIC

    def range_result(self) -> tuple[int, RangeResult]:
        return calculate_psychic_power_range(self.power_range, self.distance, self.bonuses)

    def validate(self) -> None:
        if self.psy_rating < 1 or self.psy_rating > self.max_psy_rating:
            raise InvalidRollError(
                f"Psy rating {self.psy_rating} outside 1-{self.max_psy_rating}"
            )


# =============================================================================
# FORCE FIELDS
# =============================================================================


@dataclass
class ForceFieldOutcome:
    """Result of a force field check."""
    total: int
    protection_rating: int
    overload_rating: int
    success: bool
    overload: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "protectionRating": self.protection_rating,
            "overloadRating": self.overload_rating,
            "success": self.success,
            "overload": self.overload,
        }


@dataclass
class ForceFieldRoll:
    """Force field protection check. Modifiers never apply."""
    protection_rating: int
    craftsmanship: Craftsmanship = Craftsmanship.COMMON
    activated: bool = True
    overloaded: bool = False
    name: str = ""

    roll_type = RollType.FORCE_FIELD

    @property
    def overload_rating(self) -> int:
        return overload_rating_for(self.craftsmanship)

    def final_target(self) -> int:
        return max(0, self.protection_rating)

    def modifier_map(self) -> dict[str, int]:
        return {}

    def validate(self) -> None:
        if not self.activated:
            raise InvalidRollError("Force Field not activated!")
        if self.overloaded:
            raise InvalidRollError("Force Field currently overloaded!")

    def resolve(self, total: int) -> ForceFieldOutcome:
        """The field blocks on a roll at or under its rating and overloads at or under the overload rating."""
        return ForceFieldOutcome(
            total=total,
            protection_rating=self.protection_rating,
            overload_rating=self.overload_rating,
            success=total <= self.protection_rating,
            overload=total <= self.overload_rating,
        )


RollRequest = Union[SimpleRoll, WeaponRoll, PsychicRoll, ForceFieldRoll]


def resolve_request(
    request: RollRequest,
    total: Optional[int] = None,
    resolver: Optional[RollResolver] = None,
) -> Union[RollOutcome, ForceFieldOutcome]:
    """
    Validate and resolve a roll request.

    Args:
        request: Any RollRequest variant
        total: A manually entered d100 total; rolled digitally when None
        resolver: Resolver to use (defaults to the global one)

    Returns:
        RollOutcome, or ForceFieldOutcome for force fields

    Raises:
        InvalidRollError: If the request fails validation
    """
    request.validate()
    resolver = resolver or get_roll_resolver()
    reason = request.name or f"{request.roll_type.value} test"

    if isinstance(request, ForceFieldRoll):
        manual = total is not None
        if total is None:
            total = DiceRoller.roll_percentile(reason).total
        outcome = request.resolve(total)
        if outcome.overload:
            request.overloaded = True
            logger.info(f"{reason}: force field overloaded on {total}")
        logger.debug(f"{reason}: {total} vs {request.protection_rating} manual={manual}")
        return outcome

    target = request.final_target()
    modifiers = request.modifier_map()
    if total is None:
        return resolver.roll(target, reason, modifiers=modifiers)
    return resolver.resolve_total(target, total, reason, manual=True, modifiers=modifiers)
