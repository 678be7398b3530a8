"""
Percentile roll resolution.

Resolves a d100 result against a target number:

- A roll of 01 always succeeds.
- A roll of 100 always fails, unless the target itself is 100 or more.
- Otherwise the roll succeeds when it is at or under the target.

The margin is counted in degrees: one degree for any success or failure,
plus one more for every full 10 points beyond the target.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import logging

from src.data_models import DiceRoller
from src.observability.run_log import get_run_log

logger = logging.getLogger(__name__)


CRITICAL_SUCCESS_MAX_ROLL = 5
CRITICAL_FAILURE_MIN_ROLL = 96
CRITICAL_DEGREES = 3


class TargetBand(str, Enum):
    """Rough chance of success, used to colour a target number."""
    DIRE = "dire"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    GREAT = "great"
    LEGENDARY = "legendary"


_TARGET_BANDS: list[tuple[int, TargetBand]] = [
    (15, TargetBand.DIRE),
    (30, TargetBand.POOR),
    (45, TargetBand.FAIR),
    (60, TargetBand.GOOD),
    (80, TargetBand.GREAT),
]


def get_target_band(target: int) -> TargetBand:
    for limit, band in _TARGET_BANDS:
        if target <= limit:
            return band
    return TargetBand.LEGENDARY


def degree_step(high: int, low: int) -> int:
    """Extra degrees: one per full 10 points, never negative."""
    return max(0, (high - low) // 10)


def is_success(target: int, total: int) -> bool:
    if total == 1:
        return True
    if total == 100:
        return target >= 100
    return total <= target


@dataclass
class RollOutcome:
    """Result of a percentile test against a target number."""

    total: int
    target: int
    success: bool
    degrees_of_success: int = 0
    degrees_of_failure: int = 0
    manual: bool = False
    modifiers: dict[str, int] = field(default_factory=dict)

    @property
    def degrees(self) -> int:
        """Positive for success, negative for failure."""
        if self.success:
            return self.degrees_of_success
        return -self.degrees_of_failure

    @property
    def is_doubles(self) -> bool:
        """Tens and units digits match (11, 22, ... 99)."""
        return self.total // 10 == self.total % 10

    @property
    def is_critical_success(self) -> bool:
        if not self.success:
            return False
        return self.total <= CRITICAL_SUCCESS_MAX_ROLL or self.degrees_of_success >= CRITICAL_DEGREES

    @property
    def is_critical_failure(self) -> bool:
        if self.success:
            return False
        return self.total >= CRITICAL_FAILURE_MIN_ROLL or self.degrees_of_failure >= CRITICAL_DEGREES

    @property
    def triggers_righteous_fury(self) -> bool:
        """A successful attack roll on doubles."""
        return self.success and self.is_doubles

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "finalTarget": self.target,
            "success": self.success,
            "degreesOfSuccess": self.degrees_of_success,
            "degreesOfFailure": self.degrees_of_failure,
            "manual": self.manual,
            "modifiers": dict(self.modifiers),
        }

    def __str__(self) -> str:
        if self.success:
            return f"{self.total} vs {self.target}: Success ({self.degrees_of_success} DoS)"
        return f"{self.total} vs {self.target}: Failure ({self.degrees_of_failure} DoF)"


def resolve(target: int, rolled_total: int) -> RollOutcome:
    """
    Resolve a rolled total against a target number.

    Args:
        target: Final target number
        rolled_total: d100 result, 1-100

    Returns:
        RollOutcome with exactly one of DoS/DoF set
    """
    success = is_success(target, rolled_total)
    outcome = RollOutcome(total=rolled_total, target=target, success=success)
    if success:
        outcome.degrees_of_success = 1 + degree_step(target, rolled_total)
    else:
        outcome.degrees_of_failure = 1 + degree_step(rolled_total, target)
    return outcome


# =============================================================================
# MANUAL ENTRY
# =============================================================================


def _parse_digit(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        digit = int(str(value).strip())
    except ValueError:
        return None
    if 0 <= digit <= 9:
        return digit
    return None


def parse_manual_dice(tens: Any, units: Any) -> Optional[int]:
    """
    Combine two physical d10 results into a d100 total.

    Each die must read 0-9; 0 and 0 is 100. Returns None for an incomplete
    or malformed entry.
    """
    tens_digit = _parse_digit(tens)
    units_digit = _parse_digit(units)
    if tens_digit is None or units_digit is None:
        return None
    total = tens_digit * 10 + units_digit
    return 100 if total == 0 else total


def parse_single_value(value: Any) -> Optional[int]:
    """A d100 total typed as one number; must be 1-100, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        total = int(str(value).strip())
    except ValueError:
        return None
    if 1 <= total <= 100:
        return total
    return None


# =============================================================================
# OPPOSED TESTS
# =============================================================================


@dataclass
class OpposedResult:
    """Outcome of an opposed test."""
    source: RollOutcome
    target: Optional[RollOutcome] = None
    success: bool = False

    @property
    def is_unopposed(self) -> bool:
        return self.target is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.to_dict(),
            "target": self.target.to_dict() if self.target else None,
            "success": self.success,
        }


def opposed_test(
    source: Optional[RollOutcome],
    target: Optional[RollOutcome] = None,
) -> Optional[OpposedResult]:
    """
    Compare two resolved tests.

    The source wins when it succeeds and the target either fails or scores
    no more degrees of success. A lone source roll stands unopposed.
    Returns None without a source roll.
    """
    if source is None:
        return None
    if target is None:
        return OpposedResult(source=source, success=source.success)

    success = source.success and (
        not target.success or source.degrees_of_success >= target.degrees_of_success
    )
    return OpposedResult(source=source, target=target, success=success)


# =============================================================================
# RESOLVER
# =============================================================================


class RollResolver:
    """
    Resolves percentile tests and records them in the run log.

    Rolls come from the DiceRoller (digital) or from manual entry.
    """

    def __init__(self):
        self._dice = DiceRoller()

    def resolve_total(
        self,
        target: int,
        total: int,
        reason: str = "",
        manual: bool = False,
        modifiers: Optional[dict[str, int]] = None,
    ) -> RollOutcome:
        """Resolve a known total and log it."""
        outcome = resolve(target, total)
        outcome.manual = manual
        outcome.modifiers = dict(modifiers or {})
        get_run_log().log_roll(
            total=outcome.total,
            target=target,
            success=outcome.success,
            degrees=outcome.degrees,
            manual=manual,
            reason=reason,
            context={"modifiers": outcome.modifiers} if outcome.modifiers else None,
        )
        logger.debug(f"{reason or 'Test'}: {outcome}")
        return outcome

    def roll(
        self,
        target: int,
        reason: str = "",
        modifiers: Optional[dict[str, int]] = None,
    ) -> RollOutcome:
        """Roll d100 digitally against a target."""
        result = self._dice.roll_percentile(reason)
        return self.resolve_total(target, result.total, reason, manual=False, modifiers=modifiers)

    def resolve_manual(
        self,
        target: int,
        tens: Any,
        units: Any,
        reason: str = "",
        modifiers: Optional[dict[str, int]] = None,
    ) -> Optional[RollOutcome]:
        """Resolve two entered dice; None while the entry is incomplete."""
        total = parse_manual_dice(tens, units)
        if total is None:
            return None
        return self.resolve_total(target, total, reason, manual=True, modifiers=modifiers)

    def resolve_single(
        self,
        target: int,
        value: Any,
        reason: str = "",
        modifiers: Optional[dict[str, int]] = None,
    ) -> Optional[RollOutcome]:
        """Resolve a typed total; None while the entry is invalid."""
        total = parse_single_value(value)
        if total is None:
            return None
        return self.resolve_total(target, total, reason, manual=True, modifiers=modifiers)


# Module-level singleton accessor
_resolver: Optional[RollResolver] = None


def get_roll_resolver() -> RollResolver:
    """Get the global roll resolver instance."""
    global _resolver
    if _resolver is None:
        _resolver = RollResolver()
    return _resolver
