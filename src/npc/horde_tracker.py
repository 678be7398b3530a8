"""
Horde magnitude tracking.

A horde is a group combatant whose remaining numbers are an abstract
magnitude pool rather than individual wounds. The tracker holds the pool and
the horde's enabled/disabled state:

    DISABLED --enable--> ENABLED
    ENABLED --disable--> DISABLED
    ENABLED --convert_to_single--> DISABLED (combatant type reclassified)

Magnitude always stays within [0, max]. Reaching 0 does not force any
transition; callers check is_destroyed and decide what to do.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Union
import logging
import math

from src.data_models import CombatantType, coerce_int, resolve_combatant_type, round_half_up
from src.observability.run_log import get_run_log

logger = logging.getLogger(__name__)


DEFAULT_MAGNITUDE = 30
MIN_DAMAGE_MULTIPLIER = 0.5

HORDE_TYPES = (CombatantType.HORDE, CombatantType.SWARM)


class HordeState(str, Enum):
    """Horde mode of a combatant."""
    DISABLED = "disabled"
    ENABLED = "enabled"


class InvalidTransitionError(Exception):
    """Raised when a horde transition is not valid from the current state."""
    pass


# (from_state, trigger) -> to_state
VALID_TRANSITIONS: dict[tuple[HordeState, str], HordeState] = {
    (HordeState.DISABLED, "enable"): HordeState.ENABLED,
    (HordeState.ENABLED, "disable"): HordeState.DISABLED,
    (HordeState.ENABLED, "convert_to_single"): HordeState.DISABLED,
}


@dataclass
class MagnitudeLogEntry:
    """One change to a horde's magnitude. Damage is recorded as negative."""
    amount: int
    source: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "source": self.source,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MagnitudeLogEntry":
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        elif isinstance(timestamp, (int, float)):
            # Epoch milliseconds
            timestamp = datetime.fromtimestamp(timestamp / 1000)
        else:
            timestamp = datetime.now()
        return cls(
            amount=coerce_int(data.get("amount")),
            source=data.get("source", ""),
            timestamp=timestamp,
        )


@dataclass
class HordeTransition:
    """Record of one horde state change."""
    timestamp: datetime
    from_state: HordeState
    to_state: HordeState
    trigger: str
    context: dict[str, Any] = field(default_factory=dict)


class HordeMagnitudeTracker:
    """
    Tracks a horde's magnitude pool and enabled state.

    Magnitude damage and restoration are ignored while the horde is
    disabled. Transitions are recorded locally and in the run log.
    """

    def __init__(
        self,
        max_magnitude: int = DEFAULT_MAGNITUDE,
        current: Optional[int] = None,
        enabled: bool = False,
        combatant_type: Union[CombatantType, str] = CombatantType.TROOP,
        traits: Optional[list[str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            max_magnitude: Size of the magnitude pool (at least 1)
            current: Starting magnitude, defaults to max; clamped to [0, max]
            enabled: Start in horde mode; horde and swarm types always do
            combatant_type: Combatant type of the owning statblock
            traits: Horde-specific trait names
            clock: Time source for log entries, replaceable in tests
        """
        self.combatant_type = resolve_combatant_type(combatant_type)
        self.max_magnitude = max(1, max_magnitude)
        start = self.max_magnitude if current is None else current
        self.current = max(0, min(self.max_magnitude, start))
        self.traits: list[str] = list(traits or [])
        self.magnitude_log: list[MagnitudeLogEntry] = []
        self._clock = clock or datetime.now
        self._history: list[HordeTransition] = []

        if self.combatant_type in HORDE_TYPES and not enabled:
            logger.debug(f"Auto-enabling horde mode for {self.combatant_type.value}")
            enabled = True
        self._state = HordeState.ENABLED if enabled else HordeState.DISABLED

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> HordeState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state == HordeState.ENABLED

    @property
    def history(self) -> list[HordeTransition]:
        """Transition history, oldest first."""
        return self._history.copy()

    def can_transition(self, trigger: str) -> bool:
        return (self._state, trigger) in VALID_TRANSITIONS

    def transition(self, trigger: str, context: Optional[dict[str, Any]] = None) -> HordeState:
        """
        Apply a state transition.

        Raises:
            InvalidTransitionError: If the trigger is not valid from the current state
        """
        key = (self._state, trigger)
        if key not in VALID_TRANSITIONS:
            valid = [t for (state, t) in VALID_TRANSITIONS if state == self._state]
            raise InvalidTransitionError(
                f"Cannot trigger '{trigger}' from horde state '{self._state.value}'. "
                f"Valid triggers: {valid}"
            )

        old_state = self._state
        self._state = VALID_TRANSITIONS[key]
        context = context or {}
        self._history.append(
            HordeTransition(
                timestamp=self._clock(),
                from_state=old_state,
                to_state=self._state,
                trigger=trigger,
                context=context,
            )
        )
        get_run_log().log_transition(
            from_state=old_state.value,
            to_state=self._state.value,
            trigger=trigger,
            context=context,
        )
        logger.info(f"Horde {old_state.value} -> {self._state.value} ({trigger})")
        return self._state

    def enable(self) -> HordeState:
        """Enter horde mode. Already enabled is a no-op."""
        if self.enabled:
            return self._state
        return self.transition("enable")

    def disable(self) -> HordeState:
        """Leave horde mode. Already disabled is a no-op."""
        if not self.enabled:
            return self._state
        return self.transition("disable")

    def toggle(self) -> HordeState:
        return self.disable() if self.enabled else self.enable()

    def convert_to_single_enemy(self) -> Optional[CombatantType]:
        """
        Turn a horde into a single enemy: disable horde mode and reclassify
        the type (swarm becomes creature, anything else elite).

        Returns:
            The new combatant type, or None if horde mode is not enabled
        """
        if not self.enabled:
            logger.warning("Cannot convert to single enemy: horde mode is not enabled")
            return None

        old_type = self.combatant_type
        new_type = CombatantType.CREATURE if old_type == CombatantType.SWARM else CombatantType.ELITE
        self.transition(
            "convert_to_single",
            context={"from_type": old_type.value, "to_type": new_type.value},
        )
        self.combatant_type = new_type
        return new_type

    # -------------------------------------------------------------------------
    # Magnitude
    # -------------------------------------------------------------------------

    def apply_magnitude_damage(self, amount: int, source: str = "") -> int:
        """
        Reduce magnitude, clamped to [0, max]. Ignored while disabled.

        Returns:
            Current magnitude after the change
        """
        if not self.enabled:
            logger.debug(f"Ignoring magnitude damage {amount}: horde mode disabled")
            return self.current

        self.current = max(0, min(self.max_magnitude, self.current - amount))
        self.magnitude_log.append(MagnitudeLogEntry(amount=-amount, source=source, timestamp=self._clock()))
        logger.debug(f"Horde takes {amount} magnitude damage ({source or 'unknown'}): {self.current}/{self.max_magnitude}")
        return self.current

    def restore_magnitude(self, amount: int, source: str = "") -> int:
        """
        Restore magnitude, clamped to [0, max]. Ignored while disabled.

        Returns:
            Current magnitude after the change
        """
        if not self.enabled:
            logger.debug(f"Ignoring magnitude restore {amount}: horde mode disabled")
            return self.current

        self.current = max(0, min(self.max_magnitude, self.current + amount))
        self.magnitude_log.append(MagnitudeLogEntry(amount=amount, source=source, timestamp=self._clock()))
        return self.current

    @property
    def is_destroyed(self) -> bool:
        return self.enabled and self.current <= 0

    @property
    def magnitude_fraction(self) -> float:
        if self.max_magnitude <= 0:
            return 0.0
        return self.current / self.max_magnitude

    @property
    def magnitude_percent(self) -> int:
        """Remaining magnitude as a percentage; 0 when disabled."""
        if not self.enabled:
            return 0
        return round_half_up(self.magnitude_fraction * 100)

    @property
    def damage_multiplier(self) -> float:
        """Damage output multiplier: 5x at full magnitude down to 0.5x; 1 when disabled."""
        if not self.enabled:
            return 1
        return max(MIN_DAMAGE_MULTIPLIER, math.ceil(self.magnitude_fraction * 10) / 2)

    @property
    def size_modifier(self) -> int:
        """Token size bonus, 0-3 with remaining magnitude; 0 when disabled."""
        if not self.enabled:
            return 0
        return math.floor(self.magnitude_fraction * 3)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """The statblock's horde block."""
        return {
            "enabled": self.enabled,
            "magnitude": {"max": self.max_magnitude, "current": self.current},
            "magnitudeLog": [entry.to_dict() for entry in self.magnitude_log],
            "traits": list(self.traits),
            "damageMultiplier": self.damage_multiplier,
            "sizeModifier": self.size_modifier,
        }

    @classmethod
    def from_dict(
        cls,
        data: Optional[dict[str, Any]],
        combatant_type: Union[CombatantType, str] = CombatantType.TROOP,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "HordeMagnitudeTracker":
        """Build a tracker from a statblock's horde block."""
        data = data or {}
        magnitude = data.get("magnitude") or {}
        max_magnitude = coerce_int(magnitude.get("max"), DEFAULT_MAGNITUDE)
        tracker = cls(
            max_magnitude=max_magnitude,
            current=coerce_int(magnitude.get("current"), max_magnitude),
            enabled=bool(data.get("enabled", False)),
            combatant_type=combatant_type,
            traits=data.get("traits"),
            clock=clock,
        )
        tracker.magnitude_log = [MagnitudeLogEntry.from_dict(e) for e in data.get("magnitudeLog", [])]
        return tracker

    @classmethod
    def from_statblock(
        cls,
        statblock: dict[str, Any],
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "HordeMagnitudeTracker":
        return cls.from_dict(
            statblock.get("horde"),
            combatant_type=statblock.get("type", CombatantType.TROOP.value),
            clock=clock,
        )

    def write_to(self, statblock: dict[str, Any]) -> None:
        """Store the horde block and combatant type back onto a statblock."""
        statblock["horde"] = self.to_dict()
        statblock["type"] = self.combatant_type.value
