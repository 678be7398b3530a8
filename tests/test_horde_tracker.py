"""
Tests for horde magnitude tracking.

Tests the horde state machine, magnitude bounds and serialization of
src/npc/horde_tracker.py.
"""

from datetime import datetime
import logging

import pytest

from src.data_models import CombatantType
from src.npc.horde_tracker import (
    VALID_TRANSITIONS,
    HordeMagnitudeTracker,
    HordeState,
    InvalidTransitionError,
    MagnitudeLogEntry,
)


FIXED_TIME = datetime(2024, 3, 1, 20, 0, 0)


@pytest.fixture
def horde(run_log):
    """An enabled 30-magnitude horde with a fixed clock."""
    return HordeMagnitudeTracker(max_magnitude=30, enabled=True, clock=lambda: FIXED_TIME)


class TestConstruction:
    """Tests for tracker setup."""

    def test_defaults(self):
        """A new tracker is full and disabled."""
        tracker = HordeMagnitudeTracker()
        assert tracker.current == 30
        assert tracker.state == HordeState.DISABLED
        assert tracker.enabled is False

    def test_horde_types_auto_enable(self):
        """Horde and swarm types start enabled."""
        assert HordeMagnitudeTracker(combatant_type="horde").enabled
        assert HordeMagnitudeTracker(combatant_type=CombatantType.SWARM).enabled
        assert not HordeMagnitudeTracker(combatant_type="elite").enabled

    def test_unknown_type_falls_back_to_troop(self, caplog):
        """Unknown combatant types are treated as troops with a warning."""
        with caplog.at_level(logging.WARNING):
            tracker = HordeMagnitudeTracker(combatant_type="mob")
        assert tracker.combatant_type == CombatantType.TROOP
        assert not tracker.enabled
        assert "Unknown combatant type" in caplog.text

    def test_current_is_clamped(self):
        """Starting magnitude is kept within [0, max]."""
        assert HordeMagnitudeTracker(max_magnitude=20, current=50).current == 20
        assert HordeMagnitudeTracker(max_magnitude=20, current=-5).current == 0

    def test_max_at_least_one(self):
        """A pool has at least one point."""
        assert HordeMagnitudeTracker(max_magnitude=0).max_magnitude == 1


class TestTransitions:
    """Tests for the enabled/disabled state machine."""

    def test_transition_table(self):
        """Only three transitions exist."""
        assert len(VALID_TRANSITIONS) == 3
        assert VALID_TRANSITIONS[(HordeState.ENABLED, "convert_to_single")] == HordeState.DISABLED

    def test_enable_and_disable(self, run_log):
        """enable and disable move between states."""
        tracker = HordeMagnitudeTracker()
        assert tracker.enable() == HordeState.ENABLED
        assert tracker.disable() == HordeState.DISABLED
        assert [t.trigger for t in tracker.history] == ["enable", "disable"]

    def test_enable_is_idempotent(self, horde, run_log):
        """Enabling an enabled horde records nothing."""
        horde.enable()
        assert horde.history == []
        assert run_log.get_transitions() == []

    def test_toggle(self, horde):
        """toggle flips the state."""
        assert horde.toggle() == HordeState.DISABLED
        assert horde.toggle() == HordeState.ENABLED

    def test_invalid_trigger_raises(self, run_log):
        """Triggers not valid from the current state raise and list the valid ones."""
        tracker = HordeMagnitudeTracker()
        assert not tracker.can_transition("disable")
        with pytest.raises(InvalidTransitionError, match="enable"):
            tracker.transition("disable")
        assert tracker.state == HordeState.DISABLED

    def test_transitions_logged(self, horde, run_log):
        """Transitions go to the run log with their context."""
        horde.transition("disable", context={"reason": "scattered"})
        transitions = run_log.get_transitions()
        assert len(transitions) == 1
        assert transitions[0].from_state == "enabled"
        assert transitions[0].to_state == "disabled"
        assert transitions[0].trigger == "disable"
        assert transitions[0].context == {"reason": "scattered"}
        assert horde.history[0].timestamp == FIXED_TIME


class TestConvertToSingleEnemy:
    """Tests for converting a horde to a single enemy."""

    def test_horde_becomes_elite(self, run_log):
        """A horde is reclassified as elite."""
        tracker = HordeMagnitudeTracker(combatant_type="horde")
        assert tracker.convert_to_single_enemy() == CombatantType.ELITE
        assert tracker.combatant_type == CombatantType.ELITE
        assert tracker.enabled is False
        assert run_log.get_transitions()[0].context == {"from_type": "horde", "to_type": "elite"}

    def test_swarm_becomes_creature(self, run_log):
        """A swarm is reclassified as a creature."""
        tracker = HordeMagnitudeTracker(combatant_type="swarm")
        assert tracker.convert_to_single_enemy() == CombatantType.CREATURE

    def test_disabled_horde_cannot_convert(self, run_log, caplog):
        """Converting without horde mode warns and changes nothing."""
        tracker = HordeMagnitudeTracker(combatant_type="troop")
        with caplog.at_level(logging.WARNING):
            assert tracker.convert_to_single_enemy() is None
        assert tracker.combatant_type == CombatantType.TROOP
        assert "not enabled" in caplog.text


class TestMagnitude:
    """Tests for magnitude damage and restoration."""

    def test_damage_reduces_magnitude(self, horde):
        """Damage comes off the pool."""
        assert horde.apply_magnitude_damage(8, "lasgun") == 22
        assert horde.magnitude_log[0].amount == -8
        assert horde.magnitude_log[0].source == "lasgun"
        assert horde.magnitude_log[0].timestamp == FIXED_TIME

    def test_damage_floors_at_zero(self, horde):
        """Overwhelming damage stops at 0."""
        assert horde.apply_magnitude_damage(horde.current + 1000) == 0
        assert horde.is_destroyed

    def test_restore_caps_at_max(self, horde):
        """Restoration stops at max."""
        horde.apply_magnitude_damage(10)
        assert horde.restore_magnitude(1000, "reinforcements") == 30
        assert horde.magnitude_log[-1].amount == 1000

    def test_negative_damage_caps_at_max(self, run_log):
        """Negative damage never lifts magnitude above max."""
        tracker = HordeMagnitudeTracker(max_magnitude=40, current=30, enabled=True)
        assert tracker.apply_magnitude_damage(-50) == 40
        assert tracker.current <= tracker.max_magnitude

    def test_negative_restore_floors_at_zero(self, run_log):
        """Negative restoration never drops magnitude below 0."""
        tracker = HordeMagnitudeTracker(max_magnitude=40, current=30, enabled=True)
        assert tracker.restore_magnitude(-1000) == 0
        assert tracker.current >= 0

    def test_disabled_ignores_changes(self, run_log):
        """Magnitude does not change while horde mode is off."""
        tracker = HordeMagnitudeTracker(max_magnitude=30, current=20)
        assert tracker.apply_magnitude_damage(5) == 20
        assert tracker.restore_magnitude(5) == 20
        assert tracker.magnitude_log == []
        assert tracker.is_destroyed is False

    def test_zero_does_not_disable(self, horde):
        """Reaching 0 leaves horde mode on."""
        horde.apply_magnitude_damage(30)
        assert horde.enabled

    def test_percent(self, run_log):
        """Percent is rounded."""
        tracker = HordeMagnitudeTracker(max_magnitude=30, current=20, enabled=True)
        assert tracker.magnitude_percent == 67


class TestDerivedValues:
    """Tests for damage multiplier and size modifier."""

    @pytest.mark.parametrize(
        "current,multiplier",
        [(100, 5), (50, 2.5), (31, 2), (1, 0.5), (0, 0.5)],
    )
    def test_damage_multiplier(self, run_log, current, multiplier):
        """Half a point per tenth of magnitude, at least 0.5."""
        tracker = HordeMagnitudeTracker(max_magnitude=100, current=current, enabled=True)
        assert tracker.damage_multiplier == multiplier

    @pytest.mark.parametrize("current,size", [(100, 3), (70, 2), (50, 1), (30, 0)])
    def test_size_modifier(self, run_log, current, size):
        """Size grows by one per third of magnitude."""
        tracker = HordeMagnitudeTracker(max_magnitude=100, current=current, enabled=True)
        assert tracker.size_modifier == size

    def test_disabled_values(self):
        """Disabled hordes use neutral values."""
        tracker = HordeMagnitudeTracker(max_magnitude=100)
        assert tracker.damage_multiplier == 1
        assert tracker.size_modifier == 0
        assert tracker.magnitude_percent == 0


class TestSerialization:
    """Tests for horde block round trips."""

    def test_to_dict(self, horde):
        """The horde block uses statblock keys."""
        horde.apply_magnitude_damage(15, "flamer")
        data = horde.to_dict()
        assert data["enabled"] is True
        assert data["magnitude"] == {"max": 30, "current": 15}
        assert data["magnitudeLog"][0]["amount"] == -15
        assert data["damageMultiplier"] == 2.5
        assert data["sizeModifier"] == 1

    def test_from_statblock(self, horde_statblock, run_log):
        """A generated horde statblock loads as an enabled tracker."""
        tracker = HordeMagnitudeTracker.from_statblock(horde_statblock)
        assert tracker.enabled
        assert tracker.max_magnitude == 70
        assert tracker.combatant_type == CombatantType.HORDE

    def test_write_back(self, horde_statblock, run_log):
        """write_to stores the block and type on the statblock."""
        tracker = HordeMagnitudeTracker.from_statblock(horde_statblock)
        tracker.apply_magnitude_damage(20)
        tracker.convert_to_single_enemy()
        tracker.write_to(horde_statblock)
        assert horde_statblock["type"] == "elite"
        assert horde_statblock["horde"]["enabled"] is False
        assert horde_statblock["horde"]["magnitude"]["current"] == 50

    def test_log_entry_timestamps(self):
        """Entries accept ISO strings or epoch milliseconds."""
        iso = MagnitudeLogEntry.from_dict({"amount": -3, "timestamp": "2024-03-01T20:00:00"})
        assert iso.timestamp == FIXED_TIME
        epoch = MagnitudeLogEntry.from_dict({"amount": "4", "source": "medic", "timestamp": 0})
        assert epoch.amount == 4
        assert epoch.timestamp == datetime.fromtimestamp(0)

    def test_from_dict_with_log(self):
        """Existing log entries are kept."""
        tracker = HordeMagnitudeTracker.from_dict(
            {
                "enabled": True,
                "magnitude": {"max": 40, "current": 25},
                "magnitudeLog": [{"amount": -15, "source": "bolter", "timestamp": "2024-03-01T20:00:00"}],
                "traits": ["Overwhelming"],
            }
        )
        assert tracker.current == 25
        assert tracker.traits == ["Overwhelming"]
        assert tracker.magnitude_log[0].source == "bolter"
