"""
Tests for statblock damage, healing, skill targets and text export.

Tests src/npc/statblock.py against generated and hand-built statblocks.
"""

from unittest.mock import patch

import pytest

from src.data_models import DiceResult
from src.npc.statblock import (
    apply_damage,
    export_stat_block,
    get_armour_for_location,
    get_skill_target,
    heal_wounds,
    roll_initiative,
)


@pytest.fixture
def cultist():
    """A hand-built statblock with per-location armour and TB 3."""
    return {
        "type": "troop",
        "characteristics": {"toughness": {"base": 30}, "fellowship": {"base": 25}},
        "wounds": {"max": 10, "value": 10, "critical": 0},
        "armour": {"mode": "locations", "locations": {"head": 2, "body": 6}},
    }


class TestArmour:
    """Tests for armour lookup."""

    def test_simple_armour_everywhere(self, bruiser_statblock):
        """Simple armour covers every location."""
        assert get_armour_for_location(bruiser_statblock, "head") == 6
        assert get_armour_for_location(bruiser_statblock, "leftLeg") == 6

    def test_location_armour(self, cultist):
        """Per-location armour, 0 for unarmoured locations."""
        assert get_armour_for_location(cultist, "head") == 2
        assert get_armour_for_location(cultist, "body") == 6
        assert get_armour_for_location(cultist, "leftArm") == 0


class TestApplyDamage:
    """Tests for apply_damage."""

    def test_armour_and_toughness_reduce(self, bruiser_statblock):
        """Armour and toughness bonus come off first."""
        result = apply_damage(bruiser_statblock, 15)
        assert result.reduction == 11
        assert result.final == 4
        assert result.wounds == 10
        assert bruiser_statblock["wounds"]["value"] == 10

    def test_hit_location(self, cultist):
        """Only the armour at the hit location counts."""
        result = apply_damage(cultist, 12, location="head")
        assert result.reduction == 5
        assert cultist["wounds"]["value"] == 3

    def test_ignore_flags(self, cultist):
        """Armour and toughness can each be skipped."""
        assert apply_damage(cultist, 12, ignore_armour=True).final == 9
        cultist["wounds"]["value"] = 10
        assert apply_damage(cultist, 12, ignore_armour=True, ignore_toughness=True).final == 12

    def test_damage_fully_absorbed(self, cultist):
        """Damage below the reduction does nothing."""
        result = apply_damage(cultist, 5)
        assert result.final == 0
        assert cultist["wounds"]["value"] == 10

    def test_excess_becomes_critical(self, cultist):
        """Damage beyond remaining wounds accumulates as critical damage."""
        cultist["wounds"]["value"] = 3
        result = apply_damage(cultist, 12, location="head")
        assert result.wounds == 0
        assert result.critical == 4

        result = apply_damage(cultist, 10, location="head")
        assert result.critical == 9
        assert cultist["wounds"] == {"max": 10, "value": 0, "critical": 9}

    def test_exact_kill_has_no_critical(self, cultist):
        """Taking exactly the remaining wounds leaves critical at 0."""
        cultist["wounds"]["value"] = 7
        result = apply_damage(cultist, 12, location="head")
        assert result.wounds == 0
        assert result.critical == 0

    def test_horde_takes_magnitude_damage(self, horde_statblock, run_log):
        """Hordes lose magnitude, not wounds."""
        result = apply_damage(horde_statblock, 20)
        assert result.to_magnitude
        assert result.reduction == 7
        assert result.magnitude == 57
        assert horde_statblock["horde"]["magnitude"]["current"] == 57
        assert horde_statblock["horde"]["magnitudeLog"][0]["amount"] == -13
        assert horde_statblock["wounds"]["value"] == 30

    def test_unknown_type_takes_wound_damage(self, cultist):
        """An unrecognised combatant type is damaged like a troop."""
        cultist["type"] = "mob"
        result = apply_damage(cultist, 12)
        assert result.magnitude is None
        assert cultist["wounds"]["value"] == 7

    def test_result_to_dict(self, cultist):
        """Serialized damage result."""
        data = apply_damage(cultist, 12).to_dict()
        assert data == {"raw": 12, "reduction": 9, "final": 3, "wounds": 7, "critical": 0, "magnitude": None}


class TestHealWounds:
    """Tests for heal_wounds."""

    def test_heal(self, cultist):
        """Healing adds wounds."""
        cultist["wounds"]["value"] = 2
        assert heal_wounds(cultist, 5) == 7

    def test_heal_clamps_to_max(self, cultist):
        """Healing never exceeds max."""
        cultist["wounds"]["value"] = 8
        assert heal_wounds(cultist, 50) == 10


class TestInitiative:
    """Tests for roll_initiative."""

    @staticmethod
    def forced_d10(value):
        return DiceResult(notation="1d10", rolls=[value], modifier=0, total=value, reason="initiative")

    def test_adds_agility_bonus(self, bruiser_statblock):
        """Initiative is 1d10 plus the agility bonus."""
        with patch("src.data_models.DiceRoller.roll_d10", return_value=self.forced_d10(7)):
            assert roll_initiative(bruiser_statblock) == 11

    def test_flat_bonus_and_characteristic(self, bruiser_statblock):
        """The statblock can name another characteristic and add a flat bonus."""
        bruiser_statblock["initiative"] = {"characteristic": "perception", "base": "1d10", "bonus": 2}
        perception = bruiser_statblock["characteristics"]["perception"]["base"]
        with patch("src.data_models.DiceRoller.roll_d10", return_value=self.forced_d10(3)):
            assert roll_initiative(bruiser_statblock) == 3 + perception // 10 + 2

    def test_seeded_roll_in_range(self, bruiser_statblock, seeded_dice):
        """A real d10 keeps the result within 1-10 plus the bonus."""
        assert 5 <= roll_initiative(bruiser_statblock, name="Pit Fighter") <= 14
        assert seeded_dice.get_roll_log()[-1].reason == "Pit Fighter initiative"


class TestSkillTargets:
    """Tests for NPC skill targets."""

    def test_trained_skill(self, bruiser_statblock):
        """Trained skills use the characteristic plus the skill bonus."""
        assert get_skill_target(bruiser_statblock, "parry") == 65

    def test_untrained_skill_is_half(self, bruiser_statblock):
        """NPCs test untrained skills at half the characteristic."""
        assert get_skill_target(bruiser_statblock, "charm") == 20

    def test_unknown_skill(self, bruiser_statblock):
        """Skills with no governing characteristic give None."""
        assert get_skill_target(bruiser_statblock, "basketWeaving") is None


class TestExport:
    """Tests for export_stat_block."""

    def test_sections(self, bruiser_statblock):
        """The text block has a header and each section."""
        text = export_stat_block(bruiser_statblock, name="Pit Fighter")
        lines = text.split("\n")
        assert lines[0] == "=== Pit Fighter ==="
        assert lines[1] == "Troop | Threat 10 | Bruiser"
        assert "--- Characteristics ---" in lines
        assert "WS: 55" in lines
        assert "Wounds: 14/14" in lines
        assert "Armour: 6" in lines
        assert "Movement: 4/8/12/24" in lines
        assert "parry: 65" in lines
        assert "Combat Blade: 1d10+5, Pen 3" in lines
        assert text.endswith("\n")

    def test_ranged_weapon_and_faction(self, horde_statblock):
        """Ranged weapons show range and rate of fire."""
        horde_statblock["faction"] = "Chaos Cult"
        text = export_stat_block(horde_statblock)
        assert "Faction: Chaos Cult" in text
        assert "Autopistol: 1d10+3, Pen 0, 30m, RoF S/-/6" in text
        assert "Sword: 1d10+3, Pen 0 [Balanced]" in text

    def test_unnatural_and_abilities(self, bruiser_statblock):
        """Unnatural characteristics are marked and HTML is stripped."""
        bruiser_statblock["characteristics"]["toughness"]["unnatural"] = 2
        bruiser_statblock["specialAbilities"] = "<p><b>Fearless</b></p>"
        text = export_stat_block(bruiser_statblock)
        assert "T: 55 (×2)" in text
        assert "--- Special Abilities ---\nFearless" in text

    def test_location_armour(self, cultist):
        """Per-location armour is summarised."""
        assert "Armour: By Location" in export_stat_block(cultist)
