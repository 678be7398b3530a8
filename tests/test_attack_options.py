"""
Tests for attack option tables and weapon training.

Tests src/modifiers/attack_options.py.
"""

import pytest

from src.modifiers.attack_options import (
    UNTRAINED_WEAPON_PENALTY,
    build_attack_modifiers,
    check_weapon_training,
    get_action_name_for_mode,
    get_aim_key_for_modifier,
    get_aim_modifier,
    get_attack_mode_key_for_action,
    get_attack_mode_modifier,
    get_available_attack_modes,
    get_weapon_training_modifier,
    is_melee_special_option,
)


class TestAttackModes:
    """Tests for attack mode lookups."""

    def test_standard_mode_differs_by_weapon(self):
        """Melee standard attacks get +10, ranged none."""
        assert get_attack_mode_modifier("standard", is_ranged=True) == 0
        assert get_attack_mode_modifier("standard", is_ranged=False) == 10

    def test_ranged_modes(self):
        """Burst fire and called shots."""
        assert get_attack_mode_modifier("semiAuto", True) == 10
        assert get_attack_mode_modifier("fullAuto", True) == 20
        assert get_attack_mode_modifier("calledShot", True) == -20

    def test_unknown_mode_is_zero(self):
        """Unknown modes add nothing."""
        assert get_attack_mode_modifier("flurry", True) == 0
        assert get_action_name_for_mode("flurry", True) is None

    def test_melee_special_options(self):
        """Stun is a melee special option with -20."""
        assert is_melee_special_option("stun")
        assert not is_melee_special_option("charge")
        assert get_attack_mode_modifier("stun", False) == -20

    def test_availability_follows_rate_of_fire(self):
        """Burst modes need a matching rate of fire."""
        modes = {m["key"]: m for m in get_available_attack_modes(True, {"single": 1, "semi": 3, "full": 0})}
        assert modes["standard"]["available"] is True
        assert modes["semiAuto"]["available"] is True
        assert modes["fullAuto"]["available"] is False

    def test_reverse_action_lookup(self):
        """Action names map back to mode keys, standard if unknown."""
        assert get_attack_mode_key_for_action("Full Auto Burst", True) == "fullAuto"
        assert get_attack_mode_key_for_action("Knock Down", False) == "knockdown"
        assert get_attack_mode_key_for_action("Dance", False) == "standard"


class TestAim:
    """Tests for aim options."""

    def test_aim_modifiers(self):
        """Half aim +10, full aim +20."""
        assert get_aim_modifier("none") == 0
        assert get_aim_modifier("half") == 10
        assert get_aim_modifier("full") == 20

    def test_aim_reverse_lookup(self):
        """Modifiers map back to aim keys, none if unknown."""
        assert get_aim_key_for_modifier(20) == "full"
        assert get_aim_key_for_modifier(15) == "none"


class TestWeaponTraining:
    """Tests for weapon training checks."""

    def test_no_requirement(self):
        """Weapons without a requirement are always trained."""
        assert check_weapon_training([], "") == (True, None)
        assert check_weapon_training([], "-") == (True, None)

    def test_grenades_need_no_training(self):
        """Grenades are usable by anyone."""
        assert check_weapon_training([], "Weapon Training (Las)", "Blast (3), Grenade")[0] is True

    def test_matching_talent(self):
        """A talent naming the weapon group counts."""
        trained, talent = check_weapon_training(["Weapon Training (Las)"], "Weapon Training (Las)")
        assert trained
        assert talent == "Weapon Training (Las)"

    def test_group_contained_in_requirement(self):
        """A short requirement such as 'las' matches the talent's weapon group."""
        trained, _ = check_weapon_training(["Weapon Training (Las)"], "Las")
        assert trained

    def test_universal_training(self):
        """Weapon master covers any weapon."""
        trained, talent = check_weapon_training(["Weapon Master"], "Weapon Training (Bolt)")
        assert trained
        assert talent == "Weapon Master"

    def test_missing_training_penalty(self):
        """Untrained weapons take -20."""
        assert get_weapon_training_modifier(["Weapon Training (Las)"], "Weapon Training (Bolt)") == UNTRAINED_WEAPON_PENALTY
        assert get_weapon_training_modifier(["Weapon Training (Bolt)"], "Weapon Training (Bolt)") == 0


class TestBuildAttackModifiers:
    """Tests for build_attack_modifiers."""

    def test_ranged_breakdown(self):
        """Attack, aim and situational keys are always present."""
        mods = build_attack_modifiers(True, attack_mode="semiAuto", aim="half", conditions=["prone"])
        assert mods.breakdown() == {"attack": 10, "aim": 10, "situational": -10}
        assert mods.total() == 10

    def test_inactive_conditions_do_not_count(self):
        """Only listed conditions apply."""
        mods = build_attack_modifiers(False)
        assert mods.total_for("situational") == 0
        assert mods.total() == 10

    def test_conditions_stack(self):
        """Several conditions stack."""
        mods = build_attack_modifiers(False, conditions=["gangingUp", "stunnedTarget"])
        assert mods.total_for("situational") == 30

    def test_training_penalty_included(self):
        """A training modifier appears under its own key."""
        mods = build_attack_modifiers(True, training_modifier=-20)
        assert mods.breakdown()["training"] == -20

    @pytest.mark.parametrize("is_ranged", [True, False])
    def test_no_training_key_when_trained(self, is_ranged):
        """No training entry for a trained attack."""
        assert "training" not in build_attack_modifiers(is_ranged).breakdown()
