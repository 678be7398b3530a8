"""
Tests for characteristic totals and bonuses.

Tests src/actor/characteristic_model.py.
"""

import pytest

from src.actor.characteristic_model import (
    CHARACTERISTIC_KEYS,
    CHARACTERISTIC_MAP,
    CharacteristicSet,
    compute_bonus,
    compute_total,
    compute_total_and_bonus,
    resolve_characteristic_key,
)
from src.data_models import Characteristic


class TestComputeTotalAndBonus:
    """Tests for the total and bonus formulas."""

    def test_advances_add_five_each(self):
        """Base 25 with two advances is 35, bonus 3."""
        char = {"base": 25, "advance": 2, "modifier": 0, "unnatural": 0}
        assert compute_total_and_bonus(char) == (35, 3)

    def test_modifier_is_added(self):
        """Flat modifiers add to the total."""
        char = Characteristic(base=30, advance=1, modifier=-7)
        assert compute_total(char) == 28

    def test_unnatural_multiplies_bonus_only(self):
        """Unnatural x2 doubles the bonus but leaves the total alone."""
        total, bonus = compute_total_and_bonus({"base": 40, "unnatural": 2})
        assert total == 40
        assert bonus == 8

    @pytest.mark.parametrize("unnatural", [0, 1])
    def test_unnatural_below_two_is_ignored(self, unnatural):
        """Unnatural 0 and 1 both mean no multiplier."""
        assert compute_bonus(47, unnatural) == 4

    def test_npc_records_skip_advances(self):
        """NPC totals ignore the advance field."""
        char = {"base": 30, "advance": 3, "modifier": 5}
        assert compute_total(char, include_advance=False) == 35

    def test_missing_fields_default_to_zero(self):
        """Missing or malformed fields count as 0 rather than raising."""
        assert compute_total_and_bonus({"base": "abc"}) == (0, 0)
        assert compute_total_and_bonus(None) == (0, 0)


class TestCharacteristicKeys:
    """Tests for key and short-name lookup."""

    def test_short_names_map_to_keys(self):
        """Short names resolve regardless of case."""
        assert resolve_characteristic_key("WS") == "weaponSkill"
        assert resolve_characteristic_key("ag") == "agility"
        assert resolve_characteristic_key("Int") == "intelligence"

    def test_full_key_resolves_to_itself(self):
        """A key is returned unchanged."""
        assert resolve_characteristic_key("fellowship") == "fellowship"

    def test_unknown_name_is_none(self):
        """Unknown names give None."""
        assert resolve_characteristic_key("luck") is None
        assert resolve_characteristic_key("") is None

    def test_every_key_has_a_short_name(self):
        """The short-name map covers every characteristic."""
        assert sorted(CHARACTERISTIC_MAP.values()) == sorted(CHARACTERISTIC_KEYS)


class TestCharacteristicSet:
    """Tests for CharacteristicSet."""

    def test_total_and_bonus_lookup(self, acolyte_characteristics):
        """Totals and bonuses are derived per characteristic."""
        chars = CharacteristicSet(acolyte_characteristics)
        assert chars.total("weaponSkill") == 40
        assert chars.bonus("WS") == 4
        assert chars.total("willpower") == 50

    def test_unnatural_toughness_bonus(self, acolyte_characteristics):
        """Unnatural toughness doubles the toughness bonus."""
        chars = CharacteristicSet(acolyte_characteristics)
        assert chars.bonus("toughness") == 6

    def test_unknown_characteristic_is_zero(self, acolyte_characteristics):
        """Missing characteristics give 0 and None values."""
        chars = CharacteristicSet(acolyte_characteristics)
        assert chars.total("influence") == 0
        assert chars.values("influence") is None

    def test_for_npc_ignores_advances(self):
        """The NPC constructor skips advances."""
        chars = CharacteristicSet.for_npc({"strength": {"base": 30, "advance": 2}})
        assert chars.total("strength") == 30

    def test_compute_all(self, acolyte_characteristics):
        """compute_all covers every stored characteristic."""
        values = CharacteristicSet(acolyte_characteristics).compute_all()
        assert set(values) == set(acolyte_characteristics)
        assert values["agility"].total == 33
        assert values["agility"].to_dict() == {"key": "agility", "total": 33, "bonus": 3}
