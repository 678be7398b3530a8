"""
Pytest fixtures for the resolution engine test suite.

Provides reusable fixtures for dice, the run log, actor records and
generated statblocks.
"""

import pytest

from src.data_models import Characteristic, DiceRoller, Skill, Specialization
from src.npc.threat_scaler import generate_npc_data
from src.observability.run_log import reset_run_log


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    DiceRoller.clear_roll_log()
    DiceRoller.set_seed(42)
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture
def clean_dice():
    """Provide a clean DiceRoller without seed."""
    DiceRoller.clear_roll_log()
    yield DiceRoller()
    DiceRoller.clear_roll_log()


# =============================================================================
# RUN LOG FIXTURES
# =============================================================================


@pytest.fixture
def run_log():
    """Provide an empty run log, reset again afterwards."""
    log = reset_run_log()
    log.resume()
    yield log
    log.resume()
    reset_run_log()


# =============================================================================
# ACTOR FIXTURES
# =============================================================================


@pytest.fixture
def acolyte_characteristics():
    """Characteristic records of a starting acolyte."""
    return {
        "weaponSkill": Characteristic(base=35, advance=1, label="Weapon Skill", short="WS"),
        "ballisticSkill": Characteristic(base=40, label="Ballistic Skill", short="BS"),
        "strength": Characteristic(base=30, label="Strength", short="S"),
        "toughness": Characteristic(base=30, unnatural=2, label="Toughness", short="T"),
        "agility": Characteristic(base=38, modifier=-5, label="Agility", short="Ag"),
        "intelligence": Characteristic(base=42, label="Intelligence", short="Int"),
        "perception": Characteristic(base=33, label="Perception", short="Per"),
        "willpower": Characteristic(base=40, advance=2, label="Willpower", short="WP"),
        "fellowship": Characteristic(base=28, label="Fellowship", short="Fel"),
    }


@pytest.fixture
def acolyte_skills():
    """Skill table with a plain, a +10 and a specialist skill."""
    return {
        "dodge": Skill(characteristic="agility", trained=True),
        "awareness": Skill(characteristic="perception", trained=True, plus10=True, bonus=5),
        "commonLore": Skill(
            characteristic="intelligence",
            entries=[
                Specialization(name="Imperium", trained=True),
                Specialization(name="Tech", characteristic="perception", trained=True, plus10=True, plus20=True),
            ],
        ),
    }


# =============================================================================
# STATBLOCK FIXTURES
# =============================================================================


@pytest.fixture
def bruiser_statblock(run_log):
    """A threat 10 bruiser troop with melee kit."""
    return generate_npc_data(threat_level=10, role="bruiser", combatant_type="troop", preset="melee")


@pytest.fixture
def horde_statblock(run_log):
    """A threat 8 horde with mixed kit."""
    return generate_npc_data(threat_level=8, role="specialist", preset="mixed", is_horde=True)
