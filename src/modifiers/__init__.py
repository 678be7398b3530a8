"""Modifier module.

Collects difficulty, situational, custom and weapon-specific modifiers into
one auditable offset.
"""

from src.modifiers.modifier_aggregator import (
    DEFAULT_DIFFICULTY,
    Difficulty,
    ModifierSet,
    ModifierSource,
    RollModifiers,
    aggregate,
    compute_final_target,
    step_difficulty,
)
from src.modifiers.attack_options import (
    AttackOption,
    build_attack_modifiers,
    check_weapon_training,
    get_aim_modifier,
    get_attack_mode_modifier,
    get_weapon_training_modifier,
)

__all__ = [
    "DEFAULT_DIFFICULTY",
    "Difficulty",
    "ModifierSet",
    "ModifierSource",
    "RollModifiers",
    "aggregate",
    "compute_final_target",
    "step_difficulty",
    "AttackOption",
    "build_attack_modifiers",
    "check_weapon_training",
    "get_aim_modifier",
    "get_attack_mode_modifier",
    "get_weapon_training_modifier",
]
