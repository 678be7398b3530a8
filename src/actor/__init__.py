"""Actor model module.

Derives characteristic totals/bonuses and skill target numbers from plain
actor records.
"""

from src.actor.characteristic_model import (
    CHARACTERISTIC_DEFINITIONS,
    CHARACTERISTIC_KEYS,
    CHARACTERISTIC_MAP,
    CharacteristicSet,
    CharacteristicValues,
    compute_bonus,
    compute_total,
    compute_total_and_bonus,
    resolve_characteristic_key,
)
from src.actor.skill_model import (
    FlatPenaltyPolicy,
    HalfCharacteristicPolicy,
    SkillModel,
    SkillTargetPolicy,
    compute_target,
    find_specialization,
    get_skill_fuzzy,
    get_training_level,
    policy_for,
)

__all__ = [
    "CHARACTERISTIC_DEFINITIONS",
    "CHARACTERISTIC_KEYS",
    "CHARACTERISTIC_MAP",
    "CharacteristicSet",
    "CharacteristicValues",
    "compute_bonus",
    "compute_total",
    "compute_total_and_bonus",
    "resolve_characteristic_key",
    "FlatPenaltyPolicy",
    "HalfCharacteristicPolicy",
    "SkillModel",
    "SkillTargetPolicy",
    "compute_target",
    "find_specialization",
    "get_skill_fuzzy",
    "get_training_level",
    "policy_for",
]
