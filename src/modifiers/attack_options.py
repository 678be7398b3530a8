"""
Attack option tables for weapon tests.

Attack modes, aim, situational conditions and the weapon training penalty,
each expressed as a modifier that feeds a ModifierSet.
"""

from dataclasses import dataclass
from typing import Any, Optional
import re

from src.modifiers.modifier_aggregator import ModifierSet


UNTRAINED_WEAPON_PENALTY = -20


@dataclass(frozen=True)
class AttackOption:
    """A selectable attack option and the modifier it grants."""
    key: str
    label: str
    modifier: int
    action_name: Optional[str] = None
    action_cost: Optional[str] = None
    requires_rate: Optional[str] = None  # "semi" or "full" rate of fire needed
    default: bool = False

    def is_available(self, rate_of_fire: Optional[dict[str, int]] = None) -> bool:
        if not self.requires_rate:
            return True
        return (rate_of_fire or {}).get(self.requires_rate, 0) > 0


RANGED_ATTACK_MODES: list[AttackOption] = [
    AttackOption("standard", "Standard Attack", 0, "Standard Attack", "Half", default=True),
    AttackOption("semiAuto", "Semi-Auto", 10, "Semi-Auto Burst", "Half", requires_rate="semi"),
    AttackOption("fullAuto", "Full-Auto", 20, "Full Auto Burst", "Half", requires_rate="full"),
    AttackOption("suppressingFull", "Suppressing Fire", -20, "Suppressing Fire - Full", "Full", requires_rate="full"),
    AttackOption("overwatch", "Overwatch", 0, "Overwatch", "Full"),
    AttackOption("calledShot", "Called Shot", -20, "Called Shot", "Full"),
]

MELEE_ATTACK_MODES: list[AttackOption] = [
    AttackOption("standard", "Standard Attack", 10, "Standard Attack", "Half", default=True),
    AttackOption("charge", "Charge", 20, "Charge", "Full"),
    AttackOption("allOutAttack", "All-Out Attack", 30, "All Out Attack", "Full"),
    AttackOption("guardedAttack", "Guarded Attack", -10, "Guarded Action", "Half"),
    AttackOption("calledShot", "Called Shot", -20, "Called Shot", "Full"),
]

MELEE_SPECIAL_OPTIONS: list[AttackOption] = [
    AttackOption("feint", "Feint", 0, "Feint", "Half"),
    AttackOption("knockdown", "Knockdown", 0, "Knock Down", "Half"),
    AttackOption("stun", "Stun", -20, "Stun", "Half"),
    AttackOption("manoeuvre", "Manoeuvre", 0, "Manoeuvre", "Half"),
]

AIM_OPTIONS: list[AttackOption] = [
    AttackOption("none", "No Aim", 0, default=True),
    AttackOption("half", "Half Aim", 10, action_cost="Half"),
    AttackOption("full", "Full Aim", 20, action_cost="Full"),
]

RANGED_SITUATIONAL_MODIFIERS: list[AttackOption] = [
    AttackOption("prone", "Prone", -10),
    AttackOption("unawareTarget", "Unaware Target", 30),
    AttackOption("engagedInMelee", "Engaged in Melee", -20),
    AttackOption("darkness", "Darkness", -30),
    AttackOption("highGround", "High Ground", 10),
    AttackOption("stunnedTarget", "Stunned Target", 20),
]

MELEE_SITUATIONAL_MODIFIERS: list[AttackOption] = [
    AttackOption("proneTarget", "Prone Target", 10),
    AttackOption("unawareTarget", "Unaware Target", 30),
    AttackOption("darkness", "Darkness", -20),
    AttackOption("gangingUp", "Ganging Up", 10),
    AttackOption("stunnedTarget", "Stunned Target", 20),
]


def get_attack_modes(is_ranged: bool) -> list[AttackOption]:
    return RANGED_ATTACK_MODES if is_ranged else MELEE_ATTACK_MODES


def get_available_attack_modes(
    is_ranged: bool,
    rate_of_fire: Optional[dict[str, int]] = None,
) -> list[dict[str, Any]]:
    """Attack modes with an "available" flag for the weapon's rate of fire."""
    return [
        {"key": m.key, "label": m.label, "modifier": m.modifier, "available": m.is_available(rate_of_fire)}
        for m in get_attack_modes(is_ranged)
    ]


def get_situational_modifiers(is_ranged: bool) -> list[AttackOption]:
    return RANGED_SITUATIONAL_MODIFIERS if is_ranged else MELEE_SITUATIONAL_MODIFIERS


def get_attack_mode(mode_key: str, is_ranged: bool) -> Optional[AttackOption]:
    for mode in get_attack_modes(is_ranged) + MELEE_SPECIAL_OPTIONS:
        if mode.key == mode_key:
            return mode
    return None


def get_attack_mode_modifier(mode_key: str, is_ranged: bool) -> int:
    mode = get_attack_mode(mode_key, is_ranged)
    return mode.modifier if mode else 0


def get_action_name_for_mode(mode_key: str, is_ranged: bool) -> Optional[str]:
    mode = get_attack_mode(mode_key, is_ranged)
    return mode.action_name if mode else None


def get_aim_modifier(aim_key: str) -> int:
    for option in AIM_OPTIONS:
        if option.key == aim_key:
            return option.modifier
    return 0


def get_attack_mode_key_for_action(action_name: str, is_ranged: bool) -> str:
    """Reverse lookup of an attack mode from its action name ("standard" if unknown)."""
    for mode in get_attack_modes(is_ranged):
        if mode.action_name == action_name:
            return mode.key
    if not is_ranged:
        for special in MELEE_SPECIAL_OPTIONS:
            if special.action_name == action_name:
                return special.key
    return "standard"


def get_aim_key_for_modifier(modifier: int) -> str:
    for option in AIM_OPTIONS:
        if option.modifier == modifier:
            return option.key
    return "none"


def is_melee_special_option(key: str) -> bool:
    return any(option.key == key for option in MELEE_SPECIAL_OPTIONS)


# =============================================================================
# WEAPON TRAINING
# =============================================================================


_TRAINING_PATTERN = re.compile(r"weapon training\s*\(([^)]+)\)", re.IGNORECASE)
_UNIVERSAL_TRAINING = ("weapon training", "weapon master")


def check_weapon_training(
    talents: list[str],
    required_training: Optional[str],
    weapon_special: str = "",
) -> tuple[bool, Optional[str]]:
    """
    Check whether an actor's talents cover a weapon's required training.

    Args:
        talents: Talent names held by the actor
        required_training: The weapon's training requirement ("" or "-" for none)
        weapon_special: The weapon's special text, used to spot grenades

    Returns:
        Tuple of (trained, matching talent name)
    """
    if not required_training or required_training == "-":
        return True, None
    if "grenade" in (weapon_special or "").lower():
        return True, None

    required = required_training.lower()
    required_match = _TRAINING_PATTERN.search(required)

    for talent in talents:
        name = talent.lower()
        if name == required:
            return True, talent
        match = _TRAINING_PATTERN.search(name)
        if match:
            group = match.group(1).strip()
            if group in required:
                return True, talent
            if required_match and required_match.group(1).strip() == group:
                return True, talent

    for talent in talents:
        name = talent.lower()
        if name in _UNIVERSAL_TRAINING or "all weapons" in name:
            return True, talent

    return False, None


def get_weapon_training_modifier(
    talents: list[str],
    required_training: Optional[str],
    weapon_special: str = "",
) -> int:
    trained, _ = check_weapon_training(talents, required_training, weapon_special)
    return 0 if trained else UNTRAINED_WEAPON_PENALTY


def build_attack_modifiers(
    is_ranged: bool,
    attack_mode: str = "standard",
    aim: str = "none",
    conditions: Optional[list[str]] = None,
    training_modifier: int = 0,
) -> ModifierSet:
    """
    Collect the weapon-specific modifier sources of one attack:
    attack mode, aim, active situational conditions and training.
    """
    modifiers = ModifierSet()
    mode = get_attack_mode(attack_mode, is_ranged)
    if mode is not None:
        modifiers.add("attack", mode.modifier, source=mode.key, label=mode.label)
    modifiers.add("aim", get_aim_modifier(aim), source=aim)

    active = set(conditions or [])
    for condition in get_situational_modifiers(is_ranged):
        modifiers.add(
            "situational",
            condition.modifier,
            active=condition.key in active,
            source=condition.key,
            label=condition.label,
        )

    if training_modifier:
        modifiers.add("training", training_modifier, source="weaponTraining")
    return modifiers
