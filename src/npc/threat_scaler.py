"""
Threat-based NPC statblock generation and scaling.

Derives a complete combatant statblock from a threat level (1-30), a role,
an equipment preset and a combatant type, and rescales an existing
statblock between threat levels.

Statblocks are plain records (nested dicts with camelCase keys) so they can
be handed to any persistence or rendering layer unchanged. Rescaling returns
a flat update map with dotted keys ("characteristics.strength.base").
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union
import copy
import logging
import re

from src.actor.characteristic_model import CHARACTERISTIC_DEFINITIONS, CHARACTERISTIC_KEYS
from src.actor.skill_model import get_skill_characteristic
from src.data_models import CombatantType, resolve_combatant_type, round_half_up
from src.observability.run_log import get_run_log

logger = logging.getLogger(__name__)


class UnknownProfileError(Exception):
    """Raised by strict lookups of an unknown role or equipment preset."""
    pass


MIN_THREAT = 1
MAX_THREAT = 30
MIN_CHARACTERISTIC = 10
MAX_CHARACTERISTIC = 99
MAX_ARMOUR = 15
MIN_HORDE_MAGNITUDE = 10
SCALE_PER_THREAT = 0.05
DEFAULT_SIZE = 4

ARMOUR_LOCATIONS = ("head", "body", "leftArm", "rightArm", "leftLeg", "rightLeg")


# =============================================================================
# THREAT TIERS
# =============================================================================


@dataclass(frozen=True)
class ThreatTier:
    """A band of threat levels sharing characteristic and wound baselines."""
    key: str
    name: str
    min_threat: int
    max_threat: int
    char_min: int
    char_max: int
    wounds_base: int
    armour_base: int
    skill_bonus: int
    color: str

    def position(self, threat_level: int) -> float:
        """Fractional position of a threat level within the tier (0.0-1.0)."""
        span = self.max_threat - self.min_threat
        if span <= 0:
            return 0.5
        return (threat_level - self.min_threat) / span

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "minThreat": self.min_threat,
            "maxThreat": self.max_threat,
            "charMin": self.char_min,
            "charMax": self.char_max,
            "woundsBase": self.wounds_base,
            "armourBase": self.armour_base,
            "skillBonus": self.skill_bonus,
        }


THREAT_TIERS: dict[str, ThreatTier] = {
    "minor": ThreatTier("minor", "Minor", 1, 5, 20, 35, 8, 1, 0, "#4caf50"),
    "standard": ThreatTier("standard", "Standard", 6, 10, 30, 45, 12, 3, 10, "#2196f3"),
    "tough": ThreatTier("tough", "Tough", 11, 15, 40, 55, 18, 5, 20, "#ff9800"),
    "elite": ThreatTier("elite", "Elite", 16, 20, 50, 65, 25, 7, 30, "#f44336"),
    "boss": ThreatTier("boss", "Boss", 21, 30, 60, 75, 35, 10, 40, "#9c27b0"),
}


def get_tier(threat_level: int) -> ThreatTier:
    """Tier for a threat level. Levels below 1 are minor, above 30 boss."""
    for tier in THREAT_TIERS.values():
        if threat_level <= tier.max_threat:
            return tier
    return THREAT_TIERS["boss"]


def get_tier_info(threat_level: int) -> dict[str, str]:
    tier = get_tier(threat_level)
    return {"label": tier.name, "color": tier.color}


def get_threat_description(threat_level: int) -> str:
    if threat_level <= 5:
        return "Low"
    if threat_level <= 10:
        return "Moderate"
    if threat_level <= 15:
        return "Dangerous"
    if threat_level <= 20:
        return "Deadly"
    return "Apocalyptic"


def clamp_threat(threat_level: int) -> int:
    """Whole threat level within 1-30; fractions are dropped."""
    return max(MIN_THREAT, min(MAX_THREAT, int(threat_level)))


# =============================================================================
# ROLES AND EQUIPMENT
# =============================================================================


@dataclass(frozen=True)
class RoleProfile:
    """Characteristic focus, skills and default loadout of an NPC role."""
    key: str
    name: str
    description: str
    primary_stats: tuple[str, ...]
    secondary_stats: tuple[str, ...]
    skills: tuple[str, ...]
    weapon_preset: str


ROLE_PROFILES: dict[str, RoleProfile] = {
    "bruiser": RoleProfile(
        "bruiser", "Bruiser", "Close combat specialist",
        ("weaponSkill", "strength", "toughness"), ("agility", "willpower"),
        ("athletics", "intimidate", "parry"), "melee",
    ),
    "sniper": RoleProfile(
        "sniper", "Sniper", "Ranged combat specialist",
        ("ballisticSkill", "perception", "agility"), ("intelligence", "willpower"),
        ("awareness", "stealth", "dodge"), "ranged",
    ),
    "caster": RoleProfile(
        "caster", "Caster", "Psychic/sorcerer",
        ("willpower", "perception", "intelligence"), ("toughness", "fellowship"),
        ("psyniscience", "forbiddenLore", "awareness"), "caster",
    ),
    "support": RoleProfile(
        "support", "Support", "Utility and buff/debuff",
        ("intelligence", "fellowship", "willpower"), ("perception", "agility"),
        ("medicae", "techUse", "command"), "support",
    ),
    "commander": RoleProfile(
        "commander", "Commander", "Leader and tactician",
        ("fellowship", "willpower", "intelligence"), ("weaponSkill", "ballisticSkill"),
        ("command", "charm", "intimidate", "awareness"), "mixed",
    ),
    "specialist": RoleProfile(
        "specialist", "Specialist", "Balanced generalist",
        ("agility", "perception", "intelligence"), ("ballisticSkill", "willpower"),
        ("awareness", "dodge", "stealth"), "mixed",
    ),
}

DEFAULT_ROLE = "specialist"


@dataclass(frozen=True)
class WeaponTemplate:
    """A weapon entry of an equipment preset."""
    name: str
    damage: str
    pen: int
    range: str
    rof: str
    clip: int
    reload: str
    special: str
    weapon_class: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "damage": self.damage,
            "pen": self.pen,
            "range": self.range,
            "rof": self.rof,
            "clip": self.clip,
            "reload": self.reload,
            "special": self.special,
            "class": self.weapon_class,
        }


@dataclass(frozen=True)
class EquipmentPreset:
    """A fixed weapon and armour loadout."""
    key: str
    name: str
    description: str
    weapons: tuple[WeaponTemplate, ...]
    armour: int


EQUIPMENT_PRESETS: dict[str, EquipmentPreset] = {
    "melee": EquipmentPreset(
        "melee", "Melee", "Melee weapons with medium armor",
        (WeaponTemplate("Combat Blade", "1d10+3", 2, "Melee", "S/-/-", 0, "-", "", "melee"),),
        4,
    ),
    "ranged": EquipmentPreset(
        "ranged", "Ranged", "Ranged weapons with light armor",
        (WeaponTemplate("Lasgun", "1d10+3", 0, "100m", "S/3/-", 60, "Full", "Reliable", "basic"),),
        2,
    ),
    "mixed": EquipmentPreset(
        "mixed", "Mixed", "Balanced loadout with medium armor",
        (
            WeaponTemplate("Autopistol", "1d10+2", 0, "30m", "S/-/6", 18, "Full", "", "pistol"),
            WeaponTemplate("Sword", "1d10+2", 0, "Melee", "S/-/-", 0, "-", "Balanced", "melee"),
        ),
        3,
    ),
    "caster": EquipmentPreset(
        "caster", "Caster", "Staff and light armor",
        (WeaponTemplate("Force Staff", "1d10+2", 2, "Melee", "S/-/-", 0, "-", "Force", "melee"),),
        2,
    ),
    "support": EquipmentPreset(
        "support", "Support", "Light weapons and armor",
        (WeaponTemplate("Laspistol", "1d10+2", 0, "30m", "S/-/-", 30, "Full", "Reliable", "pistol"),),
        2,
    ),
    "heavy": EquipmentPreset(
        "heavy", "Heavy", "Heavy weapons with heavy armor",
        (WeaponTemplate("Heavy Stubber", "1d10+5", 3, "100m", "-/-/8", 80, "2Full", "", "heavy"),),
        6,
    ),
    "unarmed": EquipmentPreset(
        "unarmed", "Unarmed", "Natural weapons only",
        (WeaponTemplate("Fists", "1d10", 0, "Melee", "S/-/-", 0, "-", "Primitive", "melee"),),
        0,
    ),
}

DEFAULT_PRESET = "mixed"

WOUND_MULTIPLIERS: dict[CombatantType, float] = {
    CombatantType.TROOP: 0.8,
    CombatantType.ELITE: 1.2,
    CombatantType.MASTER: 1.5,
    CombatantType.HORDE: 2.0,
    CombatantType.SWARM: 1.5,
    CombatantType.CREATURE: 1.0,
    CombatantType.DAEMON: 1.3,
    CombatantType.XENOS: 1.1,
}

HORDE_TYPES = (CombatantType.HORDE, CombatantType.SWARM)


def get_role(key: str, strict: bool = False) -> RoleProfile:
    """Role profile by key; unknown keys fall back to the specialist."""
    profile = ROLE_PROFILES.get(key)
    if profile is None:
        if strict:
            raise UnknownProfileError(f"Unknown role: {key}")
        logger.warning(f"Unknown role '{key}', using {DEFAULT_ROLE}")
        profile = ROLE_PROFILES[DEFAULT_ROLE]
    return profile


def get_preset(key: str, strict: bool = False) -> EquipmentPreset:
    """Equipment preset by key; unknown keys fall back to mixed."""
    preset = EQUIPMENT_PRESETS.get(key)
    if preset is None:
        if strict:
            raise UnknownProfileError(f"Unknown equipment preset: {key}")
        logger.warning(f"Unknown equipment preset '{key}', using {DEFAULT_PRESET}")
        preset = EQUIPMENT_PRESETS[DEFAULT_PRESET]
    return preset


def get_wound_multiplier(combatant_type: Union[CombatantType, str]) -> float:
    try:
        return WOUND_MULTIPLIERS[CombatantType(combatant_type)]
    except ValueError:
        return 1.0


def get_roles() -> list[dict[str, str]]:
    return [{"key": r.key, "name": r.name, "description": r.description} for r in ROLE_PROFILES.values()]


def get_presets() -> list[dict[str, str]]:
    return [{"key": p.key, "name": p.name, "description": p.description} for p in EQUIPMENT_PRESETS.values()]


def get_types() -> list[dict[str, str]]:
    return [{"key": t.value, "name": t.value.capitalize()} for t in CombatantType]


# =============================================================================
# DAMAGE STRINGS
# =============================================================================


_DAMAGE_PATTERN = re.compile(r"^(\d+d\d+)([+-]\d+)?$")


def scale_damage(damage: str, bonus: int) -> str:
    """
    Add a flat bonus to a damage string such as "1d10+3".
    Strings that do not parse are returned unchanged.
    """
    if bonus == 0:
        return damage
    match = _DAMAGE_PATTERN.match(damage)
    if not match:
        return damage

    dice = match.group(1)
    new_bonus = int(match.group(2) or 0) + bonus
    if new_bonus == 0:
        return dice
    if new_bonus > 0:
        return f"{dice}+{new_bonus}"
    return f"{dice}{new_bonus}"


# =============================================================================
# GENERATION
# =============================================================================


def _clamp_characteristic(value: int) -> int:
    return max(MIN_CHARACTERISTIC, min(MAX_CHARACTERISTIC, value))


def generate_characteristics(threat_level: int, role: str = DEFAULT_ROLE) -> dict[str, dict[str, Any]]:
    """
    Characteristics interpolated across the tier, shifted by role focus:
    primary +round(5 + t*0.5), secondary +round(2 + t*0.2), others
    -round(3 + t*0.1), all clamped to 10-99.
    """
    tier = get_tier(threat_level)
    profile = get_role(role)
    base_value = round_half_up(tier.char_min + (tier.char_max - tier.char_min) * tier.position(threat_level))

    characteristics = {}
    for key in CHARACTERISTIC_KEYS:
        value = base_value
        if key in profile.primary_stats:
            value += round_half_up(5 + threat_level * 0.5)
        elif key in profile.secondary_stats:
            value += round_half_up(2 + threat_level * 0.2)
        else:
            value -= round_half_up(3 + threat_level * 0.1)
        value = _clamp_characteristic(value)

        label, short = CHARACTERISTIC_DEFINITIONS[key]
        characteristics[key] = {
            "label": label,
            "short": short,
            "base": value,
            "modifier": 0,
            "unnatural": 0,
            "total": value,
            "bonus": value // 10,
        }
    return characteristics


def generate_wounds(threat_level: int, combatant_type: Union[CombatantType, str] = CombatantType.TROOP) -> dict[str, int]:
    tier = get_tier(threat_level)
    wounds = tier.wounds_base + round_half_up(tier.position(threat_level) * 5)
    wounds = round_half_up(wounds * get_wound_multiplier(combatant_type))
    return {"max": wounds, "value": wounds, "critical": 0}


def _skill_entry(name: str, trained: bool, plus10: bool, plus20: bool, bonus: int) -> dict[str, Any]:
    return {
        "name": name,
        "characteristic": get_skill_characteristic(name),
        "trained": trained,
        "plus10": plus10,
        "plus20": plus20,
        "bonus": bonus,
    }


def generate_skills(role: str, threat_level: int) -> dict[str, dict[str, Any]]:
    """
    Role skills trained at +10 from threat 11 and +20 from threat 21, with
    the tier's skill bonus. Every NPC also gets dodge and awareness.
    """
    profile = get_role(role)
    tier = get_tier(threat_level)

    skills = {}
    for name in profile.skills:
        skills[name] = _skill_entry(
            name,
            trained=True,
            plus10=threat_level >= 11,
            plus20=threat_level >= 21,
            bonus=tier.skill_bonus,
        )

    if "dodge" not in skills:
        skills["dodge"] = _skill_entry(
            "dodge",
            trained=threat_level >= 6,
            plus10=threat_level >= 16,
            plus20=threat_level >= 26,
            bonus=0,
        )
    if "awareness" not in skills:
        skills["awareness"] = _skill_entry(
            "awareness",
            trained=True,
            plus10=threat_level >= 11,
            plus20=threat_level >= 21,
            bonus=0,
        )
    return skills


def generate_weapons(preset: str, threat_level: int) -> dict[str, Any]:
    equipment = get_preset(preset)
    damage_bonus = threat_level // 5
    pen_bonus = threat_level // 10

    weapons = []
    for template in equipment.weapons:
        weapon = template.to_dict()
        weapon["damage"] = scale_damage(template.damage, damage_bonus)
        weapon["pen"] = template.pen + pen_bonus
        weapons.append(weapon)
    return {"mode": "simple", "simple": weapons}


def generate_armour(preset: str, threat_level: int) -> dict[str, Any]:
    equipment = get_preset(preset)
    total = min(MAX_ARMOUR, equipment.armour + threat_level // 5)
    return {
        "mode": "simple",
        "total": total,
        "locations": {location: total for location in ARMOUR_LOCATIONS},
    }


def generate_movement(threat_level: int) -> dict[str, int]:
    base = 3 + threat_level // 10
    return {"half": base, "full": base * 2, "charge": base * 3, "run": base * 6}


def generate_horde(is_horde: bool, threat_level: int) -> dict[str, Any]:
    """Horde block; magnitude 30 + t*5 when enabled, an idle 100 otherwise."""
    magnitude = 30 + threat_level * 5 if is_horde else 100
    return {
        "enabled": is_horde,
        "magnitude": {"max": magnitude, "current": magnitude},
        "magnitudeLog": [],
        "traits": [],
        "damageMultiplier": 1,
        "sizeModifier": 0,
    }


# =============================================================================
# SCALING
# =============================================================================


@dataclass
class ScaleOptions:
    """Which parts of a statblock a rescale touches."""
    scale_characteristics: bool = True
    scale_wounds: bool = True
    scale_skills: bool = True
    scale_weapons: bool = True
    scale_armour: bool = True

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ScaleOptions":
        data = data or {}
        return cls(
            scale_characteristics=data.get("scaleCharacteristics", True),
            scale_wounds=data.get("scaleWounds", True),
            scale_skills=data.get("scaleSkills", True),
            scale_weapons=data.get("scaleWeapons", True),
            scale_armour=data.get("scaleArmour", True),
        )


def scale_factor(current_threat: int, new_threat: int) -> float:
    return 1 + (new_threat - current_threat) * SCALE_PER_THREAT


def compute_scaling_updates(
    data: dict[str, Any],
    current_threat: int,
    new_threat: int,
    options: Optional[ScaleOptions] = None,
) -> dict[str, Any]:
    """Dotted-key update map for a rescale. Pure; see ThreatScaler.rescale."""
    options = options or ScaleOptions()
    diff = new_threat - current_threat
    factor = scale_factor(current_threat, new_threat)
    updates: dict[str, Any] = {}

    if options.scale_characteristics:
        for key, char in data.get("characteristics", {}).items():
            new_base = round_half_up(char.get("base", 0) * factor)
            updates[f"characteristics.{key}.base"] = _clamp_characteristic(new_base)

    if options.scale_wounds and "wounds" in data:
        new_max = max(1, round_half_up(data["wounds"].get("max", 0) * factor))
        updates["wounds.max"] = new_max
        updates["wounds.value"] = new_max

    if options.scale_skills:
        for key, skill in data.get("trainedSkills", {}).items():
            new_bonus = round_half_up((skill.get("bonus") or 0) + diff * 2)
            updates[f"trainedSkills.{key}.bonus"] = max(0, new_bonus)

    weapons = (data.get("weapons") or {}).get("simple")
    if options.scale_weapons and weapons:
        damage_bonus = diff // 2
        pen_bonus = diff // 5
        updates["weapons.simple"] = [
            {
                **weapon,
                "damage": scale_damage(weapon.get("damage", ""), damage_bonus),
                "pen": max(0, weapon.get("pen", 0) + pen_bonus),
            }
            for weapon in weapons
        ]

    armour = data.get("armour")
    if options.scale_armour and armour:
        if armour.get("mode") == "simple":
            new_armour = round_half_up(armour.get("total", 0) * factor)
            updates["armour.total"] = max(0, min(MAX_ARMOUR, new_armour))
        else:
            for location, value in armour.get("locations", {}).items():
                new_armour = round_half_up(value * factor)
                updates[f"armour.locations.{location}"] = max(0, min(MAX_ARMOUR, new_armour))

    updates["threatLevel"] = clamp_threat(new_threat)

    horde = data.get("horde") or {}
    if horde.get("enabled"):
        new_magnitude = max(MIN_HORDE_MAGNITUDE, round_half_up(horde["magnitude"]["max"] * factor))
        updates["horde.magnitude.max"] = new_magnitude
        updates["horde.magnitude.current"] = new_magnitude

    return updates


def apply_updates(data: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a statblock with a dotted-key update map merged in."""
    result = copy.deepcopy(data)
    for path, value in updates.items():
        node = result
        parts = path.split(".")
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = copy.deepcopy(value)
    return result


class ThreatScaler:
    """
    Generates and rescales NPC statblocks from threat levels.

    Generation is pure. Rescales are recorded in the run log.
    """

    def generate_npc_data(
        self,
        threat_level: int = 5,
        role: str = DEFAULT_ROLE,
        combatant_type: Union[CombatantType, str] = CombatantType.TROOP,
        preset: str = DEFAULT_PRESET,
        faction: str = "",
        is_horde: bool = False,
    ) -> dict[str, Any]:
        """
        Generate a complete statblock.

        Args:
            threat_level: 1-30; out-of-range values are clamped
            role: Role profile key
            combatant_type: Combatant type; forced to horde when is_horde
            preset: Equipment preset key
            faction: Free-text faction
            is_horde: Build a horde

        Returns:
            Statblock record
        """
        threat_level = clamp_threat(threat_level)
        actual_type = CombatantType.HORDE if is_horde else resolve_combatant_type(combatant_type)
        horde_enabled = is_horde or actual_type in HORDE_TYPES

        logger.debug(
            f"Generating {role} {actual_type.value} at threat {threat_level} "
            f"({get_tier(threat_level).name})"
        )
        return {
            "faction": faction,
            "role": get_role(role).key,
            "type": actual_type.value,
            "threatLevel": threat_level,
            "tier": get_tier(threat_level).key,
            "characteristics": generate_characteristics(threat_level, role),
            "wounds": generate_wounds(threat_level, actual_type),
            "movement": generate_movement(threat_level),
            "size": DEFAULT_SIZE,
            "initiative": {"characteristic": "agility", "base": "1d10", "bonus": 0},
            "trainedSkills": generate_skills(role, threat_level),
            "weapons": generate_weapons(preset, threat_level),
            "armour": generate_armour(preset, threat_level),
            "specialAbilities": "",
            "customStats": {"enabled": False, "characteristics": {}, "skills": {}},
            "horde": generate_horde(horde_enabled, threat_level),
        }

    def rescale(
        self,
        data: dict[str, Any],
        current_threat: int,
        new_threat: int,
        options: Optional[Union[ScaleOptions, dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        """
        Update map that moves a statblock from one threat level to another.

        Scale factor is 1 + (new - current) * 0.05. Characteristics clamp to
        10-99, wounds to at least 1, armour to 0-15, horde magnitude to at
        least 10. Skill bonuses move by 2 per level; weapon damage by 1 per
        2 levels and penetration by 1 per 5.
        """
        if isinstance(options, dict) or options is None:
            options = ScaleOptions.from_dict(options)
        updates = compute_scaling_updates(data, current_threat, new_threat, options)
        get_run_log().log_scaling(
            from_threat=current_threat,
            to_threat=new_threat,
            factor=scale_factor(current_threat, new_threat),
            fields_changed=len(updates),
        )
        logger.info(f"Rescaled statblock from threat {current_threat} to {new_threat}")
        return updates

    def preview_scaling(
        self,
        data: dict[str, Any],
        current_threat: int,
        new_threat: int,
        options: Optional[Union[ScaleOptions, dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        """Current and scaled values side by side, without logging or applying."""
        if isinstance(options, dict) or options is None:
            options = ScaleOptions.from_dict(options)
        updates = compute_scaling_updates(data, current_threat, new_threat, options)

        armour = data.get("armour", {})
        simple_armour = armour.get("mode") == "simple"
        current_armour = armour.get("total", 0) if simple_armour else "By Location"

        preview: dict[str, Any] = {
            "threatLevel": {
                "current": current_threat,
                "new": new_threat,
                "change": new_threat - current_threat,
            },
            "characteristics": {},
            "wounds": {
                "current": data["wounds"]["max"],
                "new": updates.get("wounds.max", data["wounds"]["max"]),
            },
            "armour": {
                "current": current_armour,
                "new": updates.get("armour.total", current_armour),
            },
        }
        for key, char in data.get("characteristics", {}).items():
            new_base = updates.get(f"characteristics.{key}.base", char["base"])
            preview["characteristics"][key] = {
                "label": char.get("label", ""),
                "short": char.get("short", ""),
                "current": char["base"],
                "new": new_base,
                "change": new_base - char["base"],
            }
        return preview

    def rescale_and_apply(
        self,
        data: dict[str, Any],
        new_threat: int,
        options: Optional[Union[ScaleOptions, dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        """Rescale a statblock from its own threat level and return the result."""
        current = data.get("threatLevel", new_threat)
        updated = apply_updates(data, self.rescale(data, current, new_threat, options))
        updated["tier"] = get_tier(updated["threatLevel"]).key
        return updated


# Module-level singleton accessor
_scaler: Optional[ThreatScaler] = None


def get_threat_scaler() -> ThreatScaler:
    """Get the global threat scaler instance."""
    global _scaler
    if _scaler is None:
        _scaler = ThreatScaler()
    return _scaler


# Convenience functions
def generate_npc_data(
    threat_level: int = 5,
    role: str = DEFAULT_ROLE,
    combatant_type: Union[CombatantType, str] = CombatantType.TROOP,
    preset: str = DEFAULT_PRESET,
    faction: str = "",
    is_horde: bool = False,
) -> dict[str, Any]:
    """Generate a statblock using the global scaler."""
    return get_threat_scaler().generate_npc_data(
        threat_level, role, combatant_type, preset, faction, is_horde
    )


def scale_to_threat(
    data: dict[str, Any],
    current_threat: int,
    new_threat: int,
    options: Optional[Union[ScaleOptions, dict[str, Any]]] = None,
) -> dict[str, Any]:
    """Rescale update map using the global scaler."""
    return get_threat_scaler().rescale(data, current_threat, new_threat, options)
