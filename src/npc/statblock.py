"""
Operations on NPC statblock records.

Statblocks are the plain records produced by the threat scaler. These
helpers apply damage and healing in place and render a plain-text stat
block.
"""

from dataclasses import dataclass
from typing import Any, Optional
import logging
import re

from src.actor.characteristic_model import CharacteristicSet
from src.actor.skill_model import SkillModel, policy_for
from src.data_models import ActorKind, DiceRoller, coerce_int
from src.npc.horde_tracker import HordeMagnitudeTracker

logger = logging.getLogger(__name__)


_HTML_TAG = re.compile(r"<[^>]*>")


@dataclass
class DamageResult:
    """Outcome of damage applied to a statblock."""
    raw: int
    reduction: int
    final: int
    wounds: int
    critical: int
    magnitude: Optional[int] = None  # Set when the damage went to a horde

    @property
    def to_magnitude(self) -> bool:
        return self.magnitude is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw": self.raw,
            "reduction": self.reduction,
            "final": self.final,
            "wounds": self.wounds,
            "critical": self.critical,
            "magnitude": self.magnitude,
        }


def characteristics_of(statblock: dict[str, Any]) -> CharacteristicSet:
    return CharacteristicSet.for_npc(statblock.get("characteristics"))


def get_armour_for_location(statblock: dict[str, Any], location: str = "body") -> int:
    armour = statblock.get("armour") or {}
    if armour.get("mode") == "simple":
        return coerce_int(armour.get("total"))
    return coerce_int((armour.get("locations") or {}).get(location))


def get_skill_target(statblock: dict[str, Any], skill_key: str) -> Optional[int]:
    """Skill target using the NPC half-characteristic rule for untrained skills."""
    characteristics = characteristics_of(statblock)
    model = SkillModel(
        statblock.get("trainedSkills"),
        characteristic_total=characteristics.total,
        policy=policy_for(ActorKind.NPC),
    )
    return model.get_target(skill_key)


def apply_damage(
    statblock: dict[str, Any],
    amount: int,
    location: str = "body",
    ignore_armour: bool = False,
    ignore_toughness: bool = False,
) -> DamageResult:
    """
    Apply damage to a statblock in place.

    Armour at the hit location and the toughness bonus are subtracted first.
    A horde takes the remainder as magnitude damage. Anything else loses
    wounds; damage beyond the remaining wounds accumulates as critical damage.

    Args:
        statblock: Statblock record, updated in place
        amount: Raw damage
        location: Hit location for location-based armour
        ignore_armour: Skip armour reduction
        ignore_toughness: Skip toughness bonus reduction

    Returns:
        DamageResult
    """
    reduction = 0
    if not ignore_armour:
        reduction += get_armour_for_location(statblock, location)
    if not ignore_toughness:
        reduction += characteristics_of(statblock).bonus("toughness")
    final = max(0, amount - reduction)

    wounds = statblock.setdefault("wounds", {"max": 1, "value": 1, "critical": 0})
    current_wounds = coerce_int(wounds.get("value"))
    critical = coerce_int(wounds.get("critical"))

    tracker = HordeMagnitudeTracker.from_statblock(statblock)
    if tracker.enabled:
        magnitude = tracker.apply_magnitude_damage(final, source=location)
        tracker.write_to(statblock)
        return DamageResult(
            raw=amount,
            reduction=reduction,
            final=final,
            wounds=current_wounds,
            critical=critical,
            magnitude=magnitude,
        )

    new_wounds = max(0, current_wounds - final)
    if new_wounds == 0:
        critical += final - current_wounds
    wounds["value"] = new_wounds
    wounds["critical"] = critical
    logger.debug(f"Applied {final} damage ({amount} - {reduction}) to {location}: {new_wounds} wounds left")
    return DamageResult(
        raw=amount,
        reduction=reduction,
        final=final,
        wounds=new_wounds,
        critical=critical,
    )


def heal_wounds(statblock: dict[str, Any], amount: int) -> int:
    """Heal wounds in place, never above max. Returns the new wound value."""
    wounds = statblock.setdefault("wounds", {"max": 1, "value": 1, "critical": 0})
    wounds["value"] = min(coerce_int(wounds.get("max")), coerce_int(wounds.get("value")) + amount)
    return wounds["value"]


def roll_initiative(statblock: dict[str, Any], name: str = "NPC") -> int:
    """Roll 1d10 plus the initiative characteristic bonus and any flat bonus."""
    initiative = statblock.get("initiative") or {}
    characteristic = initiative.get("characteristic") or "agility"
    roll = DiceRoller.roll_d10(reason=f"{name} initiative")
    total = roll.total + characteristics_of(statblock).bonus(characteristic) + coerce_int(initiative.get("bonus"))
    logger.debug(f"{name} initiative: {roll} + {characteristic} bonus = {total}")
    return total


def export_stat_block(statblock: dict[str, Any], name: str = "NPC") -> str:
    """Render a statblock as plain text."""
    characteristics = characteristics_of(statblock)
    lines = [f"=== {name} ==="]
    lines.append(
        f"{statblock.get('type', 'troop').capitalize()} | Threat {statblock.get('threatLevel', 0)} "
        f"| {statblock.get('role', '').capitalize()}"
    )
    if statblock.get("faction"):
        lines.append(f"Faction: {statblock['faction']}")
    lines.append("")

    lines.append("--- Characteristics ---")
    for key, char in (statblock.get("characteristics") or {}).items():
        unnatural = coerce_int(char.get("unnatural"))
        suffix = f" (×{unnatural})" if unnatural >= 2 else ""
        lines.append(f"{char.get('short', key)}: {characteristics.total(key)}{suffix}")
    lines.append("")

    wounds = statblock.get("wounds") or {}
    armour = statblock.get("armour") or {}
    movement = statblock.get("movement") or {}
    armour_text = armour.get("total", 0) if armour.get("mode") == "simple" else "By Location"
    lines.append("--- Combat ---")
    lines.append(f"Wounds: {wounds.get('value', 0)}/{wounds.get('max', 0)}")
    lines.append(f"Armour: {armour_text}")
    lines.append(
        f"Movement: {movement.get('half', 0)}/{movement.get('full', 0)}/"
        f"{movement.get('charge', 0)}/{movement.get('run', 0)}"
    )
    lines.append("")

    skills = statblock.get("trainedSkills") or {}
    if skills:
        lines.append("--- Skills ---")
        for key, skill in skills.items():
            level = "+20" if skill.get("plus20") else "+10" if skill.get("plus10") else ""
            lines.append(f"{skill.get('name') or key}{level}: {get_skill_target(statblock, key)}")
        lines.append("")

    weapons = (statblock.get("weapons") or {}).get("simple") or []
    if weapons:
        lines.append("--- Weapons ---")
        for weapon in weapons:
            line = f"{weapon.get('name', '')}: {weapon.get('damage', '')}, Pen {weapon.get('pen', 0)}"
            if weapon.get("range") != "Melee":
                line += f", {weapon.get('range', '')}, RoF {weapon.get('rof', '')}"
            if weapon.get("special"):
                line += f" [{weapon['special']}]"
            lines.append(line)
        lines.append("")

    if statblock.get("specialAbilities"):
        lines.append("--- Special Abilities ---")
        lines.append(_HTML_TAG.sub("", statblock["specialAbilities"]))

    return "\n".join(lines) + "\n"
