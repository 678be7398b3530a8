"""
Skill model.

Derives skill target numbers from a governing characteristic total and the
skill's training ladder (untrained < trained < +10 < +20).

Two untrained rules coexist: acolytes take a flat -20 penalty, while NPCs and
creatures test against half the characteristic. Each rule is a
SkillTargetPolicy, chosen per actor kind with policy_for().
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Union
import logging

from src.data_models import ActorKind, Skill, Specialization, TrainingLevel

logger = logging.getLogger(__name__)


UNTRAINED_PENALTY = -20

TRAINING_OFFSETS: dict[TrainingLevel, int] = {
    TrainingLevel.TRAINED: 0,
    TrainingLevel.PLUS_10: 10,
    TrainingLevel.PLUS_20: 20,
}

SKILL_ALIASES: dict[str, str] = {
    "navigate": "navigation",
}

# Governing characteristic for each standard skill
SKILL_CHARACTERISTICS: dict[str, str] = {
    "acrobatics": "agility",
    "athletics": "strength",
    "awareness": "perception",
    "charm": "fellowship",
    "command": "fellowship",
    "commerce": "fellowship",
    "commonLore": "intelligence",
    "deceive": "fellowship",
    "dodge": "agility",
    "evaluate": "intelligence",
    "forbiddenLore": "intelligence",
    "inquiry": "fellowship",
    "interrogation": "willpower",
    "intimidate": "strength",
    "linguistics": "intelligence",
    "logic": "intelligence",
    "medicae": "intelligence",
    "navigate": "intelligence",
    "navigation": "intelligence",
    "operate": "agility",
    "parry": "weaponSkill",
    "psyniscience": "perception",
    "scholasticLore": "intelligence",
    "scrutiny": "perception",
    "security": "intelligence",
    "sleightOfHand": "agility",
    "stealth": "agility",
    "survival": "perception",
    "techUse": "intelligence",
    "trade": "intelligence",
}

DEFAULT_SKILL_CHARACTERISTIC = "perception"


def get_skill_characteristic(skill_key: str) -> str:
    """Governing characteristic of a standard skill (perception if unknown)."""
    return SKILL_CHARACTERISTICS.get(skill_key, DEFAULT_SKILL_CHARACTERISTIC)


# =============================================================================
# TRAINING LADDER
# =============================================================================


TrainedEntry = Union[Skill, Specialization]


def get_training_level(entry: TrainedEntry) -> TrainingLevel:
    """Highest rung of the training ladder set on a skill or specialization."""
    if entry.plus20:
        return TrainingLevel.PLUS_20
    if entry.plus10:
        return TrainingLevel.PLUS_10
    if entry.trained:
        return TrainingLevel.TRAINED
    return TrainingLevel.UNTRAINED


def set_training_level(entry: TrainedEntry, level: TrainingLevel) -> None:
    """Set the ladder so that each rung implies every rung below it."""
    entry.trained = level.rank >= TrainingLevel.TRAINED.rank
    entry.plus10 = level.rank >= TrainingLevel.PLUS_10.rank
    entry.plus20 = level.rank >= TrainingLevel.PLUS_20.rank


def normalise_training(entry: TrainedEntry) -> TrainedEntry:
    """Fill in the lower rungs implied by the highest one set."""
    set_training_level(entry, get_training_level(entry))
    return entry


# =============================================================================
# TARGET POLICIES
# =============================================================================


class SkillTargetPolicy(ABC):
    """Rule for turning a characteristic total and training into a target."""

    name: str = ""

    @abstractmethod
    def untrained_target(self, characteristic_total: int, bonus: int) -> int:
        """Target number for an untrained skill."""

    def trained_target(self, characteristic_total: int, level: TrainingLevel, bonus: int) -> int:
        return characteristic_total + TRAINING_OFFSETS[level] + bonus

    def target(self, entry: TrainedEntry, characteristic_total: int) -> int:
        level = get_training_level(entry)
        if level == TrainingLevel.UNTRAINED:
            return self.untrained_target(characteristic_total, entry.bonus)
        return self.trained_target(characteristic_total, level, entry.bonus)


class FlatPenaltyPolicy(SkillTargetPolicy):
    """Acolyte rule: untrained skills test at the characteristic -20."""

    name = "flat_penalty"

    def untrained_target(self, characteristic_total: int, bonus: int) -> int:
        return characteristic_total + UNTRAINED_PENALTY + bonus


class HalfCharacteristicPolicy(SkillTargetPolicy):
    """NPC and creature rule: untrained skills test at half the characteristic."""

    name = "half_characteristic"

    def untrained_target(self, characteristic_total: int, bonus: int) -> int:
        return characteristic_total // 2


_POLICIES: dict[ActorKind, SkillTargetPolicy] = {
    ActorKind.ACOLYTE: FlatPenaltyPolicy(),
    ActorKind.NPC: HalfCharacteristicPolicy(),
    ActorKind.CREATURE: HalfCharacteristicPolicy(),
}


def policy_for(kind: Union[ActorKind, str]) -> SkillTargetPolicy:
    """Untrained-skill policy for an actor kind (flat penalty if unknown)."""
    try:
        return _POLICIES[ActorKind(kind)]
    except ValueError:
        logger.warning(f"Unknown actor kind '{kind}', using flat untrained penalty")
        return _POLICIES[ActorKind.ACOLYTE]


def get_policy_by_name(name: str) -> SkillTargetPolicy:
    """Look up a policy by its name (used by configuration)."""
    for policy in _POLICIES.values():
        if policy.name == name:
            return policy
    raise ValueError(f"Unknown skill target policy: {name}")


def compute_target(
    skill: Union[TrainedEntry, dict[str, Any]],
    characteristic_total: int,
    policy: Optional[SkillTargetPolicy] = None,
) -> int:
    """
    Compute a skill's target number.

    Args:
        skill: Skill or specialization (or a plain skill record)
        characteristic_total: Total of the governing characteristic
        policy: Untrained rule; defaults to the flat -20 penalty

    Returns:
        Integer target number
    """
    if isinstance(skill, dict):
        skill = Skill.from_dict(skill)
    policy = policy or _POLICIES[ActorKind.ACOLYTE]
    return policy.target(skill, characteristic_total)


# =============================================================================
# LOOKUP
# =============================================================================


def resolve_skill_name(skills: dict[str, Any], skill_name: str) -> str:
    """Apply aliases ("navigate" -> "navigation") when the name itself is absent."""
    if not skill_name or skill_name in skills:
        return skill_name
    alias = SKILL_ALIASES.get(skill_name.lower())
    if alias and alias in skills:
        return alias
    return skill_name


def get_skill_fuzzy(skills: dict[str, Skill], skill_name: str) -> Optional[Skill]:
    """Find a skill by key, alias, or case-insensitive key match."""
    resolved = resolve_skill_name(skills, skill_name)
    if resolved in skills:
        return skills[resolved]
    for name, skill in skills.items():
        if name.upper() == skill_name.upper():
            return skill
    return None


def find_specialization(
    skill: Skill,
    speciality: Union[int, str, None],
) -> Optional[Specialization]:
    """
    Find a specialization by integer index, numeric string index, or
    case-insensitive name.
    """
    if not skill.entries or speciality is None:
        return None
    if isinstance(speciality, int) and not isinstance(speciality, bool):
        if 0 <= speciality < len(skill.entries):
            return skill.entries[speciality]
        return None

    text = str(speciality).strip()
    if text.isdigit():
        index = int(text)
        if index < len(skill.entries):
            return skill.entries[index]

    for entry in skill.entries:
        if entry.name.lower() == text.lower():
            return entry
    return None


class SkillModel:
    """
    Skill targets for one actor.

    Combines a skill table with a characteristic total lookup and the
    untrained policy of the actor's kind.
    """

    def __init__(
        self,
        skills: Optional[dict[str, Union[Skill, dict[str, Any]]]] = None,
        characteristic_total: Optional[Any] = None,
        policy: Optional[SkillTargetPolicy] = None,
        overrides: Optional[dict[str, int]] = None,
    ):
        """
        Args:
            skills: Skill table keyed by skill key
            characteristic_total: Callable mapping a characteristic key to its total
            policy: Untrained rule for this actor
            overrides: Custom per-skill targets that replace the computed value
        """
        self.skills: dict[str, Skill] = {}
        for key, value in (skills or {}).items():
            self.skills[key] = value if isinstance(value, Skill) else Skill.from_dict(value)
        self._characteristic_total = characteristic_total or (lambda key: 0)
        self.policy = policy or _POLICIES[ActorKind.ACOLYTE]
        self.overrides = dict(overrides or {})

    def get_skill(self, skill_name: str) -> Optional[Skill]:
        return get_skill_fuzzy(self.skills, skill_name)

    def get_target(
        self,
        skill_name: str,
        speciality: Union[int, str, None] = None,
    ) -> Optional[int]:
        """
        Target number for a skill test.

        Skills the actor lacks are tested untrained against their standard
        characteristic. An unmatched specialization falls back to the parent
        skill with a warning. Returns None only when the skill is unknown
        and has no standard characteristic either.
        """
        resolved = resolve_skill_name(self.skills, skill_name)
        if resolved in self.overrides:
            return self.overrides[resolved]

        skill = self.get_skill(skill_name)
        if skill is None:
            if skill_name not in SKILL_CHARACTERISTICS:
                logger.warning(f"Unknown skill: {skill_name}")
                return None
            total = self._characteristic_total(get_skill_characteristic(skill_name))
            return self.policy.untrained_target(total, 0)

        entry: TrainedEntry = skill
        characteristic = skill.characteristic
        if speciality is not None:
            match = find_specialization(skill, speciality)
            if match is None:
                logger.warning(
                    f"Specialization '{speciality}' not found on {skill_name}, "
                    f"using parent skill"
                )
            else:
                entry = match
                characteristic = match.characteristic or skill.characteristic

        return self.policy.target(entry, self._characteristic_total(characteristic))
