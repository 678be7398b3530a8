"""
Percentile Resolution Engine - Main Entry Point

Command-line front end for the resolution engine: resolves percentile tests,
classifies range brackets, and generates or rescales threat-based NPC
statblocks.
"""

import sys
from pathlib import Path

# Add the project root to the Python path for module discovery
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import argparse
import json
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from src.actor.skill_model import compute_target, get_policy_by_name, set_training_level
from src.data_models import CombatantType, DiceRoller, Skill, TrainingLevel
from src.modifiers.modifier_aggregator import DIFFICULTY_MODIFIERS, Difficulty, RollModifiers
from src.npc.statblock import export_stat_block
from src.npc.threat_scaler import (
    EQUIPMENT_PRESETS,
    ROLE_PROFILES,
    get_threat_description,
    get_threat_scaler,
    get_tier,
)
from src.observability.run_log import get_run_log
from src.range.range_calculator import calculate_range_modifier, format_range_display
from src.resolution.roll_request import SimpleRoll, resolve_request
from src.resolution.roll_resolver import get_target_band, parse_manual_dice, parse_single_value
from src.resolution.roll_session import RollSession


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class EngineConfig:
    """Configuration for an engine run."""

    seed: Optional[int] = None
    verbose: bool = False

    # Untrained skill rule: flat_penalty or half_characteristic
    untrained_policy: str = "flat_penalty"

    # Resolved rolls older than this are dropped from the session
    session_max_age: timedelta = timedelta(minutes=30)

    # Optional path to write the run log as JSON
    run_log_path: Optional[Path] = None

    def __post_init__(self):
        """Normalise loosely typed values."""
        if isinstance(self.session_max_age, (int, float)):
            self.session_max_age = timedelta(minutes=self.session_max_age)
        if isinstance(self.run_log_path, str):
            self.run_log_path = Path(self.run_log_path)
        # Fail early on an unknown policy name
        get_policy_by_name(self.untrained_policy)


# =============================================================================
# COMMANDS
# =============================================================================

def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def build_base_target(args: argparse.Namespace, config: EngineConfig) -> int:
    """Base target from --target, or from --characteristic and --training."""
    if args.characteristic is None:
        return args.target

    skill = Skill(bonus=args.skill_bonus)
    set_training_level(skill, TrainingLevel(args.training))
    policy = get_policy_by_name(config.untrained_policy)
    return compute_target(skill, args.characteristic, policy)


def run_roll(args: argparse.Namespace, config: EngineConfig, session: RollSession) -> int:
    """Resolve one percentile test and print the outcome."""
    modifiers = RollModifiers(difficulty=Difficulty(args.difficulty), custom=args.modifier)
    request = SimpleRoll(base_target=build_base_target(args, config), name="CLI test", modifiers=modifiers)

    total = None
    if args.roll is not None:
        total = parse_single_value(args.roll)
        if total is None:
            print(f"Invalid roll '{args.roll}': enter a number from 1 to 100")
            return 1
    elif args.tens is not None or args.units is not None:
        total = parse_manual_dice(args.tens, args.units)
        if total is None:
            print("Incomplete roll: both --tens and --units must be digits 0-9")
            return 1

    outcome = resolve_request(request, total=total)
    roll_id = session.store(request, outcome)

    if args.json:
        _print_json({"rollId": roll_id, **outcome.to_dict()})
        return 0

    print(f"Target: {outcome.target} ({get_target_band(outcome.target).value})")
    print(f"Modifiers: {outcome.modifiers}")
    print(str(outcome))
    if outcome.is_critical_success:
        print("Critical success!")
    elif outcome.is_critical_failure:
        print("Critical failure!")
    if outcome.triggers_righteous_fury:
        print("Doubles: Righteous Fury on a successful attack")
    return 0


def run_range(args: argparse.Namespace) -> int:
    """Classify a distance against a weapon range and print the bracket."""
    result = calculate_range_modifier(
        distance=args.distance,
        weapon_range=args.weapon_range,
        weapon_qualities=args.quality,
        is_ranged_weapon=args.weapon_range > 1,
    )
    if args.json:
        _print_json(result.to_dict())
        return 0

    display = format_range_display(result)
    print(f"{display['label']} ({display['modifierText']})")
    print(display["tooltip"])
    return 0


def run_generate(args: argparse.Namespace) -> int:
    """Generate a statblock, optionally rescale it, and print it."""
    scaler = get_threat_scaler()
    statblock = scaler.generate_npc_data(
        threat_level=args.threat,
        role=args.role,
        combatant_type=args.type,
        preset=args.preset,
        faction=args.faction,
        is_horde=args.horde,
    )

    if args.rescale_to is not None:
        statblock = scaler.rescale_and_apply(statblock, args.rescale_to)

    if args.json:
        _print_json(statblock)
        return 0

    threat = statblock["threatLevel"]
    print(f"Tier: {get_tier(threat).name} | Danger: {get_threat_description(threat)}")
    print(export_stat_block(statblock, name=args.name))
    return 0


# =============================================================================
# ARGUMENTS
# =============================================================================

def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Percentile Resolution Engine - target numbers, range brackets and threat-scaled NPCs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.main --target 45                      # Roll d100 against 45
  python -m src.main --target 45 --roll 32            # Resolve an entered roll
  python -m src.main --target 45 --tens 0 --units 0   # Two d10s, 0/0 is 100
  python -m src.main --characteristic 40 --training plus10 --skill-bonus 5
  python -m src.main --distance 21 --weapon-range 40  # Range bracket
  python -m src.main --generate --threat 12 --role bruiser --preset melee
  python -m src.main --generate --threat 8 --horde --rescale-to 14
        """
    )

    # General options
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible rolls",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--save-log",
        type=Path,
        help="Write the run log to this JSON file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    # Roll options
    roll_group = parser.add_argument_group("Roll Options")
    roll_group.add_argument(
        "--target",
        type=int,
        help="Base target number to test against",
    )
    roll_group.add_argument(
        "--characteristic",
        type=int,
        help="Characteristic total; builds the base target from a skill",
    )
    roll_group.add_argument(
        "--training",
        type=str,
        default=TrainingLevel.TRAINED.value,
        choices=[level.value for level in TrainingLevel],
        help="Skill training level used with --characteristic (default: trained)",
    )
    roll_group.add_argument(
        "--skill-bonus",
        type=int,
        default=0,
        help="Flat skill bonus used with --characteristic (default: 0)",
    )
    roll_group.add_argument(
        "--untrained-policy",
        type=str,
        default="flat_penalty",
        choices=["flat_penalty", "half_characteristic"],
        help="Untrained skill rule (default: flat_penalty)",
    )
    roll_group.add_argument(
        "--difficulty",
        type=str,
        default=Difficulty.CHALLENGING.value,
        choices=[d.value for d in DIFFICULTY_MODIFIERS],
        help="Test difficulty (default: challenging)",
    )
    roll_group.add_argument(
        "--modifier",
        type=int,
        default=0,
        help="Custom modifier added to the target",
    )
    roll_group.add_argument(
        "--roll",
        type=str,
        help="Manually entered d100 total (1-100)",
    )
    roll_group.add_argument(
        "--tens",
        type=str,
        help="Manually entered tens die (0-9)",
    )
    roll_group.add_argument(
        "--units",
        type=str,
        help="Manually entered units die (0-9)",
    )
    roll_group.add_argument(
        "--session-max-age",
        type=float,
        default=30,
        help="Minutes a resolved roll stays in the session (default: 30)",
    )

    # Range options
    range_group = parser.add_argument_group("Range Options")
    range_group.add_argument(
        "--distance",
        type=float,
        help="Distance to target in meters",
    )
    range_group.add_argument(
        "--weapon-range",
        type=float,
        default=0,
        help="Base weapon range in meters; 1 or less is melee",
    )
    range_group.add_argument(
        "--quality",
        action="append",
        default=[],
        help="Weapon quality, repeatable (e.g. gyro-stabilised, melta)",
    )

    # NPC options
    npc_group = parser.add_argument_group("NPC Options")
    npc_group.add_argument(
        "--generate",
        action="store_true",
        help="Generate a threat-scaled NPC statblock",
    )
    npc_group.add_argument(
        "--name",
        type=str,
        default="NPC",
        help="Name shown on the exported stat block",
    )
    npc_group.add_argument(
        "--threat",
        type=int,
        default=5,
        help="Threat level 1-30 (default: 5)",
    )
    npc_group.add_argument(
        "--role",
        type=str,
        default="specialist",
        choices=list(ROLE_PROFILES),
        help="NPC role (default: specialist)",
    )
    npc_group.add_argument(
        "--type",
        type=str,
        default=CombatantType.TROOP.value,
        choices=[t.value for t in CombatantType],
        help="Combatant type (default: troop)",
    )
    npc_group.add_argument(
        "--preset",
        type=str,
        default="mixed",
        choices=list(EQUIPMENT_PRESETS),
        help="Equipment preset (default: mixed)",
    )
    npc_group.add_argument(
        "--faction",
        type=str,
        default="",
        help="Faction name",
    )
    npc_group.add_argument(
        "--horde",
        action="store_true",
        help="Generate a horde with a magnitude pool",
    )
    npc_group.add_argument(
        "--rescale-to",
        type=int,
        help="Rescale the generated statblock to this threat level",
    )

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> EngineConfig:
    """Create EngineConfig from parsed arguments."""
    return EngineConfig(
        seed=args.seed,
        verbose=args.verbose,
        untrained_policy=args.untrained_policy,
        session_max_age=args.session_max_age,
        run_log_path=args.save_log,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    if config.seed is not None:
        DiceRoller.set_seed(config.seed)
        get_run_log().set_seed(config.seed)

    if not args.json:
        print("=" * 60)
        print("PERCENTILE RESOLUTION ENGINE v0.1.0")
        print("=" * 60)

    session = RollSession(max_age=config.session_max_age)
    status = 0
    ran = False

    if args.target is not None or args.characteristic is not None:
        status = run_roll(args, config, session) or status
        ran = True
    if args.distance is not None:
        status = run_range(args) or status
        ran = True
    if args.generate:
        status = run_generate(args) or status
        ran = True

    if not ran:
        print("Nothing to do: give --target, --characteristic, --distance or --generate (see --help)")
        status = 2

    if config.run_log_path:
        get_run_log().save(str(config.run_log_path))

    return status


if __name__ == "__main__":
    sys.exit(main())
