"""Roll resolution module.

Builds roll requests, resolves percentile tests with degrees of success and
failure, and keeps resolved rolls in a caller-owned session.
"""

from src.resolution.roll_resolver import (
    OpposedResult,
    RollOutcome,
    RollResolver,
    TargetBand,
    get_roll_resolver,
    get_target_band,
    opposed_test,
    parse_manual_dice,
    parse_single_value,
    resolve,
)
from src.resolution.roll_request import (
    ForceFieldOutcome,
    ForceFieldRoll,
    InvalidRollError,
    PsychicRoll,
    RollRequest,
    RollType,
    SimpleRoll,
    WeaponRoll,
    resolve_request,
)
from src.resolution.roll_session import RollSession, StoredRoll

__all__ = [
    "OpposedResult",
    "RollOutcome",
    "RollResolver",
    "TargetBand",
    "get_roll_resolver",
    "get_target_band",
    "opposed_test",
    "parse_manual_dice",
    "parse_single_value",
    "resolve",
    "ForceFieldOutcome",
    "ForceFieldRoll",
    "InvalidRollError",
    "PsychicRoll",
    "RollRequest",
    "RollType",
    "SimpleRoll",
    "WeaponRoll",
    "resolve_request",
    "RollSession",
    "StoredRoll",
]
