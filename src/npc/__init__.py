"""
NPC statblock system.

Generates statblocks from a threat level, rescales them between threat
levels, tracks horde magnitude and applies damage to statblock records.
"""

from src.npc.threat_scaler import (
    EQUIPMENT_PRESETS,
    ROLE_PROFILES,
    THREAT_TIERS,
    ScaleOptions,
    ThreatScaler,
    ThreatTier,
    UnknownProfileError,
    apply_updates,
    generate_npc_data,
    get_threat_scaler,
    get_tier,
    scale_to_threat,
)
from src.npc.horde_tracker import (
    HordeMagnitudeTracker,
    HordeState,
    InvalidTransitionError,
)
from src.npc.statblock import (
    DamageResult,
    apply_damage,
    export_stat_block,
    heal_wounds,
    roll_initiative,
)

__all__ = [
    "EQUIPMENT_PRESETS",
    "ROLE_PROFILES",
    "THREAT_TIERS",
    "ScaleOptions",
    "ThreatScaler",
    "ThreatTier",
    "UnknownProfileError",
    "apply_updates",
    "generate_npc_data",
    "get_threat_scaler",
    "get_tier",
    "scale_to_threat",
    "HordeMagnitudeTracker",
    "HordeState",
    "InvalidTransitionError",
    "DamageResult",
    "apply_damage",
    "export_stat_block",
    "heal_wounds",
    "roll_initiative",
]
