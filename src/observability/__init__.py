"""
Observability for the resolution engine.

Provides a structured log of resolution events (rolls, horde transitions,
threat rescales) with JSON export.
"""

from src.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    TransitionEvent,
    ScalingEvent,
    get_run_log,
    reset_run_log,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "TransitionEvent",
    "ScalingEvent",
    "get_run_log",
    "reset_run_log",
]
