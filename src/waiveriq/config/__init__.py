"""Configuration helpers for league roster rules."""

from .roster import POSITIONS, STANDARD_REQUIREMENTS, StarterRequirements, starter_requirements

__all__ = [
    "POSITIONS",
    "STANDARD_REQUIREMENTS",
    "StarterRequirements",
    "starter_requirements",
]
