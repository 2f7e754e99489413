"""Starter requirements derived from league roster settings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Tuple


POSITIONS: Tuple[str, ...] = ("QB", "RB", "WR", "TE", "K", "DEF")

_SLOT_ALIASES: Dict[str, str] = {
    "QB": "QB",
    "RB": "RB",
    "WR": "WR",
    "TE": "TE",
    "K": "K",
    "PK": "K",
    "DEF": "DEF",
    "DST": "DEF",
    "D/ST": "DEF",
    "D": "DEF",
    "FLEX": "FLEX",
    "WRRB_FLEX": "FLEX",
    "REC_FLEX": "FLEX",
    "WRT": "FLEX",
    "SUPER_FLEX": "FLEX",
}


@dataclass(frozen=True)
class StarterRequirements:
    QB: int = 1
    RB: int = 2
    WR: int = 2
    TE: int = 1
    FLEX: int = 1
    K: int = 1
    DEF: int = 1

    def required(self, position: str) -> int:
        """Starter count for a position; unknown positions require none."""

        slot = _SLOT_ALIASES.get(position.upper())
        if slot is None:
            return 0
        return int(getattr(self, slot))

    def as_dict(self) -> Dict[str, int]:
        return {slot: int(getattr(self, slot)) for slot in (*POSITIONS[:4], "FLEX", *POSITIONS[4:])}


STANDARD_REQUIREMENTS = StarterRequirements()


def _count_slots(slots: Iterable[Any]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for raw in slots:
        slot = _SLOT_ALIASES.get(str(raw).strip().upper())
        if slot is None:
            continue
        counts[slot] = counts.get(slot, 0) + 1
    return counts


def starter_requirements(roster_settings: Mapping[str, Any] | Iterable[Any] | None) -> StarterRequirements:
    """Resolve starter requirements from a league's stored roster settings.

    Accepts either a mapping of position to starter count (``{"RB": 3}``) or a
    Sleeper-style list of roster slots (``["QB", "RB", "RB", "FLEX", "BN"]``),
    bare or nested under ``roster_positions``. Slots that are not starting
    positions (bench, IR, taxi) are ignored. Positions missing from a mapping
    keep the standard requirement; positions missing from a slot list start
    nobody.
    """

    if not roster_settings:
        return STANDARD_REQUIREMENTS

    if isinstance(roster_settings, Mapping):
        if "roster_positions" in roster_settings:
            return starter_requirements(roster_settings["roster_positions"])
        counts: Dict[str, int] = {}
        for key, value in roster_settings.items():
            slot = _SLOT_ALIASES.get(str(key).strip().upper())
            if slot is None:
                continue
            try:
                count = int(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Starter count for {key!r} must be an integer, got {value!r}") from exc
            counts[slot] = counts.get(slot, 0) + count
    elif isinstance(roster_settings, (str, bytes)):
        raise TypeError("roster_settings must be a mapping or a list of roster slots")
    else:
        # A slot list describes the whole lineup, so absent positions start nobody.
        counts = _count_slots(roster_settings)
        counts = {slot: counts.get(slot, 0) for slot in STANDARD_REQUIREMENTS.as_dict()}

    for slot, count in counts.items():
        if count < 0:
            raise ValueError(f"Starter count for {slot} cannot be negative")
    return replace(STANDARD_REQUIREMENTS, **counts)
