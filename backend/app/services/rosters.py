"""Roster loading.

Cycle tables ship as static JSON (see app/data/rosters.json). Each roster is
validated when it is built and the registry is created once per process.

File format::

    {"rosters": [
        {"name": "84", "length": 84, "base_date": "2026-01-01",
         "shifts": ["A", "B", "C", "D"], "description": "...",
         "days": [["A", "D", "C"], {"morning": "D", "afternoon": "C", "night": null}, ...]}
    ]}

A day is either a [morning, afternoon, night] list or a mapping by period
name; null means no crew. `length` and `shifts` are optional.
"""

import json
import logging
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator

from app.config import ROSTER_FILE
from app.models.cycle import CycleConfig, DayEntry, RosterConfigError


logger = logging.getLogger("shiftrota.rosters")


class UnknownRosterError(KeyError):
    """Lookup of a roster name that is not loaded."""

    def __init__(self, name: str, available: list[str]):
        super().__init__(name)
        self.name = name
        self.available = available

    def __str__(self):
        return f"Unknown roster {self.name!r}, available: {', '.join(self.available)}"


def _parse_day(raw, roster_name: str, position: int) -> DayEntry:
    if isinstance(raw, dict):
        entry = DayEntry(
            morning=raw.get("morning"),
            afternoon=raw.get("afternoon"),
            night=raw.get("night"),
        )
    elif isinstance(raw, (list, tuple)) and len(raw) == 3:
        entry = DayEntry(*raw)
    else:
        raise RosterConfigError(
            f"Roster {roster_name!r} day {position}: expected [morning, afternoon, night], got {raw!r}"
        )

    crews = [shift for _, shift in entry.assigned()]
    if len(set(crews)) != len(crews):
        logger.warning(
            "Roster %s day %d puts the same crew on more than one period: %s",
            roster_name, position, entry.to_dict(),
        )
    return entry


def build_roster(data: dict) -> CycleConfig:
    """Build and validate one roster from its JSON definition."""
    if not isinstance(data, dict):
        raise RosterConfigError(f"Roster definition must be an object, got {data!r}")

    try:
        name = str(data["name"])
        raw_days = data["days"]
        base_date = date.fromisoformat(data["base_date"])
    except KeyError as e:
        raise RosterConfigError(f"Roster definition is missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise RosterConfigError(f"Roster {data.get('name')!r}: invalid base_date: {e}") from e

    if not isinstance(raw_days, list):
        raise RosterConfigError(f"Roster {name!r}: days must be a list, got {raw_days!r}")

    days = tuple(_parse_day(raw, name, i) for i, raw in enumerate(raw_days))

    return CycleConfig(
        name=name,
        length=data.get("length", len(days)),
        base_date=base_date,
        days=days,
        shifts=tuple(data.get("shifts") or ()),
        description=data.get("description", ""),
    )


class RosterRegistry:
    """Read-only set of rosters, addressed by name, in file order."""

    def __init__(self, rosters: Iterable[CycleConfig]):
        self._rosters: dict[str, CycleConfig] = {}
        for roster in rosters:
            if roster.name in self._rosters:
                raise RosterConfigError(f"Duplicate roster name {roster.name!r}")
            self._rosters[roster.name] = roster
        if not self._rosters:
            raise RosterConfigError("No rosters defined")

    def get(self, name: str) -> CycleConfig:
        try:
            return self._rosters[name]
        except KeyError:
            raise UnknownRosterError(name, self.names()) from None

    def names(self) -> list[str]:
        return list(self._rosters)

    def __contains__(self, name) -> bool:
        return name in self._rosters

    def __iter__(self) -> Iterator[CycleConfig]:
        return iter(self._rosters.values())

    def __len__(self) -> int:
        return len(self._rosters)


def load_rosters(path) -> RosterRegistry:
    """Load every roster from a JSON file."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RosterConfigError(f"{path}: invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RosterConfigError(f"{path}: expected an object with a 'rosters' list")

    rosters = data.get("rosters", [])
    if not isinstance(rosters, list):
        raise RosterConfigError(f"{path}: 'rosters' must be a list")

    registry = RosterRegistry(build_roster(item) for item in rosters)
    logger.info(
        "Loaded %d rosters from %s: %s",
        len(registry), path,
        ", ".join(f"{r.name} ({r.length} days)" for r in registry),
    )
    return registry


@lru_cache(maxsize=None)
def get_registry() -> RosterRegistry:
    """Process-wide registry, loaded on first use. Usable with FastAPI Depends."""
    return load_rosters(ROSTER_FILE)
