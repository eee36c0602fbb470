"""Cycle table types: periods, day entries and roster configurations."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class Period(str, Enum):
    """Eight-hour periods of a working day."""
    MORNING = "morning"      # 07:00-15:00
    AFTERNOON = "afternoon"  # 15:00-23:00
    NIGHT = "night"          # 23:00-07:00, owned by the day it starts on


PERIOD_ORDER = (Period.MORNING, Period.AFTERNOON, Period.NIGHT)

PERIOD_LABELS = {
    Period.MORNING: "07–15",
    Period.AFTERNOON: "15–23",
    Period.NIGHT: "23–07",
}

REST_LABEL = "resting"


class RosterConfigError(ValueError):
    """A cycle table that cannot be resolved against (bad length, unknown crew, ...)."""


@dataclass(frozen=True)
class DayEntry:
    """Crew letter on duty for each period of one cycle position (None = nobody)."""
    morning: Optional[str] = None
    afternoon: Optional[str] = None
    night: Optional[str] = None

    def shift_for(self, period: Period) -> Optional[str]:
        return getattr(self, period.value)

    def assigned(self) -> list[tuple[Period, str]]:
        """Periods that have a crew, in day order."""
        return [
            (period, self.shift_for(period))
            for period in PERIOD_ORDER
            if self.shift_for(period) is not None
        ]

    def to_dict(self) -> dict:
        return {period.value: self.shift_for(period) for period in PERIOD_ORDER}


@dataclass(frozen=True)
class CycleConfig:
    """A roster: `length` day entries repeating forever around `base_date`.

    Validated on construction so that every integer day offset maps to an
    entry. When `shifts` is empty it is derived from the table in first-seen
    order.
    """
    name: str
    length: int
    base_date: date
    days: tuple[DayEntry, ...]
    shifts: tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self):
        if isinstance(self.length, bool) or not isinstance(self.length, int) or self.length <= 0:
            raise RosterConfigError(
                f"Roster {self.name!r}: length must be a positive integer, got {self.length!r}"
            )

        days = tuple(self.days)
        if len(days) != self.length:
            raise RosterConfigError(
                f"Roster {self.name!r}: length is {self.length} but the table has {len(days)} entries"
            )
        object.__setattr__(self, "days", days)

        used = []
        for entry in days:
            for _, shift in entry.assigned():
                if shift not in used:
                    used.append(shift)

        if not self.shifts:
            object.__setattr__(self, "shifts", tuple(used))
            return

        object.__setattr__(self, "shifts", tuple(self.shifts))
        unknown = [shift for shift in used if shift not in self.shifts]
        if unknown:
            raise RosterConfigError(
                f"Roster {self.name!r}: table uses crews {unknown} not listed in shifts {list(self.shifts)}"
            )
