"""Shift rota resolution.

Resolution of a timestamp against a roster:
    1. classify the wall-clock hour into a period (morning/afternoon/night)
    2. find the calendar date that owns that period (nights after midnight
       belong to the previous day)
    3. count whole days from the roster's base date to that date and wrap
       the offset into the cycle length
    4. read the crew for the period from the day entry at that index

Everything here is a pure function of its arguments; rosters are immutable
and can be shared across requests and threads.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from app.models.cycle import (
    CycleConfig,
    DayEntry,
    Period,
    PERIOD_LABELS,
    PERIOD_ORDER,
    REST_LABEL,
)
from app.utils.date_utils import attributed_date, classify_period, days_of_month


# One instant inside each period of a calendar day. The night instant is
# taken before midnight so it reads the night that starts on that day.
REPRESENTATIVE_TIMES = {
    Period.MORNING: time(8, 0),
    Period.AFTERNOON: time(16, 0),
    Period.NIGHT: time(23, 30),
}


@dataclass(frozen=True)
class ShiftResolution:
    """Crew on duty at one instant."""
    timestamp: datetime
    roster: str
    active_period: Period
    active_shift: Optional[str]
    attributed_date: date
    cycle_offset: int
    cycle_index: int
    day_entry: DayEntry


@dataclass(frozen=True)
class DayTable:
    """What every crew of a roster does on one calendar day."""
    date: date
    roster: str
    cycle_index: int
    periods: dict    # Period -> crew letter or None
    assignments: dict  # crew letter -> period label or REST_LABEL

    def label_for(self, shift: str) -> str:
        return self.assignments.get(shift, REST_LABEL)


def cycle_offset(day: date, config: CycleConfig) -> int:
    """Whole days from the roster's base date to `day` (negative before it)."""
    return (day - config.base_date).days


def cycle_index(day: date, config: CycleConfig) -> int:
    """Position of `day` inside the roster cycle, always in [0, length)."""
    # Python's % takes the sign of the divisor, so negative offsets wrap too
    return cycle_offset(day, config) % config.length


def day_entry_for(day: date, config: CycleConfig) -> DayEntry:
    return config.days[cycle_index(day, config)]


def resolve(timestamp: datetime, config: CycleConfig) -> ShiftResolution:
    """Resolve the period and crew on duty at a wall-clock timestamp."""
    period = classify_period(timestamp)
    owner = attributed_date(timestamp, period)
    offset = cycle_offset(owner, config)
    index = offset % config.length
    entry = config.days[index]

    return ShiftResolution(
        timestamp=timestamp,
        roster=config.name,
        active_period=period,
        active_shift=entry.shift_for(period),
        attributed_date=owner,
        cycle_offset=offset,
        cycle_index=index,
        day_entry=entry,
    )


def day_table(day: date, config: CycleConfig) -> DayTable:
    """Label every crew of the roster with its period on `day`, or as resting.

    Crews start out resting and each period that has a crew overwrites that
    crew's label, so a crew missing from the day entry stays resting.
    """
    assignments = {shift: REST_LABEL for shift in config.shifts}
    periods = {}
    index = cycle_index(day, config)

    for period in PERIOD_ORDER:
        result = resolve(datetime.combine(day, REPRESENTATIVE_TIMES[period]), config)
        periods[period] = result.active_shift
        if result.active_shift is not None:
            assignments[result.active_shift] = PERIOD_LABELS[period]

    return DayTable(
        date=day,
        roster=config.name,
        cycle_index=index,
        periods=periods,
        assignments=assignments,
    )


def month_table(year: int, month: int, config: CycleConfig) -> list[DayTable]:
    """Day tables for every calendar day of a month."""
    return [day_table(d, config) for d in days_of_month(year, month)]
