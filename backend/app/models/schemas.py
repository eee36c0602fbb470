"""Pydantic models for the shift rota API."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.models.cycle import Period


class Theme(str, Enum):
    """Display themes a client can persist."""
    LIGHT = "light"
    DARK = "dark"


class DayEntryDTO(BaseModel):
    """Crew per period for one cycle position (null = nobody)."""
    morning: Optional[str] = None
    afternoon: Optional[str] = None
    night: Optional[str] = None


class RosterDTO(BaseModel):
    """A roster as listed to clients."""
    name: str
    description: str = ""
    length: int
    base_date: str
    shifts: list[str]


class RosterListResponse(BaseModel):
    default_roster: str
    rosters: list[RosterDTO]


class ShiftResolutionResponse(BaseModel):
    """Crew on duty at one instant."""
    timestamp: str
    roster: str
    active_period: Period
    active_label: str
    active_shift: Optional[str] = None
    attributed_date: str
    cycle_offset: int
    cycle_index: int
    day_entry: DayEntryDTO


class DayTableResponse(BaseModel):
    """Every crew's status on one calendar day."""
    date: str
    day_of_week: str
    roster: str
    cycle_index: int
    periods: DayEntryDTO
    assignments: dict[str, str] = Field(
        ..., examples=[{"A": "07–15", "B": "resting", "C": "23–07", "D": "15–23"}]
    )


class MonthTableResponse(BaseModel):
    month: str
    roster: str
    days: list[DayTableResponse]


class ThemePreference(BaseModel):
    theme: Theme
