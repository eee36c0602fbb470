"""API routes for resolving the shift rota."""

import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.responses import StreamingResponse

from app.config import DEFAULT_ROSTER, REFRESH_INTERVAL, SHIFT_TIMEZONE
from app.models.cycle import CycleConfig, PERIOD_LABELS
from app.models.schemas import (
    DayEntryDTO,
    DayTableResponse,
    MonthTableResponse,
    RosterDTO,
    RosterListResponse,
    ShiftResolutionResponse,
)
from app.services.exporter import export_month_to_excel
from app.services.resolver import DayTable, ShiftResolution, day_table, month_table, resolve
from app.services.rosters import RosterRegistry, UnknownRosterError, get_registry
from app.utils.date_utils import (
    get_day_of_week,
    get_timezone,
    local_now,
    parse_date,
    parse_month,
    parse_timestamp,
    to_local,
)


logger = logging.getLogger("shiftrota.api")

router = APIRouter(prefix="/api", tags=["shifts"])


def _get_roster(registry: RosterRegistry, name: Optional[str]) -> CycleConfig:
    try:
        return registry.get(name or DEFAULT_ROSTER)
    except UnknownRosterError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _resolution_response(result: ShiftResolution) -> ShiftResolutionResponse:
    return ShiftResolutionResponse(
        timestamp=result.timestamp.isoformat(timespec="seconds"),
        roster=result.roster,
        active_period=result.active_period,
        active_label=PERIOD_LABELS[result.active_period],
        active_shift=result.active_shift,
        attributed_date=result.attributed_date.isoformat(),
        cycle_offset=result.cycle_offset,
        cycle_index=result.cycle_index,
        day_entry=DayEntryDTO(**result.day_entry.to_dict()),
    )


def _day_table_response(table: DayTable) -> DayTableResponse:
    return DayTableResponse(
        date=table.date.isoformat(),
        day_of_week=get_day_of_week(table.date),
        roster=table.roster,
        cycle_index=table.cycle_index,
        periods=DayEntryDTO(**{period.value: shift for period, shift in table.periods.items()}),
        assignments=table.assignments,
    )


@router.get("/rosters", response_model=RosterListResponse)
async def list_rosters(registry: RosterRegistry = Depends(get_registry)):
    """List the loaded rosters."""
    return RosterListResponse(
        default_roster=DEFAULT_ROSTER,
        rosters=[
            RosterDTO(
                name=r.name,
                description=r.description,
                length=r.length,
                base_date=r.base_date.isoformat(),
                shifts=list(r.shifts),
            )
            for r in registry
        ],
    )


@router.get("/shift/current", response_model=ShiftResolutionResponse)
async def get_current_shift(roster: Optional[str] = None,
                            registry: RosterRegistry = Depends(get_registry)):
    """Crew on duty right now, by the wall clock of SHIFT_TIMEZONE."""
    config = _get_roster(registry, roster)
    now = local_now(get_timezone(SHIFT_TIMEZONE))
    return _resolution_response(resolve(now, config))


@router.get("/shift/at", response_model=ShiftResolutionResponse)
async def get_shift_at(timestamp: str, roster: Optional[str] = None,
                       registry: RosterRegistry = Depends(get_registry)):
    """Crew on duty at an ISO 8601 timestamp.

    Offset-aware timestamps are converted to SHIFT_TIMEZONE first; a bare
    date is taken at noon.
    """
    config = _get_roster(registry, roster)
    try:
        ts = to_local(parse_timestamp(timestamp), get_timezone(SHIFT_TIMEZONE))
        result = resolve(ts, config)
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _resolution_response(result)


@router.get("/shift/day", response_model=DayTableResponse)
async def get_day_table(date: str, roster: Optional[str] = None,
                        registry: RosterRegistry = Depends(get_registry)):
    """Every crew's period (or rest) on a calendar day."""
    config = _get_roster(registry, roster)
    try:
        day = parse_date(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _day_table_response(day_table(day, config))


@router.get("/shift/month", response_model=MonthTableResponse)
async def get_month_table(month: str, roster: Optional[str] = None,
                          registry: RosterRegistry = Depends(get_registry)):
    """Day tables for every day of a month (YYYY-MM)."""
    config = _get_roster(registry, roster)
    try:
        year, month_num = parse_month(month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return MonthTableResponse(
        month=f"{year:04d}-{month_num:02d}",
        roster=config.name,
        days=[_day_table_response(t) for t in month_table(year, month_num, config)],
    )


@router.get("/export")
async def export_month(month: str, roster: Optional[str] = None,
                       registry: RosterRegistry = Depends(get_registry)):
    """
    Export a month of the rota to an Excel file

    Args:
        month: Month, YYYY-MM
        roster: Roster name, defaults to DEFAULT_ROSTER

    Returns:
        Excel file stream
    """
    config = _get_roster(registry, roster)
    try:
        year, month_num = parse_month(month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    month_str = f"{year:04d}-{month_num:02d}"
    try:
        buffer = export_month_to_excel(
            month=month_str,
            roster=config,
            days=month_table(year, month_num, config),
        )
    except Exception as e:
        logger.exception("Export of %s for roster %s failed", month_str, config.name)
        raise HTTPException(status_code=500, detail=f"Export failed: {str(e)}")

    filename = f"rota_{month_str}_{config.name}.xlsx"
    return StreamingResponse(
        buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.websocket("/shift/live")
async def live_shift(websocket: WebSocket, roster: Optional[str] = None,
                     registry: RosterRegistry = Depends(get_registry)):
    """Push the current resolution every REFRESH_INTERVAL seconds.

    A text message naming another roster switches the feed to it.
    """
    try:
        config = registry.get(roster or DEFAULT_ROSTER)
    except UnknownRosterError as e:
        logger.info("Live feed refused: %s", e)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    tz = get_timezone(SHIFT_TIMEZONE)

    try:
        while True:
            result = resolve(local_now(tz), config)
            await websocket.send_json(_resolution_response(result).model_dump(mode="json"))

            try:
                message = await asyncio.wait_for(websocket.receive(), timeout=REFRESH_INTERVAL)
            except asyncio.TimeoutError:
                continue

            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            if text is None:
                await websocket.send_json({"error": "Send the roster name as a text message"})
                continue

            try:
                config = registry.get(text.strip())
            except UnknownRosterError as e:
                await websocket.send_json({"error": str(e)})
    except WebSocketDisconnect:
        logger.debug("Live feed client disconnected")
