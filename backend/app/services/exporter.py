"""Excel export service for month rota calendars."""

import io
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from app.models.cycle import CycleConfig, Period, PERIOD_LABELS, PERIOD_ORDER, REST_LABEL
from app.services.resolver import DayTable
from app.utils.date_utils import get_day_of_week


# Color scheme for period labels
LABEL_COLORS = {
    PERIOD_LABELS[Period.MORNING]: "FFF3E0",    # Light orange
    PERIOD_LABELS[Period.AFTERNOON]: "E3F2FD",  # Light blue
    PERIOD_LABELS[Period.NIGHT]: "F3E5F5",      # Light purple
    REST_LABEL: "FAFAFA",                       # Light gray
}


def export_month_to_excel(
    month: str,
    roster: CycleConfig,
    days: list[DayTable],
) -> io.BytesIO:
    """Export a month of day tables to an Excel file.

    Args:
        month: Month string (e.g., "2026-01")
        roster: The roster the tables were resolved against
        days: Day tables for the month, in date order

    Returns:
        BytesIO buffer containing the Excel file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = f"{month} roster {roster.name}"

    # Styles
    header_fill = PatternFill(start_color="4A90D9", end_color="4A90D9", fill_type="solid")
    header_font_white = Font(bold=True, size=12, color="FFFFFF")
    center_align = Alignment(horizontal="center", vertical="center")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )

    # Header row: date, weekday, one column per crew
    headers = ["Date", "Day"] + [f"Crew {shift}" for shift in roster.shifts]
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font_white
        cell.fill = header_fill
        cell.alignment = center_align
        cell.border = thin_border

    # Data rows
    for row_idx, table in enumerate(days, start=2):
        date_cell = ws.cell(row=row_idx, column=1, value=table.date.isoformat())
        date_cell.alignment = center_align
        date_cell.border = thin_border

        dow_cell = ws.cell(row=row_idx, column=2, value=get_day_of_week(table.date))
        dow_cell.alignment = center_align
        dow_cell.border = thin_border

        for col, shift in enumerate(roster.shifts, start=3):
            label = table.label_for(shift)
            cell = ws.cell(row=row_idx, column=col, value=label)
            cell.alignment = center_align
            cell.border = thin_border

            color = LABEL_COLORS.get(label, "FFFFFF")
            cell.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")

    # Adjust column widths
    ws.column_dimensions[get_column_letter(1)].width = 12  # Date
    ws.column_dimensions[get_column_letter(2)].width = 8   # Day of week
    for col in range(3, len(roster.shifts) + 3):
        ws.column_dimensions[get_column_letter(col)].width = 10

    _add_summary_sheet(wb, roster, days)

    # Save to buffer
    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    return buffer


def _add_summary_sheet(wb: Workbook, roster: CycleConfig, days: list[DayTable]):
    """Add a sheet counting each crew's days per period."""
    ws = wb.create_sheet(title="Summary")

    header_font = Font(bold=True, size=11)
    header_fill = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
    center_align = Alignment(horizontal="center", vertical="center")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )

    labels = [PERIOD_LABELS[p] for p in PERIOD_ORDER] + [REST_LABEL]
    counts = {shift: {label: 0 for label in labels} for shift in roster.shifts}
    for table in days:
        for shift in roster.shifts:
            counts[shift][table.label_for(shift)] += 1

    headers = ["Crew"] + labels + ["Worked"]
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = center_align
        cell.border = thin_border

    for row_idx, shift in enumerate(roster.shifts, start=2):
        row = [shift] + [counts[shift][label] for label in labels]
        row.append(sum(row[1:-1]))  # everything but resting
        for col, value in enumerate(row, start=1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            cell.alignment = center_align
            cell.border = thin_border

    ws.column_dimensions["A"].width = 10
    for col in range(2, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 10
