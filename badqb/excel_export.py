"""Excel export of standings and weekly results using openpyxl."""

import logging
from pathlib import Path
from typing import Iterable

import openpyxl
from openpyxl.styles import Font

from .constants import LOSS, TIE, WIN
from .models import TeamRecord

logger = logging.getLogger('badqb.excel_export')

STANDINGS_SHEET = 'Standings'
WEEKLY_SHEET = 'Weekly Results'
STANDINGS_HEADERS = ('Rank', 'Team', 'Record', 'Wins', 'Losses', 'Ties', 'Points')

RESULT_FONTS = {
    WIN: Font(color='006100', bold=True),
    LOSS: Font(color='9C0006'),
    TIE: Font(color='9C5700'),
}


def _get_clean_sheet(wb, sheet_name: str):
    """Get a sheet by name with its contents cleared, creating it if needed."""
    if sheet_name in wb.sheetnames:
        ws = wb[sheet_name]
        ws.delete_rows(1, ws.max_row)
    else:
        ws = wb.create_sheet(sheet_name)
    return ws


def export_standings_workbook(
    excel_path: str | Path,
    records: list[TeamRecord],
    weeks: Iterable[int],
) -> None:
    """
    Write standings and each team's weekly W/L/T sequence to a workbook.

    Existing sheets with the same names are overwritten; other sheets in an
    existing workbook are left alone.

    Args:
        excel_path: Workbook path (created if missing)
        records: Ranked team records
        weeks: Week numbers matching each record's weekly_results
    """
    excel_path = Path(excel_path)
    weeks = list(weeks)

    if excel_path.exists():
        wb = openpyxl.load_workbook(str(excel_path))
    else:
        excel_path.parent.mkdir(parents=True, exist_ok=True)
        wb = openpyxl.Workbook()
        wb.active.title = STANDINGS_SHEET

    ws = _get_clean_sheet(wb, STANDINGS_SHEET)
    for col, header in enumerate(STANDINGS_HEADERS, start=1):
        ws.cell(row=1, column=col, value=header).font = Font(bold=True)

    for rank, record in enumerate(records, start=1):
        row = rank + 1
        values = (
            rank,
            record.team_name,
            record.record,
            record.wins,
            record.losses,
            record.ties,
            record.total_points,
        )
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)

    ws = _get_clean_sheet(wb, WEEKLY_SHEET)
    ws.cell(row=1, column=1, value='Team').font = Font(bold=True)
    for col, week in enumerate(weeks, start=2):
        ws.cell(row=1, column=col, value=f'Week {week}').font = Font(bold=True)

    for row, record in enumerate(records, start=2):
        ws.cell(row=row, column=1, value=record.team_name)
        for col, result in enumerate(record.weekly_results, start=2):
            if not result:
                continue
            cell = ws.cell(row=row, column=col, value=result)
            cell.font = RESULT_FONTS[result]

    wb.save(str(excel_path))
    wb.close()
    logger.info(f'Wrote standings for {len(records)} teams to {excel_path}')
