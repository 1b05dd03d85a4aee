"""
Report Generator Service
ablls_platform/services/report_generator.py

Renders a VBGradingResult into a four-sheet Excel workbook:

    1. Summary             child details + overall score
    2. Domain Scores       one row per domain, proficiency colored by band
    3. Detailed Responses  one row per question, shaded per domain
    4. VB Mapping          one row per VB export row with colored unit cells

The generator only reads the grading result. Output depends on the input
alone; workbook timestamps are pinned to the session's completion time.
"""

import io
import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ablls_platform.config import settings
from ablls_platform.models.enumerations import ProficiencyLevel
from ablls_platform.models.grading import VBGradingResult
from ablls_platform.scoring.vb_mapping import (
    VB_BASE_UNITS,
    VB_SUPPORTED_MAX,
    VBExportRow,
    map_question_to_vb,
    render_vb_bar,
)

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SHEET_NAMES = ["Summary", "Domain Scores", "Detailed Responses", "VB Mapping"]

# ARGB colors
TITLE_COLOR = "FFDC143C"
SECTION_COLOR = "FFC13018"
HEADER_FILL_COLOR = "FFDC143C"
HEADER_FONT_COLOR = "FFFFFFFF"
SCORE_ROW_COLOR = "FFFADBD8"
ALT_ROW_COLOR = "FFFFF5F5"
WHITE = "FFFFFFFF"
VB_FILLED_COLOR = "FFC95A5A"
VB_EMPTY_COLOR = WHITE

PROFICIENCY_COLORS: Dict[ProficiencyLevel, str] = {
    ProficiencyLevel.MASTERED: "FF90EE90",    # light green
    ProficiencyLevel.PROFICIENT: "FFFFEB3B",  # yellow
    ProficiencyLevel.DEVELOPING: "FFFFA726",  # orange
    ProficiencyLevel.EMERGING: "FFFFCDD2",    # light red
}

DOMAIN_GROUP_COLORS = [ALT_ROW_COLOR, WHITE]

DOMAIN_COLUMNS = [
    ("Domain", 12),
    ("Domain Name", 40),
    ("Question Count", 15),
    ("Raw Score", 12),
    ("Max Possible", 15),
    ("Percentage", 12),
    ("Proficiency Level", 18),
]

DETAIL_COLUMNS = [
    ("Domain", 10),
    ("Skill Code", 12),
    ("Task Name", 35),
    ("Question", 50),
    ("Selected Answer", 40),
    ("Score", 10),
    ("Max Score", 12),
    ("Normalized (4u)", 16),
    ("VB Bar", 18),
]

VB_COLUMNS = [
    ("Question", 14),
    ("Score", 10),
    ("Max", 8),
    ("Normalized", 12),
    ("Unit 1", 8),
    ("Unit 2", 8),
    ("Unit 3", 8),
    ("Unit 4", 8),
    ("Bar", 18),
]
VB_FIRST_UNIT_COLUMN = 5

_THIN = Side(style="thin")
_MEDIUM = Side(style="medium")
THIN_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)
MEDIUM_BORDER = Border(top=_MEDIUM, left=_MEDIUM, bottom=_MEDIUM, right=_MEDIUM)


def _solid(argb: str) -> PatternFill:
    return PatternFill(fill_type="solid", start_color=argb, end_color=argb)


def _format_number(value: float) -> str:
    """62.5 -> '62.5', 100.0 -> '100'."""
    return format(value, "g")


def _format_percentage(value: float) -> str:
    return f"{_format_number(value)}%"


def _excel_datetime(value: datetime) -> datetime:
    """openpyxl stores naive datetimes; convert aware values to naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# =====================================================================
# Public API
# =====================================================================

def build_report_filename(result: VBGradingResult) -> str:
    """
    {assessment type, non-alphanumerics -> '_'}_{child id}_{YYYY-MM-DD}.xlsx
    """
    assessment = re.sub(r"[^a-zA-Z0-9]", "_", result.assessment_type)
    completed = result.completed_at
    if completed.tzinfo is not None:
        completed = completed.astimezone(timezone.utc)
    return f"{assessment}_{result.child_id}_{completed.strftime('%Y-%m-%d')}.xlsx"


def generate_report_workbook(result: VBGradingResult, title: Optional[str] = None) -> Workbook:
    """Build the four-sheet report workbook for a grading result."""
    workbook = Workbook()

    stamp = _excel_datetime(result.completed_at)
    workbook.properties.creator = settings.REPORT_CREATOR
    workbook.properties.created = stamp
    workbook.properties.modified = stamp
    workbook.properties.lastPrinted = stamp

    summary_sheet = workbook.active
    summary_sheet.title = SHEET_NAMES[0]
    _write_summary_sheet(summary_sheet, result, title or settings.REPORT_TITLE)
    _write_domain_scores_sheet(workbook.create_sheet(SHEET_NAMES[1]), result)
    _write_detailed_responses_sheet(workbook.create_sheet(SHEET_NAMES[2]), result)
    _write_vb_mapping_sheet(workbook.create_sheet(SHEET_NAMES[3]), result.vb_export)

    logger.info(
        f"Generated report for session {result.session_id}: "
        f"{len(result.domain_scores)} domains, {len(result.vb_export)} VB rows"
    )
    return workbook


def render_report(result: VBGradingResult, title: Optional[str] = None) -> bytes:
    """Render the report workbook to .xlsx bytes."""
    buffer = io.BytesIO()
    generate_report_workbook(result, title).save(buffer)
    return buffer.getvalue()


# =====================================================================
# Sheets
# =====================================================================

def _write_summary_sheet(sheet: Worksheet, result: VBGradingResult, title: str) -> None:
    sheet.page_setup.paperSize = sheet.PAPERSIZE_A4
    sheet.page_setup.orientation = sheet.ORIENTATION_PORTRAIT
    sheet.column_dimensions["A"].width = 25
    sheet.column_dimensions["B"].width = 40

    sheet.append([title])
    sheet.merge_cells("A1:B1")
    sheet["A1"].font = Font(size=18, bold=True, color=TITLE_COLOR)
    sheet["A1"].alignment = Alignment(vertical="center", horizontal="center")
    sheet.row_dimensions[1].height = 30

    sheet.append([])

    _append_section_header(sheet, "Child Information")
    identity_rows = [
        ["Child Name:", result.child_name or "N/A"],
        ["Child ID:", result.child_id],
        ["Assessment Type:", result.assessment_type],
        ["Completed Date:", _excel_datetime(result.completed_at).strftime("%Y-%m-%d")],
        ["Session ID:", result.session_id],
    ]
    for values in identity_rows:
        sheet.append(values)
        _style_summary_row(sheet, sheet.max_row, highlight=False)

    sheet.append([])

    _append_section_header(sheet, "Overall Score Summary")
    score_rows = [
        ["Total Raw Score:", f"{result.overall_score} / {result.overall_max_possible}"],
        ["Overall Percentage:", _format_percentage(result.overall_percentage)],
        ["Overall Proficiency:", result.overall_proficiency.value],
    ]
    for values in score_rows:
        sheet.append(values)
        _style_summary_row(sheet, sheet.max_row, highlight=True)


def _append_section_header(sheet: Worksheet, label: str) -> None:
    sheet.append([label, ""])
    row = sheet.max_row
    sheet.merge_cells(f"A{row}:B{row}")
    sheet.cell(row=row, column=1).font = Font(size=14, bold=True, color=SECTION_COLOR)


def _style_summary_row(sheet: Worksheet, row: int, highlight: bool) -> None:
    sheet.row_dimensions[row].height = 20
    label = sheet.cell(row=row, column=1)
    value = sheet.cell(row=row, column=2)
    label.font = Font(bold=True)
    label.alignment = Alignment(vertical="center")
    value.alignment = Alignment(vertical="center")
    if highlight:
        label.fill = _solid(SCORE_ROW_COLOR)
        value.fill = _solid(SCORE_ROW_COLOR)


def _write_domain_scores_sheet(sheet: Worksheet, result: VBGradingResult) -> None:
    _setup_table_sheet(sheet, DOMAIN_COLUMNS, header_height=25)
    proficiency_column = len(DOMAIN_COLUMNS)

    for index, domain_score in enumerate(result.domain_scores):
        sheet.append([
            domain_score.domain,
            domain_score.domain_name,
            domain_score.question_count,
            domain_score.raw_score,
            domain_score.max_possible,
            _format_percentage(domain_score.percentage),
            domain_score.proficiency.value,
        ])
        row = sheet.max_row
        sheet.row_dimensions[row].height = 20

        row_fill = _solid(ALT_ROW_COLOR) if index % 2 == 0 else None
        for column in range(1, len(DOMAIN_COLUMNS) + 1):
            cell = sheet.cell(row=row, column=column)
            cell.alignment = Alignment(vertical="center")
            cell.border = THIN_BORDER
            if row_fill is not None:
                cell.fill = row_fill

        proficiency_cell = sheet.cell(row=row, column=proficiency_column)
        proficiency_cell.font = Font(bold=True)
        proficiency_cell.fill = _solid(PROFICIENCY_COLORS[domain_score.proficiency])


def _write_detailed_responses_sheet(sheet: Worksheet, result: VBGradingResult) -> None:
    _setup_table_sheet(sheet, DETAIL_COLUMNS, header_height=25, wrap_header=True)

    for domain_index, domain_score in enumerate(result.domain_scores):
        group_fill = _solid(DOMAIN_GROUP_COLORS[domain_index % len(DOMAIN_GROUP_COLORS)])

        for question in domain_score.questions:
            sheet.append([
                domain_score.domain,
                question.skill_code,
                question.task_name,
                question.question_text,
                question.selected_answer,
                question.numeric_score,
                question.max_score,
                question.normalized_score,
                question.vb_bar,
            ])
            row = sheet.max_row
            sheet.row_dimensions[row].height = 30
            for column in range(1, len(DETAIL_COLUMNS) + 1):
                cell = sheet.cell(row=row, column=column)
                cell.alignment = Alignment(vertical="center", wrap_text=True)
                cell.fill = group_fill
                cell.border = THIN_BORDER


def _write_vb_mapping_sheet(sheet: Worksheet, vb_export: List[VBExportRow]) -> None:
    """
    One row per export row. The fill pattern is re-derived from the reduced
    export row through the VB engine.
    """
    _setup_table_sheet(sheet, VB_COLUMNS, header_height=24)
    filled = _solid(VB_FILLED_COLOR)
    empty = _solid(VB_EMPTY_COLOR)
    bar_column = VB_FIRST_UNIT_COLUMN + VB_BASE_UNITS

    for vb_row in vb_export:
        if vb_row.max not in VB_SUPPORTED_MAX:
            raise ValueError(
                f"VB export row for {vb_row.question!r} has unsupported max {vb_row.max!r}"
            )

        mapped = map_question_to_vb(vb_row.question, vb_row.score, vb_row.max)
        sheet.append([vb_row.question, vb_row.score, vb_row.max, vb_row.normalized])
        row = sheet.max_row
        sheet.cell(row=row, column=bar_column, value=render_vb_bar(mapped.filled_map))
        sheet.row_dimensions[row].height = 20

        if vb_row.max == 2:
            for pair_index, is_filled in enumerate(mapped.paired_fill_map):
                start = VB_FIRST_UNIT_COLUMN + pair_index * 2
                sheet.merge_cells(
                    f"{get_column_letter(start)}{row}:{get_column_letter(start + 1)}{row}"
                )
                sheet.cell(row=row, column=start).fill = filled if is_filled else empty
        else:
            for unit_index, is_filled in enumerate(mapped.filled_map):
                cell = sheet.cell(row=row, column=VB_FIRST_UNIT_COLUMN + unit_index)
                cell.fill = filled if is_filled else empty

        for column in range(1, len(VB_COLUMNS) + 1):
            cell = sheet.cell(row=row, column=column)
            cell.alignment = Alignment(vertical="center", horizontal="center")
            cell.border = THIN_BORDER


def _setup_table_sheet(
    sheet: Worksheet,
    columns: List[tuple],
    header_height: int,
    wrap_header: bool = False,
) -> None:
    """Landscape sheet with a red, bold header row and fixed column widths."""
    sheet.page_setup.paperSize = sheet.PAPERSIZE_A4
    sheet.page_setup.orientation = sheet.ORIENTATION_LANDSCAPE

    sheet.append([header for header, _ in columns])
    sheet.row_dimensions[1].height = header_height
    for index, (_, width) in enumerate(columns, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width
        cell = sheet.cell(row=1, column=index)
        cell.font = Font(bold=True, color=HEADER_FONT_COLOR)
        cell.fill = _solid(HEADER_FILL_COLOR)
        cell.alignment = Alignment(vertical="center", horizontal="center", wrap_text=wrap_header)
        cell.border = MEDIUM_BORDER
