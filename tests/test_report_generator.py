"""
Report Generator Tests
tests/test_report_generator.py

Workbook structure, cell values and styling of the Excel report.
"""
import io

import pytest
from openpyxl import Workbook, load_workbook

from ablls_platform.scoring.grading_calculator import GradingCalculator
from ablls_platform.scoring.vb_mapping import VBExportRow
from ablls_platform.services.report_generator import (
    ALT_ROW_COLOR,
    HEADER_FILL_COLOR,
    PROFICIENCY_COLORS,
    SCORE_ROW_COLOR,
    SHEET_NAMES,
    VB_FILLED_COLOR,
    WHITE,
    _setup_table_sheet,
    build_report_filename,
    generate_report_workbook,
    render_report,
)


@pytest.fixture
def grading_result(sample_template, completed_session):
    return GradingCalculator().calculate(completed_session, sample_template)


@pytest.fixture
def workbook(grading_result):
    return generate_report_workbook(grading_result)


def _fill(cell):
    return cell.fill.start_color.rgb


# =============================================================================
# WORKBOOK
# =============================================================================

class TestWorkbook:

    def test_sheet_order(self, workbook):
        assert workbook.sheetnames == SHEET_NAMES

    def test_filename(self, grading_result):
        assert build_report_filename(grading_result) == "ABLLS_R_child-001_2026-03-14.xlsx"

    def test_render_is_loadable_xlsx(self, grading_result):
        content = render_report(grading_result)
        loaded = load_workbook(io.BytesIO(content))
        assert loaded.sheetnames == SHEET_NAMES
        assert loaded["Summary"]["B5"].value == "child-001"

    def test_input_is_not_mutated(self, grading_result):
        before = grading_result.model_dump()
        render_report(grading_result)
        assert grading_result.model_dump() == before

    def test_properties_pinned_to_completion(self, workbook, grading_result):
        assert workbook.properties.created == grading_result.completed_at.replace(tzinfo=None)

    def test_table_setup_past_column_z(self):
        sheet = Workbook().active
        _setup_table_sheet(sheet, [(f"Col {i}", 10 + i) for i in range(1, 29)], header_height=20)

        assert sheet.column_dimensions["Z"].width == 36
        assert sheet.column_dimensions["AA"].width == 37
        assert sheet.column_dimensions["AB"].width == 38
        assert sheet["AB1"].value == "Col 28"


# =============================================================================
# SUMMARY
# =============================================================================

class TestSummarySheet:

    def test_title_and_sections(self, workbook):
        sheet = workbook["Summary"]
        assert sheet["A1"].value == "ABLLS Assessment Report"
        assert "A1:B1" in sheet.merged_cells
        assert sheet["A3"].value == "Child Information"
        assert sheet["A10"].value == "Overall Score Summary"

    def test_identity_rows(self, workbook):
        sheet = workbook["Summary"]
        assert [sheet[f"B{row}"].value for row in range(4, 9)] == [
            "Sam Rivera", "child-001", "ABLLS-R", "2026-03-14", "s-completed",
        ]

    def test_score_rows_are_shaded(self, workbook):
        sheet = workbook["Summary"]
        assert sheet["B11"].value == "9 / 14"
        assert sheet["B12"].value == "64.29%"
        assert sheet["B13"].value == "Proficient"
        for row in (11, 12, 13):
            assert _fill(sheet[f"A{row}"]) == SCORE_ROW_COLOR

    def test_missing_child_name(self, grading_result):
        grading_result.child_name = None
        sheet = generate_report_workbook(grading_result)["Summary"]
        assert sheet["B4"].value == "N/A"

    def test_custom_title(self, grading_result):
        sheet = generate_report_workbook(grading_result, title="Quarterly Review")["Summary"]
        assert sheet["A1"].value == "Quarterly Review"


# =============================================================================
# DOMAIN SCORES / DETAILED RESPONSES
# =============================================================================

class TestTableSheets:

    def test_domain_rows(self, workbook):
        sheet = workbook["Domain Scores"]
        assert _fill(sheet["A1"]) == HEADER_FILL_COLOR
        assert [c.value for c in sheet[2]] == [
            "A", "Cooperation & Reinforcer Effectiveness", 2, 5, 6, "83.33%", "Proficient",
        ]
        assert [c.value for c in sheet[3]] == ["B", "Visual Performance", 2, 4, 8, "50%", "Developing"]

    def test_proficiency_cells_colored_by_band(self, workbook, grading_result):
        sheet = workbook["Domain Scores"]
        for row, domain in enumerate(grading_result.domain_scores, start=2):
            assert _fill(sheet.cell(row=row, column=7)) == PROFICIENCY_COLORS[domain.proficiency]
        assert _fill(sheet["A2"]) == ALT_ROW_COLOR

    def test_detailed_rows_grouped_by_domain(self, workbook):
        sheet = workbook["Detailed Responses"]
        assert sheet.max_row == 5
        assert [c.value for c in sheet[2]][:2] == ["A", "A1"]
        assert sheet["E5"].value == "Not answered"
        assert sheet["I2"].value == "_ X X X"
        assert _fill(sheet["A2"]) == ALT_ROW_COLOR
        assert _fill(sheet["A4"]) == WHITE


# =============================================================================
# VB MAPPING
# =============================================================================

class TestVBMappingSheet:

    def test_four_point_row(self, workbook):
        sheet = workbook["VB Mapping"]
        assert [sheet.cell(row=2, column=c).value for c in range(1, 5)] == ["A1", 3, 4, 3]
        assert [_fill(sheet.cell(row=2, column=c)) for c in range(5, 9)] == [
            WHITE, VB_FILLED_COLOR, VB_FILLED_COLOR, VB_FILLED_COLOR,
        ]
        assert sheet.cell(row=2, column=9).value == "_ X X X"

    def test_two_point_row_merges_pairs(self, workbook):
        sheet = workbook["VB Mapping"]
        assert sheet["A3"].value == "A2"
        assert "E3:F3" in sheet.merged_cells
        assert "G3:H3" in sheet.merged_cells
        assert _fill(sheet["E3"]) == VB_FILLED_COLOR
        assert _fill(sheet["G3"]) == VB_FILLED_COLOR

    def test_half_filled_two_point_row(self, grading_result):
        grading_result.vb_export = [VBExportRow(question="X1", score=1, max=2, normalized=2)]
        sheet = generate_report_workbook(grading_result)["VB Mapping"]
        assert _fill(sheet["E2"]) == WHITE
        assert _fill(sheet["G2"]) == VB_FILLED_COLOR

    def test_unsupported_max_fails_fast(self, grading_result):
        grading_result.vb_export = [VBExportRow(question="X1", score=1, max=3, normalized=1)]
        with pytest.raises(ValueError):
            generate_report_workbook(grading_result)
