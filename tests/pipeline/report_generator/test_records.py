"""Tests for the grade and teacher record views."""

from grade_report.pipeline.report_generator.records import (
    GradeRow,
    ReportKey,
    TeacherIndexKey,
    TeacherRow,
)


def test_grade_row_accessors_trim_fixed_columns():
    cells = (" MATH ", "Math", "S1", " 7", "1 ", "03", " Alice ", "2", "40", "45", "", "", "", "85")
    row = GradeRow(cells, line_number=2)
    assert row.subject_code == "MATH"
    assert row.grade_level == "7"
    assert row.class_name == "1"
    assert row.seat_number == "03"
    assert row.student_name == "Alice"
    assert row.group == "2"
    assert row.choice == "40"
    assert row.non_choice == "45"
    assert row.score == "85"
    # raw cells are kept untouched for export
    assert row.cells[0] == " MATH "


def test_grade_row_short_row_reads_missing_columns_as_empty():
    row = GradeRow(("MATH", "Math", "S1", "7", "1", "1", "Alice"))
    assert row.group == ""
    assert row.score == ""
    assert row.makeup_deduct_score == ""
    assert row.extra == ()


def test_grade_row_extra_is_order_preserving_tail():
    cells = tuple(f"c{i}" for i in range(14)) + (" A", "B ", "")
    row = GradeRow(cells)
    assert row.extra == (" A", "B ", "")


def test_grade_row_index_key_ignores_group():
    a = GradeRow(("MATH", "Math", "S1", "7", "1", "1", "Alice", "1"))
    b = GradeRow(("MATH", "Math", "S2", "7", "1", "2", "Bob", "3"))
    assert a.index_key == b.index_key == TeacherIndexKey("MATH", "7", "1")


def test_teacher_row_from_cells_trims_and_rejects_short_rows():
    teacher = TeacherRow.from_cells([" MATH", "Math ", "7", "1", "", " Mr.Lee ", "lee@x.org ", "ignored"])
    assert teacher == TeacherRow("MATH", "Math", "7", "1", "", "Mr.Lee", "lee@x.org")
    assert teacher.index_key == TeacherIndexKey("MATH", "7", "1")
    assert TeacherRow.from_cells(["MATH", "Math", "7", "1", "", "Mr.Lee"]) is None


def test_report_keys_sort_deterministically():
    keys = [
        ReportKey("Mr.Lee", "8", "MATH", "Math"),
        ReportKey("Ms.Kim", "7", "ENG", "English"),
        ReportKey("Mr.Lee", "7", "MATH", "Math"),
    ]
    assert sorted(keys)[0] == ReportKey("Mr.Lee", "7", "MATH", "Math")
    assert sorted(keys)[-1] == ReportKey("Ms.Kim", "7", "ENG", "English")
