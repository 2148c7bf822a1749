"""Report generator pipeline package.

Public API of the match-and-group engine: record types, sheet loaders, the
teacher index, the matcher and the report writer. The phase sequencing lives
in ``runner.py`` and is imported from there directly.

Examples
--------
>>> from grade_report.pipeline.report_generator import (
...     build_teacher_index, load_grade_sheet, load_teacher_rows,
...     match_grades_to_teachers, write_reports,
... )
>>> sheet = load_grade_sheet(Path("data/grade.csv"))  # doctest: +SKIP
>>> index = build_teacher_index(load_teacher_rows(Path("data/teacher.csv")))  # doctest: +SKIP
>>> result = match_grades_to_teachers(sheet.rows, index)  # doctest: +SKIP
>>> files = write_reports(result.reports, sheet.header, Path("output"))  # doctest: +SKIP
"""

from .data_loader import GradeSheet, load_grade_sheet, load_teacher_rows
from .matcher import MatchResult, match_grades_to_teachers
from .records import GradeRow, ReportKey, TeacherIndexKey, TeacherRow
from .report_writer import (
    compare_seat_numbers,
    report_filename,
    sort_report_rows,
    write_csv_rows,
    write_reports,
    write_unmatched_export,
)
from .teacher_index import build_teacher_index, find_teacher

__all__ = [
    "GradeRow",
    "GradeSheet",
    "MatchResult",
    "ReportKey",
    "TeacherIndexKey",
    "TeacherRow",
    "build_teacher_index",
    "compare_seat_numbers",
    "find_teacher",
    "load_grade_sheet",
    "load_teacher_rows",
    "match_grades_to_teachers",
    "report_filename",
    "sort_report_rows",
    "write_csv_rows",
    "write_reports",
    "write_unmatched_export",
]
