"""Join grade rows to teachers and group them into report buckets.

Each grade row is looked up by its (subject, grade-level, class) key. On a
hit, the row goes to the bucket named after the matched teacher together
with the row's own grade-level and subject, so several classes taught by
the same teacher end up in one report. Rows without a teacher are collected
separately; a miss never stops the batch.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .records import GradeRow, ReportKey, TeacherIndexKey, TeacherRow

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Outcome of matching a grade sheet against the teacher index.

    Attributes
    ----------
    reports : dict[ReportKey, list[GradeRow]]
        Matched rows per report, in the order they were read.
    unmatched : list[GradeRow]
        Rows whose key has no teacher, in the order they were read.
    """

    reports: dict[ReportKey, list[GradeRow]] = field(default_factory=dict)
    unmatched: list[GradeRow] = field(default_factory=list)

    @property
    def matched_row_count(self) -> int:
        return sum(len(rows) for rows in self.reports.values())


def report_key_for(row: GradeRow, teacher: TeacherRow) -> ReportKey:
    """Build the report identity for ``row`` once its teacher is known."""
    return ReportKey(
        teacher_name=teacher.teacher_name,
        grade_level=row.grade_level,
        subject_code=row.subject_code,
        subject_name=row.subject_name,
    )


def match_grades_to_teachers(
    rows: Iterable[GradeRow], index: Mapping[TeacherIndexKey, TeacherRow]
) -> MatchResult:
    """Partition grade rows into report buckets and unmatched rows.

    Parameters
    ----------
    rows : Iterable[GradeRow]
        Admitted grade rows.
    index : Mapping[TeacherIndexKey, TeacherRow]
        Teacher index built by ``build_teacher_index``.

    Returns
    -------
    MatchResult
        Every input row appears exactly once, either in one bucket or in
        ``unmatched``.

    Examples
    --------
    >>> from grade_report.pipeline.report_generator.teacher_index import build_teacher_index
    >>> lee = TeacherRow("MATH", "Math", "7", "1", "", "Mr.Lee", "lee@x.org")
    >>> alice = GradeRow(("MATH", "Math", "S1", "7", "1", "1", "Alice"))
    >>> result = match_grades_to_teachers([alice], build_teacher_index([lee]))
    >>> list(result.reports)
    [ReportKey(teacher_name='Mr.Lee', grade_level='7', subject_code='MATH', subject_name='Math')]
    """
    result = MatchResult()
    for row in rows:
        teacher = index.get(row.index_key)
        if teacher is None:
            logger.debug(f"No teacher for {row.index_key} (line {row.line_number})")
            result.unmatched.append(row)
            continue
        result.reports.setdefault(report_key_for(row, teacher), []).append(row)
    return result
