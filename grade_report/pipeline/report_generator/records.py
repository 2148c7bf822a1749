"""Typed record views over raw grade and teacher sheet rows.

Grade rows keep their raw cells untouched so report files reproduce the
input exactly; the named accessors read fixed positions defined in
``grade_report.config`` and return trimmed strings, or ``""`` when the row is
too short. Everything after the fixed columns is exam-specific (one column
per answer) and is exposed as an opaque tail.

Teacher rows are parsed once into trimmed fields. Both row types expose the
``TeacherIndexKey`` used for matching; the group field is carried on both
but deliberately left out of that key.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

from grade_report.config import (
    FIXED_GRADE_COLUMN_COUNT,
    GRADE_FIELD_CHOICE,
    GRADE_FIELD_CLASS,
    GRADE_FIELD_GRADE_LEVEL,
    GRADE_FIELD_GROUP,
    GRADE_FIELD_MAKEUP_DEDUCT,
    GRADE_FIELD_MAKEUP_DEDUCT_SCORE,
    GRADE_FIELD_NON_CHOICE,
    GRADE_FIELD_SCORE,
    GRADE_FIELD_SEAT_NUMBER,
    GRADE_FIELD_STUDENT_ID,
    GRADE_FIELD_STUDENT_NAME,
    GRADE_FIELD_SUBJECT_CODE,
    GRADE_FIELD_SUBJECT_NAME,
    GRADE_FIELD_VIOLATION,
    TEACHER_ROW_WIDTH,
)


class TeacherIndexKey(NamedTuple):
    """Key resolving a grade row to its responsible teacher (group excluded)."""

    subject_code: str
    grade_level: str
    class_name: str


class ReportKey(NamedTuple):
    """Identity of one exported report file."""

    teacher_name: str
    grade_level: str
    subject_code: str
    subject_name: str


def _cell(cells: Sequence[str], index: int) -> str:
    if index < len(cells):
        return cells[index].strip()
    return ""


@dataclass(frozen=True)
class GradeRow:
    """One student's grade line.

    Parameters
    ----------
    cells : tuple[str, ...]
        Raw cell values in file order, already padded to the header width.
    line_number : int | None, optional
        1-based line number in the source file, used for diagnostics.

    Examples
    --------
    >>> row = GradeRow(("MATH", "Math", "S1", "7", " 1 ", "3", "Alice"))
    >>> row.class_name, row.score
    ('1', '')
    >>> row.index_key
    TeacherIndexKey(subject_code='MATH', grade_level='7', class_name='1')
    """

    cells: tuple[str, ...]
    line_number: int | None = None

    @property
    def subject_code(self) -> str:
        return _cell(self.cells, GRADE_FIELD_SUBJECT_CODE)

    @property
    def subject_name(self) -> str:
        return _cell(self.cells, GRADE_FIELD_SUBJECT_NAME)

    @property
    def student_id(self) -> str:
        return _cell(self.cells, GRADE_FIELD_STUDENT_ID)

    @property
    def grade_level(self) -> str:
        return _cell(self.cells, GRADE_FIELD_GRADE_LEVEL)

    @property
    def class_name(self) -> str:
        return _cell(self.cells, GRADE_FIELD_CLASS)

    @property
    def seat_number(self) -> str:
        return _cell(self.cells, GRADE_FIELD_SEAT_NUMBER)

    @property
    def student_name(self) -> str:
        return _cell(self.cells, GRADE_FIELD_STUDENT_NAME)

    @property
    def group(self) -> str:
        return _cell(self.cells, GRADE_FIELD_GROUP)

    @property
    def choice(self) -> str:
        return _cell(self.cells, GRADE_FIELD_CHOICE)

    @property
    def non_choice(self) -> str:
        return _cell(self.cells, GRADE_FIELD_NON_CHOICE)

    @property
    def makeup_deduct(self) -> str:
        return _cell(self.cells, GRADE_FIELD_MAKEUP_DEDUCT)

    @property
    def violation(self) -> str:
        return _cell(self.cells, GRADE_FIELD_VIOLATION)

    @property
    def makeup_deduct_score(self) -> str:
        return _cell(self.cells, GRADE_FIELD_MAKEUP_DEDUCT_SCORE)

    @property
    def score(self) -> str:
        return _cell(self.cells, GRADE_FIELD_SCORE)

    @property
    def extra(self) -> tuple[str, ...]:
        """Exam-specific trailing cells, untrimmed and in file order."""
        return self.cells[FIXED_GRADE_COLUMN_COUNT:]

    @property
    def index_key(self) -> TeacherIndexKey:
        return TeacherIndexKey(self.subject_code, self.grade_level, self.class_name)


@dataclass(frozen=True)
class TeacherRow:
    """One teacher assignment: who teaches a subject to a given class."""

    subject_code: str
    subject_name: str
    grade_level: str
    class_name: str
    group: str
    teacher_name: str
    email: str

    @classmethod
    def from_cells(cls, cells: Sequence[str]) -> TeacherRow | None:
        """Build a teacher row from raw cells.

        Returns ``None`` when the row has fewer than seven cells; cells past
        the seventh are ignored.
        """
        if len(cells) < TEACHER_ROW_WIDTH:
            return None
        return cls(*(cell.strip() for cell in cells[:TEACHER_ROW_WIDTH]))

    @property
    def index_key(self) -> TeacherIndexKey:
        return TeacherIndexKey(self.subject_code, self.grade_level, self.class_name)
