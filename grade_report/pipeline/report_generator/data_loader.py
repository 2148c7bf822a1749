"""CSV loaders for the grade sheet and the teacher assignment sheet.

Both files are read fully into memory. The grade sheet is allowed to have
rows of different widths because the number of answer columns after the
score depends on the exam; rows are padded to the header width so every
row written back out lines up with the header. The header row itself is
returned to the caller and passed explicitly to every export.
"""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

from grade_report.config import (
    CSV_INPUT_ENCODING,
    FIXED_GRADE_COLUMN_COUNT,
    MIN_GRADE_ROW_WIDTH,
)
from grade_report.exceptions import DataValidationError

from .records import GradeRow, TeacherRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradeSheet:
    """Parsed grade sheet.

    Attributes
    ----------
    header : tuple[str, ...]
        Header row exactly as read; reused verbatim for every export.
    rows : tuple[GradeRow, ...]
        Admitted rows in file order, padded to the header width.
    dropped_count : int
        Number of rows rejected for having fewer than the minimum columns.
    """

    header: tuple[str, ...] = ()
    rows: tuple[GradeRow, ...] = field(default_factory=tuple)
    dropped_count: int = 0


def read_csv_records(csv_path: Path) -> list[list[str]]:
    """Read every record of a CSV file into memory.

    Parameters
    ----------
    csv_path : Path
        Path to a comma-delimited, UTF-8 (optionally BOM-prefixed) file.

    Returns
    -------
    list[list[str]]
        All records, including the header, in file order.

    Raises
    ------
    FileNotFoundError
        If the file is missing.
    DataValidationError
        If the file is not valid UTF-8 or cannot be parsed as CSV.
    """
    try:
        with csv_path.open("r", encoding=CSV_INPUT_ENCODING, newline="") as csvfile:
            return list(csv.reader(csvfile))
    except UnicodeDecodeError as error:
        raise DataValidationError(
            f"{csv_path} is not valid UTF-8", context={"path": str(csv_path)}
        ) from error
    except csv.Error as error:
        raise DataValidationError(
            f"Could not parse {csv_path}: {error}", context={"path": str(csv_path)}
        ) from error


def _numbered_records(records: list[list[str]]) -> list[tuple[int, list[str]]]:
    """Pair records with their 1-based position, leaving out blank lines."""
    return [
        (number, record) for number, record in enumerate(records, start=1) if record
    ]


def load_grade_sheet(csv_path: Path) -> GradeSheet:
    """Load the grade sheet, dropping rows that lack the identifying columns.

    A row is admitted when it has at least the columns up to and including
    the student name. Shorter admitted rows are right-padded with empty
    strings to the header width; blank lines are ignored.

    Parameters
    ----------
    csv_path : Path
        Path to the grade CSV file.

    Returns
    -------
    GradeSheet
        Header, admitted rows and the count of dropped rows. An empty file
        yields an empty sheet.

    Raises
    ------
    FileNotFoundError
        If the file is missing.
    DataValidationError
        If the file cannot be decoded or parsed.

    Examples
    --------
    >>> sheet = load_grade_sheet(Path("data/grade.csv"))  # doctest: +SKIP
    >>> sheet.rows[0].student_name  # doctest: +SKIP
    'Alice'
    """
    records = _numbered_records(read_csv_records(csv_path))
    if not records:
        logger.warning(f"Grade sheet {csv_path} is empty.")
        return GradeSheet()

    header = tuple(records[0][1])
    logger.info(f"Grade sheet header has {len(header)} columns.")
    logger.debug(f"Fixed columns: {list(header[:FIXED_GRADE_COLUMN_COUNT])}")
    if len(header) > FIXED_GRADE_COLUMN_COUNT:
        logger.info(
            f"Exam-specific columns: {len(header) - FIXED_GRADE_COLUMN_COUNT}"
        )

    rows: list[GradeRow] = []
    dropped = 0
    for line_number, record in records[1:]:
        if len(record) < MIN_GRADE_ROW_WIDTH:
            logger.warning(
                f"Row {line_number}: {len(record)} columns, at least "
                f"{MIN_GRADE_ROW_WIDTH} required, skipping."
            )
            dropped += 1
            continue
        if len(record) < len(header):
            record = record + [""] * (len(header) - len(record))
        rows.append(GradeRow(tuple(record), line_number))
    return GradeSheet(header, tuple(rows), dropped)


def load_teacher_rows(csv_path: Path) -> list[TeacherRow]:
    """Load teacher assignments, skipping the header row.

    Rows with fewer than seven columns are discarded without a warning.

    Raises
    ------
    FileNotFoundError
        If the file is missing.
    DataValidationError
        If the file cannot be decoded or parsed.
    """
    teachers: list[TeacherRow] = []
    records = _numbered_records(read_csv_records(csv_path))
    for line_number, record in records[1:]:
        teacher = TeacherRow.from_cells(record)
        if teacher is None:
            logger.debug(f"Teacher row {line_number} too short, ignored.")
            continue
        teachers.append(teacher)
    return teachers
