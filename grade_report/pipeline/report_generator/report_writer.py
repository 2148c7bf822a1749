"""Write report buckets and the unmatched-row export as CSV files.

Each report holds the rows of one (teacher, grade-level, subject), sorted by
class and then seat number, under the original grade sheet header. Rows are
written exactly as read, so exam-specific answer columns and empty cells
survive unchanged. The header is always passed in by the caller.

File names are derived from the teacher name, grade-level and subject name.
Keys are processed in sorted order so that repeated runs over the same input
produce identical files with identical names.
"""

import csv
import functools
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from grade_report.config import (
    CSV_LINE_TERMINATOR,
    CSV_OUTPUT_ENCODING,
    REPORT_FILENAME_FORMAT,
    UNMATCHED_FILENAME,
    UNNAMED_FILENAME_PART,
    UNSAFE_FILENAME_CHARS,
)

from .records import GradeRow, ReportKey

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


def _parse_seat_number(value: str) -> int | None:
    if _INTEGER_PATTERN.fullmatch(value):
        return int(value)
    return None


def compare_seat_numbers(left: str, right: str) -> int:
    """Three-way comparison of two seat numbers.

    Numeric when both sides are integers, lexicographic otherwise.

    Examples
    --------
    >>> compare_seat_numbers("2", "10")
    -1
    >>> compare_seat_numbers("A2", "10")
    1
    """
    left_number = _parse_seat_number(left)
    right_number = _parse_seat_number(right)
    if left_number is not None and right_number is not None:
        return (left_number > right_number) - (left_number < right_number)
    return (left > right) - (left < right)


def compare_report_rows(left: GradeRow, right: GradeRow) -> int:
    """Order rows by class (as a string), then by seat number."""
    if left.class_name != right.class_name:
        return -1 if left.class_name < right.class_name else 1
    return compare_seat_numbers(left.seat_number, right.seat_number)


def sort_report_rows(rows: Iterable[GradeRow]) -> list[GradeRow]:
    """Return the rows of one report in output order."""
    return sorted(rows, key=functools.cmp_to_key(compare_report_rows))


def _safe_filename_part(value: str) -> str:
    cleaned = "".join(
        "_" if char in UNSAFE_FILENAME_CHARS or ord(char) < 32 else char
        for char in value
    ).strip(" .")
    return cleaned or UNNAMED_FILENAME_PART


def report_filename(key: ReportKey) -> str:
    """Return the file name for a report, without any directory.

    Examples
    --------
    >>> report_filename(ReportKey("Mr.Lee", "7", "MATH", "Math"))
    'Mr.Lee_grade7_Math.csv'
    >>> report_filename(ReportKey("A/B", "7", "SCI", "Sci: Lab"))
    'A_B_grade7_Sci_ Lab.csv'
    """
    return REPORT_FILENAME_FORMAT.format(
        teacher_name=_safe_filename_part(key.teacher_name),
        grade_level=_safe_filename_part(key.grade_level),
        subject_name=_safe_filename_part(key.subject_name),
    )


def assign_report_paths(
    keys: Iterable[ReportKey], output_dir: Path
) -> dict[ReportKey, Path]:
    """Give every report key its own path inside ``output_dir``.

    Two keys that differ only by subject code map to the same base name; the
    later key in sorted order gets the subject code appended, and a counter
    after that if the name is still taken. Names are compared
    case-insensitively so the result is safe on case-folding file systems.

    Parameters
    ----------
    keys : Iterable[ReportKey]
        Report identities.
    output_dir : Path
        Directory the reports will be written to.

    Returns
    -------
    dict[ReportKey, Path]
        Paths in sorted key order.
    """
    taken = {UNMATCHED_FILENAME.casefold()}
    paths: dict[ReportKey, Path] = {}
    for key in sorted(keys):
        name = report_filename(key)
        if name.casefold() in taken:
            base = Path(name)
            stem = f"{base.stem}_{_safe_filename_part(key.subject_code)}"
            name = f"{stem}{base.suffix}"
            counter = 2
            while name.casefold() in taken:
                name = f"{stem}_{counter}{base.suffix}"
                counter += 1
        taken.add(name.casefold())
        paths[key] = output_dir / name
    return paths


def write_csv_rows(
    path: Path, header: Sequence[str], rows: Iterable[Sequence[str]]
) -> int:
    """Write a header and rows to ``path`` as CSV, cell content unchanged.

    Parameters
    ----------
    path : Path
        Destination file; parent directories are created.
    header : Sequence[str]
        Header row written first.
    rows : Iterable[Sequence[str]]
        Data rows; rows may differ in width.

    Returns
    -------
    int
        Number of data rows written.

    Raises
    ------
    OSError
        If the file cannot be created or written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding=CSV_OUTPUT_ENCODING, newline="") as output_file:
        writer = csv.writer(output_file, lineterminator=CSV_LINE_TERMINATOR)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
            count += 1
    return count


def write_unmatched_export(
    rows: Sequence[GradeRow], header: Sequence[str], output_dir: Path
) -> Path | None:
    """Write rows that found no teacher to the unmatched export.

    Nothing is written when ``rows`` is empty. A write failure is logged and
    reported as ``None`` so the run can continue.
    """
    if not rows:
        return None
    path = output_dir / UNMATCHED_FILENAME
    try:
        write_csv_rows(path, header, (row.cells for row in rows))
    except OSError as error:
        logger.error(f"Error writing unmatched rows to {path}: {error}")
        return None
    logger.info(f"Wrote unmatched rows: {path} ({len(rows)} rows)")
    return path


def write_reports(
    reports: Mapping[ReportKey, Sequence[GradeRow]],
    header: Sequence[str],
    output_dir: Path,
) -> dict[ReportKey, Path]:
    """Write one sorted CSV file per report bucket.

    Parameters
    ----------
    reports : Mapping[ReportKey, Sequence[GradeRow]]
        Matched rows per report.
    header : Sequence[str]
        Grade sheet header, written at the top of every file.
    output_dir : Path
        Directory for the report files.

    Returns
    -------
    dict[ReportKey, Path]
        Successfully written reports in sorted key order. Reports that fail
        to write are logged and left out.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        logger.error(f"Cannot create output directory {output_dir}: {error}")
        return {}

    written: dict[ReportKey, Path] = {}
    for key, path in assign_report_paths(reports, output_dir).items():
        rows = sort_report_rows(reports[key])
        try:
            write_csv_rows(path, header, (row.cells for row in rows))
        except OSError as error:
            logger.error(f"Error writing {path}: {error}")
            continue
        logger.info(f"Wrote {path} ({len(rows)} rows)")
        written[key] = path
    return written
