"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Provides a ``write_csv`` fixture for building input sheets.
"""

import csv
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

GRADE_HEADER = [
    "SubjectCode",
    "SubjectName",
    "StudentId",
    "GradeLevel",
    "Class",
    "Seat",
    "StudentName",
    "Group",
    "Choice",
    "NonChoice",
    "MakeupDeduct",
    "Violation",
    "MakeupDeductScore",
    "Score",
    "Answer1",
    "Answer2",
]

TEACHER_HEADER = [
    "SubjectCode",
    "SubjectName",
    "GradeLevel",
    "Class",
    "Group",
    "TeacherName",
    "Email",
]


@pytest.fixture
def write_csv():
    """Return a helper writing rows to a UTF-8 CSV file and returning its path."""

    def _write(path: Path, rows: list[list[str]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as fh:
            csv.writer(fh, lineterminator="\n").writerows(rows)
        return path

    return _write


@pytest.fixture
def grade_header() -> list[str]:
    """Grade sheet header with two exam-specific answer columns."""
    return list(GRADE_HEADER)


@pytest.fixture
def teacher_header() -> list[str]:
    """Teacher sheet header."""
    return list(TEACHER_HEADER)
