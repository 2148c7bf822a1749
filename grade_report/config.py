"""Global configuration constants for the project.

Defines paths, filenames and column layout used across the report pipeline
and the mail distribution step.
"""

from __future__ import annotations

from pathlib import Path

# Project directories
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
DATA_DIR: Path = PROJECT_ROOT / "data"
LOG_DIR: Path = PROJECT_ROOT / "logs"

# Input / output defaults
GRADE_CSV_PATH: Path = DATA_DIR / "grade.csv"
TEACHER_CSV_PATH: Path = DATA_DIR / "teacher.csv"
SETTINGS_PATH: Path = DATA_DIR / "setting.json"
DEFAULT_OUTPUT_DIR: Path = PROJECT_ROOT / "output"
CSV_INPUT_ENCODING: str = "utf-8-sig"
CSV_OUTPUT_ENCODING: str = "utf-8"
CSV_LINE_TERMINATOR: str = "\n"

# Grade sheet layout: fixed positions before the exam-specific answer columns
GRADE_FIELD_SUBJECT_CODE: int = 0
GRADE_FIELD_SUBJECT_NAME: int = 1
GRADE_FIELD_STUDENT_ID: int = 2
GRADE_FIELD_GRADE_LEVEL: int = 3
GRADE_FIELD_CLASS: int = 4
GRADE_FIELD_SEAT_NUMBER: int = 5
GRADE_FIELD_STUDENT_NAME: int = 6
GRADE_FIELD_GROUP: int = 7
GRADE_FIELD_CHOICE: int = 8
GRADE_FIELD_NON_CHOICE: int = 9
GRADE_FIELD_MAKEUP_DEDUCT: int = 10
GRADE_FIELD_VIOLATION: int = 11
GRADE_FIELD_MAKEUP_DEDUCT_SCORE: int = 12
GRADE_FIELD_SCORE: int = 13
FIXED_GRADE_COLUMN_COUNT: int = 14
MIN_GRADE_ROW_WIDTH: int = GRADE_FIELD_STUDENT_NAME + 1

# Teacher sheet layout
TEACHER_ROW_WIDTH: int = 7

# Report files
REPORT_FILENAME_FORMAT: str = "{teacher_name}_grade{grade_level}_{subject_name}.csv"
UNMATCHED_FILENAME: str = "error.csv"
UNSAFE_FILENAME_CHARS: str = '<>:"/\\|?*'
UNNAMED_FILENAME_PART: str = "unnamed"

# Mail defaults
EMAIL_BODY_TEMPLATE: str = (
    "Dear {TeacherName},\n\n"
    "Attached are your grade reports.\n\n"
    "This message was sent automatically; please do not reply."
)
ATTACHMENT_MIME_TYPE: str = "text/csv"
DEFAULT_SMTP_PORT: int = 587
DEFAULT_SMTP_TIMEOUT: int = 30

# Logging
LOG_FILENAME_GRADE_REPORT: str = "grade_report.log"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
