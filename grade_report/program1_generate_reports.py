"""Program 1: grade reports from the grade and teacher sheets.

Reads the grade sheet and the teacher assignment sheet, writes one CSV
report per teacher, grade-level and subject, exports rows without a teacher
for follow-up, and mails the reports when ``setting.json`` enables it. All
defaults are imported from ``grade_report.config``.

Usage
-----
python -m grade_report.program1_generate_reports --grades ... --teachers ... --output-dir ... [--settings ...] [--no-mail] [--log-level ...]

Notes
-----
Logging goes to the console and, unless ``DISABLE_FILE_LOGS`` is set, to a
log file under ``LOG_DIR``. The exit status is 0 when reports were written
and 1 for any fatal error.
"""

import argparse
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from grade_report.config import (
    DEFAULT_OUTPUT_DIR,
    GRADE_CSV_PATH,
    LOG_DIR,
    LOG_FILENAME_GRADE_REPORT,
    LOG_FORMAT,
    SETTINGS_PATH,
    TEACHER_CSV_PATH,
)
from grade_report.console import render_run_summary
from grade_report.exceptions import AppError
from grade_report.pipeline.report_generator.runner import run_pipeline

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    """Configure logging for the script.

    Parameters
    ----------
    log_level : str
        Logging level as a string (e.g., ``"INFO"``, ``"DEBUG"``).
    enable_file : bool
        If ``True``, add a file handler; otherwise only log to console.
    """
    # Remove existing handlers to ensure our config takes effect
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0, logging.FileHandler(LOG_DIR / LOG_FILENAME_GRADE_REPORT, mode="a")
            )
        except OSError as error:
            logging.getLogger(__name__).warning(f"File logging disabled: {error}")
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments with ``grades``, ``teachers``, ``output_dir``,
        ``settings``, ``no_mail`` and ``log_level``.
    """
    parser = argparse.ArgumentParser(
        description="Generate per-teacher grade reports from grade and teacher CSV files."
    )
    parser.add_argument(
        "--grades",
        type=Path,
        default=GRADE_CSV_PATH,
        help="Path to the grade CSV file.",
    )
    parser.add_argument(
        "--teachers",
        type=Path,
        default=TEACHER_CSV_PATH,
        help="Path to the teacher assignment CSV file.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory to write report files to.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=SETTINGS_PATH,
        help="Path to setting.json with the mail switches.",
    )
    parser.add_argument(
        "--no-mail",
        action="store_true",
        help="Skip mail distribution even if enabled in the settings file.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the report pipeline from CLI arguments.

    Returns
    -------
    int
        Process exit status.
    """
    args = parse_arguments(argv)
    disable_file = bool(
        os.environ.get("DISABLE_FILE_LOGS") or os.environ.get("PYTEST_CURRENT_TEST")
    )
    configure_logging(args.log_level, enable_file=not disable_file)
    logger.info("=" * 50)
    logger.info("Starting Program 1: Grade Report Generation")
    logger.info("=" * 50)
    try:
        summary = run_pipeline(
            args.grades,
            args.teachers,
            args.output_dir,
            args.settings,
            send_mail=not args.no_mail,
        )
    except FileNotFoundError as file_error:
        logger.error(f"File not found: {file_error}")
        return 1
    except OSError as os_error:
        logger.error(f"Cannot read input: {os_error}")
        return 1
    except AppError as error:
        logger.error(str(error), extra={"error": error.to_dict()})
        return 1
    render_run_summary(summary)
    logger.info("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
