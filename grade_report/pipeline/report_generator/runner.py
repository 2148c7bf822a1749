"""Report generator runner.

Sequences the phases of one batch run: load both sheets, build the teacher
index, match and group, export unmatched rows, write reports and finally,
when enabled in ``setting.json``, mail the reports to their teachers. Each
phase finishes before the next starts and reports its counts through the
log. Files already written stay on disk if a later phase fails.

Examples
--------
>>> from grade_report.pipeline.report_generator.runner import run_from_config
>>> success = run_from_config()  # doctest: +SKIP
>>> assert isinstance(success, bool)  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from grade_report.config import (
    DEFAULT_OUTPUT_DIR,
    GRADE_CSV_PATH,
    SETTINGS_PATH,
    TEACHER_CSV_PATH,
)
from grade_report.exceptions import ConfigurationError, ReportGenerationError
from grade_report.pipeline.mailer.distribution import (
    distribute_reports,
    plan_distribution,
)
from grade_report.pipeline.mailer.settings import SmtpConfig, load_email_settings
from grade_report.pipeline.mailer.transport import MailTransport, create_transport

from .data_loader import load_grade_sheet, load_teacher_rows
from .matcher import match_grades_to_teachers
from .records import ReportKey
from .report_writer import write_reports, write_unmatched_export
from .teacher_index import build_teacher_index

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counts and outputs of one pipeline run."""

    grade_rows_read: int = 0
    grade_rows_dropped: int = 0
    teacher_rows_read: int = 0
    report_groups: int = 0
    matched_rows: int = 0
    unmatched_rows: int = 0
    reports_written: int = 0
    report_write_failures: int = 0
    unmatched_export: Path | None = None
    report_files: dict[ReportKey, Path] = field(default_factory=dict)
    distribution_plan: dict[str, list[Path]] = field(default_factory=dict)
    mail_enabled: bool = False
    mails_sent: int = 0
    mails_failed: int = 0


def run_pipeline(
    grade_path: Path,
    teacher_path: Path,
    output_dir: Path,
    settings_path: Path | None = None,
    *,
    send_mail: bool = True,
    transport: MailTransport | None = None,
) -> RunSummary:
    """Run every phase of the report pipeline.

    Parameters
    ----------
    grade_path : Path
        Grade sheet CSV.
    teacher_path : Path
        Teacher assignment CSV.
    output_dir : Path
        Directory receiving report files and the unmatched export.
    settings_path : Path | None, optional
        ``setting.json`` location. ``None`` skips distribution.
    send_mail : bool, optional
        ``False`` skips distribution regardless of the settings file.
    transport : MailTransport | None, optional
        Mail transport to use; built from ``SMTP_*`` environment variables
        when omitted.

    Returns
    -------
    RunSummary
        Counts for every phase plus the written file paths.

    Raises
    ------
    FileNotFoundError
        If either input sheet is missing.
    DataValidationError
        If either input sheet cannot be parsed.
    ReportGenerationError
        If matching yields no report groups or no report could be written.
    """
    summary = RunSummary()

    sheet = load_grade_sheet(grade_path)
    summary.grade_rows_read = len(sheet.rows)
    summary.grade_rows_dropped = sheet.dropped_count
    logger.info(
        f"Read {summary.grade_rows_read} grade rows from {grade_path} "
        f"({summary.grade_rows_dropped} dropped)"
    )

    teachers = load_teacher_rows(teacher_path)
    summary.teacher_rows_read = len(teachers)
    logger.info(f"Read {summary.teacher_rows_read} teacher rows from {teacher_path}")

    result = match_grades_to_teachers(sheet.rows, build_teacher_index(teachers))
    summary.report_groups = len(result.reports)
    summary.matched_rows = result.matched_row_count
    summary.unmatched_rows = len(result.unmatched)
    logger.info(f"Matched {summary.report_groups} report groups")

    if result.unmatched:
        logger.warning(f"{summary.unmatched_rows} grade rows have no matching teacher")
        summary.unmatched_export = write_unmatched_export(
            result.unmatched, sheet.header, output_dir
        )

    if not result.reports:
        raise ReportGenerationError(
            "No grade row matched any teacher; check that subject codes, "
            "grade-levels and classes use the same format in both sheets",
            context={
                "grade_rows": summary.grade_rows_read,
                "teacher_rows": summary.teacher_rows_read,
            },
        )

    summary.report_files = write_reports(result.reports, sheet.header, output_dir)
    summary.reports_written = len(summary.report_files)
    summary.report_write_failures = summary.report_groups - summary.reports_written
    logger.info(f"Wrote {summary.reports_written} report files to {output_dir}")
    if not summary.report_files:
        raise ReportGenerationError(
            "No report file could be written", context={"output_dir": str(output_dir)}
        )

    if not send_mail or settings_path is None:
        logger.info("Mail distribution disabled for this run.")
        return summary
    settings = load_email_settings(settings_path)
    if settings is None:
        return summary
    if not settings.should_send_email:
        logger.info(f"Mail distribution disabled in {settings_path}.")
        return summary

    if transport is None:
        try:
            transport = create_transport(SmtpConfig.from_env())
        except ConfigurationError as error:
            logger.error(f"Mail distribution skipped: {error}")
            return summary
    summary.mail_enabled = True
    summary.distribution_plan = plan_distribution(
        summary.report_files, result.reports, teachers
    )
    outcome = distribute_reports(
        summary.distribution_plan, teachers, settings, transport
    )
    summary.mails_sent = len(outcome.sent)
    summary.mails_failed = len(outcome.failed)
    logger.info(
        f"Mail distribution finished: {summary.mails_sent} sent, "
        f"{summary.mails_failed} failed"
    )
    return summary


def run_from_config(
    grade_path: Path | None = None,
    teacher_path: Path | None = None,
    output_dir: Path | None = None,
    settings_path: Path | None = None,
) -> bool:
    """Run the pipeline using provided paths or defaults from config.

    Returns
    -------
    bool
        True when reports were generated, False on any fatal failure.
    """
    grade_path = Path(grade_path) if grade_path is not None else GRADE_CSV_PATH
    teacher_path = Path(teacher_path) if teacher_path is not None else TEACHER_CSV_PATH
    output_dir = Path(output_dir) if output_dir is not None else DEFAULT_OUTPUT_DIR
    settings_path = Path(settings_path) if settings_path is not None else SETTINGS_PATH
    try:
        run_pipeline(grade_path, teacher_path, output_dir, settings_path)
        return True
    except Exception as exc:
        logger.exception("Failed to generate reports: %s", exc)
        return False


__all__ = ["RunSummary", "run_from_config", "run_pipeline"]
