"""Plan and carry out delivery of report files to teachers.

The plan maps each teacher email to the report files addressed to them. For
every written report the teacher is re-resolved from one representative row
of its bucket by scanning the teacher sheet, so one teacher collects all of
their reports in a single message. Teachers without reports get no mail.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from grade_report.config import EMAIL_BODY_TEMPLATE
from grade_report.exceptions import ExternalServiceError
from grade_report.pipeline.report_generator.records import (
    GradeRow,
    ReportKey,
    TeacherRow,
)
from grade_report.pipeline.report_generator.teacher_index import find_teacher

from .settings import EmailSettings
from .templating import build_mail_context, render_template
from .transport import MailTransport

logger = logging.getLogger(__name__)


@dataclass
class DistributionOutcome:
    """Recipients reached and recipients that failed, by email address."""

    sent: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def plan_distribution(
    report_files: Mapping[ReportKey, Path],
    reports: Mapping[ReportKey, Sequence[GradeRow]],
    teachers: Sequence[TeacherRow],
) -> dict[str, list[Path]]:
    """Group written report files by teacher email.

    Parameters
    ----------
    report_files : Mapping[ReportKey, Path]
        Reports that were actually written.
    reports : Mapping[ReportKey, Sequence[GradeRow]]
        The matched rows behind each report.
    teachers : Sequence[TeacherRow]
        Teacher sheet rows in file order.

    Returns
    -------
    dict[str, list[Path]]
        Attachment list per email, built in sorted report-key order.

    Examples
    --------
    >>> lee = TeacherRow("MATH", "Math", "7", "1", "", "Mr.Lee", "lee@x.org")
    >>> row = GradeRow(("MATH", "Math", "S1", "7", "1", "1", "Alice"))
    >>> key = ReportKey("Mr.Lee", "7", "MATH", "Math")
    >>> plan_distribution({key: Path("out/a.csv")}, {key: [row]}, [lee])
    {'lee@x.org': [PosixPath('out/a.csv')]}
    """
    plan: dict[str, list[Path]] = {}
    for key in sorted(report_files):
        rows = reports.get(key)
        if not rows:
            continue
        teacher = find_teacher(teachers, rows[0].index_key)
        if teacher is None:
            logger.warning(f"No teacher found again for report {key}; not mailed.")
            continue
        if not teacher.email:
            logger.warning(f"Teacher {teacher.teacher_name} has no email; not mailed.")
            continue
        plan.setdefault(teacher.email, []).append(report_files[key])
    return plan


def teacher_name_for_email(teachers: Sequence[TeacherRow], email: str) -> str:
    """Return the first teacher name registered with ``email``, or the email."""
    for teacher in teachers:
        if teacher.email == email:
            return teacher.teacher_name
    return email


def distribute_reports(
    plan: Mapping[str, Sequence[Path]],
    teachers: Sequence[TeacherRow],
    settings: EmailSettings,
    transport: MailTransport,
) -> DistributionOutcome:
    """Send one message per recipient in ``plan``.

    A failed delivery is logged and recorded; the remaining recipients are
    still attempted.
    """
    outcome = DistributionOutcome()
    for email, files in plan.items():
        teacher_name = teacher_name_for_email(teachers, email)
        context = build_mail_context(teacher_name, settings.sender_email, len(files))
        try:
            transport.send(
                settings.sender_email,
                email,
                teacher_name,
                render_template(settings.email_title, context),
                render_template(EMAIL_BODY_TEMPLATE, context),
                list(files),
            )
        except ExternalServiceError as error:
            logger.error(f"Sending mail to {teacher_name} ({email}) failed: {error}")
            outcome.failed.append(email)
            continue
        logger.info(
            f"Mail sent to {teacher_name} ({email}) with {len(files)} attachment(s)"
        )
        outcome.sent.append(email)
    return outcome
