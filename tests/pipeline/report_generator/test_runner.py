"""Tests for the phase runner of the report pipeline."""

import json
from pathlib import Path

import pytest

from grade_report.exceptions import DataValidationError, ReportGenerationError
from grade_report.pipeline.mailer.transport import DryRunMailTransport
from grade_report.pipeline.report_generator import runner
from grade_report.pipeline.report_generator.records import ReportKey
from grade_report.pipeline.report_generator.runner import run_from_config, run_pipeline


@pytest.fixture
def sheets(tmp_path: Path, write_csv, grade_header, teacher_header):
    """Grade and teacher sheets with one unmatched row and two teachers."""
    grades = write_csv(
        tmp_path / "grade.csv",
        [
            grade_header,
            ["MATH", "Math", "S2", "7", "2", "1", "Bob", "", "", "", "", "", "", "70", "A"],
            ["MATH", "Math", "S1", "7", "1", "1", "Alice", "", "", "", "", "", "", "90", "B", "C"],
            ["ENG", "English", "S1", "7", "1", "1", "Alice", "", "", "", "", "", "", "80"],
            ["ART", "Art", "S3", "9", "1", "4", "Zed"],
            ["MATH", "Math", "S4"],
        ],
    )
    teachers = write_csv(
        tmp_path / "teacher.csv",
        [
            teacher_header,
            ["MATH", "Math", "7", "1", "", "Mr.Lee", "lee@x.org"],
            ["MATH", "Math", "7", "2", "1", "Mr.Lee", "lee@x.org"],
            ["ENG", "English", "7", "1", "", "Ms.Kim", "kim@x.org"],
        ],
    )
    return grades, teachers


def write_settings(path: Path, **values) -> Path:
    data = {"senderEmail": "office@x.org", "shouldSendEmail": "true", "emailTitle": "Reports for {TeacherName}"}
    data.update(values)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_run_pipeline_counts_and_outputs(sheets, tmp_path: Path):
    grades, teachers = sheets
    out = tmp_path / "out"
    summary = run_pipeline(grades, teachers, out)
    assert summary.grade_rows_read == 4
    assert summary.grade_rows_dropped == 1
    assert summary.teacher_rows_read == 3
    assert summary.report_groups == 2
    assert summary.matched_rows == 3
    assert summary.unmatched_rows == 1
    assert summary.reports_written == 2
    assert summary.report_write_failures == 0
    assert summary.unmatched_export == out / "error.csv"
    assert summary.mail_enabled is False
    assert sorted(p.name for p in out.iterdir()) == [
        "Mr.Lee_grade7_Math.csv",
        "Ms.Kim_grade7_English.csv",
        "error.csv",
    ]
    math_lines = (out / "Mr.Lee_grade7_Math.csv").read_text(encoding="utf-8").splitlines()
    assert [line.split(",")[6] for line in math_lines[1:]] == ["Alice", "Bob"]


def test_run_pipeline_distributes_with_dry_run_transport(sheets, tmp_path: Path):
    grades, teachers = sheets
    transport = DryRunMailTransport()
    summary = run_pipeline(
        grades,
        teachers,
        tmp_path / "out",
        write_settings(tmp_path / "setting.json"),
        transport=transport,
    )
    assert summary.mail_enabled is True
    assert summary.mails_sent == 2
    assert summary.mails_failed == 0
    assert summary.distribution_plan == {
        "lee@x.org": [summary.report_files[ReportKey("Mr.Lee", "7", "MATH", "Math")]],
        "kim@x.org": [summary.report_files[ReportKey("Ms.Kim", "7", "ENG", "English")]],
    }
    subjects = sorted(message["Subject"] for message in transport.deliveries)
    assert subjects == ["Reports for Mr.Lee", "Reports for Ms.Kim"]


def test_run_pipeline_skips_mail_when_disabled(sheets, tmp_path: Path):
    grades, teachers = sheets
    transport = DryRunMailTransport()
    settings = write_settings(tmp_path / "setting.json", shouldSendEmail="false")
    summary = run_pipeline(grades, teachers, tmp_path / "out", settings, transport=transport)
    assert summary.mail_enabled is False
    assert transport.deliveries == []

    summary = run_pipeline(
        grades, teachers, tmp_path / "out", write_settings(tmp_path / "on.json"),
        send_mail=False, transport=transport,
    )
    assert summary.mail_enabled is False
    assert transport.deliveries == []


def test_run_pipeline_missing_settings_is_not_fatal(sheets, tmp_path: Path):
    grades, teachers = sheets
    summary = run_pipeline(grades, teachers, tmp_path / "out", tmp_path / "nope.json")
    assert summary.reports_written == 2
    assert summary.mail_enabled is False


def test_run_pipeline_builds_transport_from_environment(sheets, tmp_path: Path, monkeypatch):
    import grade_report.config as cfg

    monkeypatch.setattr(cfg, "PROJECT_ROOT", tmp_path)
    monkeypatch.delenv("SMTP_HOST", raising=False)
    monkeypatch.delenv("SMTP_PORT", raising=False)
    monkeypatch.delenv("SMTP_TIMEOUT", raising=False)
    grades, teachers = sheets
    summary = run_pipeline(
        grades, teachers, tmp_path / "out", write_settings(tmp_path / "setting.json")
    )
    assert summary.mails_sent == 2


def test_run_pipeline_invalid_smtp_port_skips_distribution(sheets, tmp_path: Path, monkeypatch):
    import grade_report.config as cfg

    monkeypatch.setattr(cfg, "PROJECT_ROOT", tmp_path)
    monkeypatch.setenv("SMTP_PORT", "not-a-port")
    grades, teachers = sheets
    summary = run_pipeline(
        grades, teachers, tmp_path / "out", write_settings(tmp_path / "setting.json")
    )
    assert summary.reports_written == 2
    assert summary.mail_enabled is False


def test_run_pipeline_zero_groups_is_fatal_but_keeps_unmatched_export(tmp_path: Path, write_csv, grade_header, teacher_header):
    grades = write_csv(
        tmp_path / "grade.csv",
        [grade_header, ["MATH", "Math", "S1", "07", "1", "1", "Alice"]],
    )
    teachers = write_csv(
        tmp_path / "teacher.csv",
        [teacher_header, ["MATH", "Math", "7", "1", "", "Mr.Lee", "lee@x.org"]],
    )
    with pytest.raises(ReportGenerationError):
        run_pipeline(grades, teachers, tmp_path / "out")
    assert (tmp_path / "out" / "error.csv").exists()


def test_run_pipeline_all_writes_failing_is_fatal(sheets, tmp_path: Path, monkeypatch):
    grades, teachers = sheets
    monkeypatch.setattr(runner, "write_reports", lambda reports, header, output_dir: {})
    with pytest.raises(ReportGenerationError):
        run_pipeline(grades, teachers, tmp_path / "out")


def test_run_pipeline_unreadable_input_is_fatal(tmp_path: Path, sheets):
    _, teachers = sheets
    with pytest.raises(FileNotFoundError):
        run_pipeline(tmp_path / "missing.csv", teachers, tmp_path / "out")
    broken = tmp_path / "broken.csv"
    broken.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(DataValidationError):
        run_pipeline(broken, teachers, tmp_path / "out")


def test_run_from_config_returns_bool(sheets, tmp_path: Path):
    grades, teachers = sheets
    assert run_from_config(grades, teachers, tmp_path / "out", tmp_path / "nope.json") is True
    assert run_from_config(tmp_path / "missing.csv", teachers, tmp_path / "out", tmp_path / "nope.json") is False
