"""Grade Report package.

Turns a school's grade sheet and teacher assignment sheet into one CSV report
per teacher, grade-level and subject, and optionally mails every teacher
their reports.

Package Structure
-----------------
- `pipeline/report_generator/`:
    Record model, CSV loading, teacher index, matching/grouping and report
    writing, plus the runner sequencing a whole batch.
- `pipeline/mailer/`:
    Run settings, distribution planning and mail transports.
- `program1_generate_reports.py`: command-line entrypoint.
- `config.py`: All configuration constants (paths, column layout, log format), as UPPER_SNAKE_CASE.
- `exceptions.py`: Project-specific exception classes.

Examples
--------
>>> from grade_report.pipeline.report_generator.runner import run_pipeline
>>> # See program1_generate_reports.py for the CLI.
"""
