"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses used by the report pipeline to represent its fatal
failure modes (configuration, unreadable input, empty report output) and
recoverable delivery failures from the mail transport. Using a centralized
hierarchy keeps error handling in the runner and CLI consistent.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base class for failures the report run knows how to report.

    The CLI logs ``to_dict()`` and exits non-zero for anything that escapes
    the runner; the mail loop catches ``ExternalServiceError`` per recipient.

    Parameters
    ----------
    code : str
        Stable code such as ``'REPORT_GENERATION_ERROR'``.
    message : str
        Operator-facing description.
    context : Mapping[str, Any] | None, optional
        Offending path, recipient or host, for the log record.
    transient : bool, optional
        Whether rerunning later could succeed (SMTP outages, timeouts).

    Examples
    --------
    >>> err = AppError("REPORT_GENERATION_ERROR", "no reports", context={"groups": 0})
    >>> str(err)
    'REPORT_GENERATION_ERROR: no reports'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return ``"<code>: <message>"`` for log lines."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return the fields passed as ``extra`` when the CLI logs a failure."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised when SMTP settings from the environment cannot be used."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, context=context, transient=False
        )


class DataValidationError(AppError):
    """Raised when an input sheet cannot be decoded or parsed as CSV."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "DATA_VALIDATION_ERROR", message, context=context, transient=False
        )


class ReportGenerationError(AppError):
    """Raised when a run produces no report groups or no report files.

    An empty result almost always means the grade and teacher sheets use
    different key formats (e.g. ``"07"`` against ``"7"`` for the grade-level).
    """

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "REPORT_GENERATION_ERROR", message, context=context, transient=False
        )


class ExternalServiceError(AppError):
    """Raised for failures from an external service such as the SMTP server."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = True,
    ) -> None:
        super().__init__(
            "EXTERNAL_SERVICE_ERROR", message, context=context, transient=transient
        )
