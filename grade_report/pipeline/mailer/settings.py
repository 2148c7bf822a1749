"""Run settings for the mail distribution step.

Two sources feed the mailer:

- ``setting.json`` next to the input sheets holds the operator-facing
  switches (sender address, whether to send at all, subject line). A missing
  or unreadable file disables distribution; it never fails the run.
- SMTP connection details come from the environment, optionally seeded from
  a ``.env`` file at the project root, so credentials stay out of the data
  directory.

Examples
--------
>>> from grade_report.pipeline.mailer.settings import SmtpConfig
>>> cfg = SmtpConfig.from_env()  # doctest: +SKIP
>>> cfg.port  # doctest: +SKIP
587
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

import grade_report.config as _project_config
from grade_report.config import DEFAULT_SMTP_PORT, DEFAULT_SMTP_TIMEOUT
from grade_report.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailSettings:
    """Operator switches read from ``setting.json``.

    Attributes
    ----------
    sender_email : str
        Address used in the ``From`` header.
    should_send_email : bool
        Whether the distribution step runs at all.
    email_title : str
        Subject template; may contain ``{TeacherName}``.
    """

    sender_email: str
    should_send_email: bool
    email_title: str


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def load_email_settings(path: Path) -> EmailSettings | None:
    """Read ``setting.json``.

    The file uses the keys ``senderEmail``, ``shouldSendEmail`` and
    ``emailTitle``. ``shouldSendEmail`` may be a JSON boolean or the string
    ``"true"``.

    Parameters
    ----------
    path : Path
        Location of the settings file.

    Returns
    -------
    EmailSettings | None
        Parsed settings, or ``None`` when the file is missing or invalid
        (logged), in which case mail distribution is skipped.
    """
    try:
        with path.open("r", encoding="utf-8-sig") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        logger.warning(f"Settings file {path} not found; mail distribution skipped.")
        return None
    except (OSError, json.JSONDecodeError) as error:
        logger.error(f"Could not read settings file {path}: {error}")
        return None
    if not isinstance(data, dict):
        logger.error(f"Settings file {path} must contain a JSON object.")
        return None
    return EmailSettings(
        sender_email=str(data.get("senderEmail", "")).strip(),
        should_send_email=_parse_flag(data.get("shouldSendEmail", False)),
        email_title=str(data.get("emailTitle", "")),
    )


@dataclass(frozen=True)
class SmtpConfig:
    """SMTP connection parameters.

    Attributes
    ----------
    host : str | None
        SMTP server; ``None`` means no server is configured and delivery is
        simulated.
    port : int
        Server port.
    username : str | None
        Login name, if the server requires authentication.
    password : str | None
        Login password.
    use_tls : bool
        Whether to upgrade the connection with STARTTLS.
    timeout : int
        Socket timeout in seconds.
    """

    host: str | None = None
    port: int = DEFAULT_SMTP_PORT
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    timeout: int = DEFAULT_SMTP_TIMEOUT

    @classmethod
    def from_env(cls) -> "SmtpConfig":
        """Build the config from ``SMTP_*`` environment variables.

        A ``.env`` file at ``PROJECT_ROOT`` is loaded first when present.

        Raises
        ------
        ConfigurationError
            If ``SMTP_PORT`` or ``SMTP_TIMEOUT`` is not an integer.
        """
        env_path = Path(_project_config.PROJECT_ROOT) / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=True)
        try:
            port = int(os.getenv("SMTP_PORT", DEFAULT_SMTP_PORT))
            timeout = int(os.getenv("SMTP_TIMEOUT", DEFAULT_SMTP_TIMEOUT))
        except ValueError as error:
            raise ConfigurationError(
                f"Invalid SMTP port or timeout: {error}",
                context={
                    "SMTP_PORT": os.getenv("SMTP_PORT"),
                    "SMTP_TIMEOUT": os.getenv("SMTP_TIMEOUT"),
                },
            ) from error
        return cls(
            host=os.getenv("SMTP_HOST") or None,
            port=port,
            username=os.getenv("SMTP_USERNAME") or None,
            password=os.getenv("SMTP_PASSWORD") or None,
            use_tls=_parse_flag(os.getenv("SMTP_USE_TLS", "true")),
            timeout=timeout,
        )
