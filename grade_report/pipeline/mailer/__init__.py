"""Mail distribution package: settings, delivery planning and transports."""

from .distribution import (
    DistributionOutcome,
    distribute_reports,
    plan_distribution,
    teacher_name_for_email,
)
from .settings import EmailSettings, SmtpConfig, load_email_settings
from .transport import (
    DryRunMailTransport,
    MailTransport,
    SmtpMailTransport,
    build_message,
    create_transport,
)

__all__ = [
    "DistributionOutcome",
    "DryRunMailTransport",
    "EmailSettings",
    "MailTransport",
    "SmtpConfig",
    "SmtpMailTransport",
    "build_message",
    "create_transport",
    "distribute_reports",
    "load_email_settings",
    "plan_distribution",
    "teacher_name_for_email",
]
