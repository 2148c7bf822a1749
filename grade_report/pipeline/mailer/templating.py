"""Placeholder rendering for mail subjects and bodies.

Placeholders are tokens of the form ``{Name}``. Unknown placeholders are left
in place so that a subject line containing literal braces still goes out
unchanged.
"""

import re
from collections.abc import Mapping

_PLACEHOLDER_PATTERN = re.compile(r"\{([a-zA-Z0-9_]+)\}")


def render_template(template_content: str, context: Mapping[str, str]) -> str:
    """Render the template by replacing placeholders using the provided context.

    Parameters
    ----------
    template_content : str
        The template text containing ``{Placeholders}``.
    context : Mapping[str, str]
        Mapping from placeholder names to their string values.

    Returns
    -------
    str
        The rendered text.

    Examples
    --------
    >>> render_template("Grades for {TeacherName}", {"TeacherName": "Mr.Lee"})
    'Grades for Mr.Lee'
    >>> render_template("{Unknown} stays", {})
    '{Unknown} stays'
    """

    def replace_func(match: re.Match[str]) -> str:
        return context.get(match.group(1), match.group(0))

    return _PLACEHOLDER_PATTERN.sub(replace_func, template_content)


def build_mail_context(
    teacher_name: str, sender_email: str, report_count: int
) -> dict[str, str]:
    """Values available to subject and body templates."""
    return {
        "TeacherName": teacher_name,
        "SenderEmail": sender_email,
        "ReportCount": str(report_count),
    }
