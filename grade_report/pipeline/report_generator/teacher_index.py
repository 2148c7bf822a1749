"""Lookup of the responsible teacher for a (subject, grade-level, class).

The group column is not part of the key: rows that differ only in group
collapse onto one entry, and the row appearing last in the teacher sheet
wins. Whether distinct per-group teachers should be supported is still an
open product question, so collisions are only reported at debug level.
"""

import logging
from collections.abc import Iterable

from .records import TeacherIndexKey, TeacherRow

logger = logging.getLogger(__name__)


def build_teacher_index(
    teachers: Iterable[TeacherRow],
) -> dict[TeacherIndexKey, TeacherRow]:
    """Map each ``TeacherIndexKey`` to the last teacher row registered for it.

    Parameters
    ----------
    teachers : Iterable[TeacherRow]
        Teacher rows in file order.

    Returns
    -------
    dict[TeacherIndexKey, TeacherRow]
        One teacher per key.

    Examples
    --------
    >>> lee = TeacherRow("MATH", "Math", "7", "1", "", "Mr.Lee", "lee@x.org")
    >>> build_teacher_index([lee])[TeacherIndexKey("MATH", "7", "1")].teacher_name
    'Mr.Lee'
    """
    index: dict[TeacherIndexKey, TeacherRow] = {}
    for teacher in teachers:
        key = teacher.index_key
        previous = index.get(key)
        if previous is not None and previous != teacher:
            logger.debug(
                f"Teacher key {key} registered twice: "
                f"{previous.teacher_name} replaced by {teacher.teacher_name}"
            )
        index[key] = teacher
    return index


def find_teacher(
    teachers: Iterable[TeacherRow], key: TeacherIndexKey
) -> TeacherRow | None:
    """Return the first teacher in sheet order registered for ``key``."""
    for teacher in teachers:
        if teacher.index_key == key:
            return teacher
    return None
