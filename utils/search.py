import re
from typing import Iterable, Sequence

from features.store.models import Student, StudentRecord

_DIGITS = re.compile(r"(\d+)")


def natural_key(text: str) -> tuple:
    """Sort key that orders embedded numbers by value ("Sem 2" < "Sem 10")."""
    parts = []
    for chunk in _DIGITS.split(text.strip()):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.casefold()))
    return tuple(parts)


def _matches(value: str | None, query: str) -> bool:
    return bool(value) and query in value.lower()


def filter_students(students: Iterable[Student], query: str) -> list[Student]:
    query = (query or "").lower()
    if not query:
        return list(students)

    return [
        student
        for student in students
        if _matches(student.username, query) or _matches(student.reg_number, query)
    ]


def filter_records(records: Iterable[StudentRecord], query: str) -> list[StudentRecord]:
    query = (query or "").lower()
    if not query:
        return list(records)

    return [record for record in records if _matches(record.semester, query)]


def sort_records(
    records: Sequence[StudentRecord], descending: bool = False
) -> list[StudentRecord]:
    return sorted(records, key=lambda r: natural_key(r.semester), reverse=descending)
