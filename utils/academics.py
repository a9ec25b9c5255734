"""Figures derived from a student's semester records.

Records are expected in chronological order: the last entry is the latest
semester. Nothing here sorts them, so an out-of-order insert makes "latest"
wrong rather than failing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from features.store.models import Student, StudentRecord

CREDITS_PER_SEMESTER = 20
PROGRAM_SEMESTERS = 8


class AcademicStanding(str, Enum):
    DEANS_LIST = "DEANS_LIST"
    FIRST_CLASS = "FIRST_CLASS"
    GOOD_STANDING = "GOOD_STANDING"


@dataclass(frozen=True)
class StandingTier:
    standing: AcademicStanding
    min_gpa: float
    label: str


STANDING_TIERS = [
    StandingTier(AcademicStanding.DEANS_LIST, 3.8, "Dean's List"),
    StandingTier(AcademicStanding.FIRST_CLASS, 3.5, "First Class"),
    StandingTier(AcademicStanding.GOOD_STANDING, float("-inf"), "Good Standing"),
]


def latest_record(records: Sequence[StudentRecord]) -> Optional[StudentRecord]:
    return records[-1] if records else None


def previous_record(records: Sequence[StudentRecord]) -> Optional[StudentRecord]:
    """Second-to-latest record, or the latest one when there is only one."""
    if len(records) > 1:
        return records[-2]
    return latest_record(records)


def latest_gpa(records: Sequence[StudentRecord]) -> float:
    latest = latest_record(records)
    return latest.gpa if latest else 0


def latest_attendance(records: Sequence[StudentRecord]) -> float:
    latest = latest_record(records)
    return latest.attendance if latest else 0


def gpa_trend(records: Sequence[StudentRecord]) -> float:
    if len(records) < 2:
        return 0
    return records[-1].gpa - records[-2].gpa


def attendance_trend(records: Sequence[StudentRecord]) -> float:
    if len(records) < 2:
        return 0
    return records[-1].attendance - records[-2].attendance


def academic_standing(gpa: float) -> AcademicStanding:
    for tier in STANDING_TIERS:
        if gpa >= tier.min_gpa:
            return tier.standing
    return AcademicStanding.GOOD_STANDING


def standing_label(standing: AcademicStanding) -> str:
    for tier in STANDING_TIERS:
        if tier.standing == standing:
            return tier.label
    return standing.value


def class_average_gpa(students: Iterable[Student]) -> float:
    gpas = [latest_gpa(student.records) for student in students]
    if not gpas:
        return 0
    return sum(gpas) / len(gpas)


def credits_earned(records: Sequence[StudentRecord]) -> int:
    return len(records) * CREDITS_PER_SEMESTER


def program_progress(records: Sequence[StudentRecord]) -> float:
    """Fraction of the programme completed, capped at 1.0."""
    return min(len(records) / PROGRAM_SEMESTERS, 1.0)


def current_semester_label(records: Sequence[StudentRecord]) -> str:
    if not records:
        return "New Student"
    return f"Semester {len(records)}"
