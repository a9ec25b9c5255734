from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

import nanoid

from base import get_logger
from features.common.validation import ValidationError, require_fields
from features.store import Notice, RecordStore, Role, Student, StudentRecord
from utils import academics
from utils.search import filter_records, filter_students, sort_records

logger = get_logger(__name__)


@dataclass(frozen=True)
class StudentDashboard:
    student: Student
    latest_gpa: float
    gpa_trend: float
    latest_attendance: float
    attendance_trend: float
    standing: academics.AcademicStanding
    standing_label: str
    credits_earned: int
    progress: float
    semester_label: str
    records: list[StudentRecord] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)


@dataclass(frozen=True)
class ClassOverview:
    total_students: int
    total_notices: int
    average_gpa: float
    latest_gpas: list[tuple[str, Optional[float]]] = field(default_factory=list)


class StudentService:
    def __init__(self, store: RecordStore):
        self.store = store

    def list_students(self, search_query: str = "") -> list[Student]:
        return filter_students(self.store.get_students(), search_query)

    def add_student(
        self,
        username: str,
        reg_number: str,
        photo_url: Optional[str] = None,
        records: Iterable[StudentRecord] = (),
    ) -> Student:
        require_fields(username=username, reg_number=reg_number)

        student = Student(
            id=nanoid.generate(),
            reg_number=reg_number.strip(),
            username=username.strip(),
            role=Role.STUDENT,
            photo_url=photo_url,
            records=tuple(records),
        )
        self.store.upsert_student(student)
        logger.info(f"Registered student {student.reg_number} ({student.id})")
        return student

    def update_student(self, student: Student) -> bool:
        """Replace an existing roster entry and refresh the session copy.

        Unknown ids are ignored and reported as False.
        """
        existing = self.store.get_student(student.id)
        if existing is None:
            logger.debug(f"No student with id {student.id} to update")
            return False

        if student.role != existing.role:
            raise ValidationError("A user's role cannot be changed", ["role"])
        require_fields(username=student.username, reg_number=student.reg_number)

        self.store.upsert_student(student)
        self._sync_session(student)
        return True

    def delete_student(self, student_id: str) -> bool:
        deleted = self.store.delete_student(student_id)
        if deleted:
            logger.info(f"Deleted student {student_id}")
        return deleted

    def update_profile(
        self,
        user_id: str,
        username: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> Optional[Student]:
        student = self.store.get_student(user_id)
        if student is None:
            logger.debug(f"No student with id {user_id} to update")
            return None

        changes = {}
        if username is not None:
            require_fields(username=username)
            changes["username"] = username.strip()
        if photo_url is not None:
            changes["photo_url"] = photo_url

        updated = replace(student, **changes)
        self.store.upsert_student(updated)
        self._sync_session(updated)
        return updated

    def add_record(
        self, student_id: str, semester: str, gpa: float, attendance: float
    ) -> Optional[Student]:
        """Append a semester to the end of the student's history.

        The new record becomes the latest one, so semesters must be added in
        the order they were taken.
        """
        require_fields(semester=semester)

        student = self.store.get_student(student_id)
        if student is None:
            logger.debug(f"No student with id {student_id} to add a record to")
            return None

        record = StudentRecord(semester=semester.strip(), gpa=gpa, attendance=attendance)
        updated = student.with_records([*student.records, record])
        self.store.upsert_student(updated)
        return updated

    def replace_records(
        self, student_id: str, records: Iterable[StudentRecord]
    ) -> Optional[Student]:
        student = self.store.get_student(student_id)
        if student is None:
            return None

        updated = student.with_records(records)
        self.store.upsert_student(updated)
        return updated

    def dashboard(
        self, student_id: str, semester_query: str = "", descending: bool = True
    ) -> Optional[StudentDashboard]:
        student = self.store.get_student(student_id)
        if student is None:
            return None

        records = list(student.records)
        gpa = academics.latest_gpa(records)
        standing = academics.academic_standing(gpa)

        return StudentDashboard(
            student=student,
            latest_gpa=gpa,
            gpa_trend=round(academics.gpa_trend(records), 2),
            latest_attendance=academics.latest_attendance(records),
            attendance_trend=academics.attendance_trend(records),
            standing=standing,
            standing_label=academics.standing_label(standing),
            credits_earned=academics.credits_earned(records),
            progress=academics.program_progress(records),
            semester_label=academics.current_semester_label(records),
            records=sort_records(filter_records(records, semester_query), descending),
            notices=self.store.get_notices(),
        )

    def class_overview(self) -> ClassOverview:
        students = self.store.get_students()
        latest = []
        for student in students:
            record = academics.latest_record(student.records)
            latest.append((student.username, record.gpa if record else None))
        return ClassOverview(
            total_students=len(students),
            total_notices=len(self.store.get_notices()),
            average_gpa=round(academics.class_average_gpa(students), 2),
            latest_gpas=latest,
        )

    def _sync_session(self, student: Student) -> None:
        current = self.store.get_authenticated_user()
        if current and current.id == student.id:
            self.store.set_authenticated_user(student.as_user())
