from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, TypeVar

import nanoid

from base import get_logger
from database import (
    PORTAL_KEY_PREFIX,
    CorruptCollectionError,
    KeyValueStore,
    SqlKeyValueStore,
)

from .models import Notice, NoticeType, Student, User
from .seed import INITIAL_NOTICES, INITIAL_STUDENTS

logger = get_logger(__name__)

T = TypeVar("T")

_UNREADABLE = object()


class RecordStore:
    """Typed access to the students, notices and signed-in user slots.

    Every mutation reads the whole collection, changes it in memory and writes
    the whole collection back. Updating or deleting an id that is not stored
    leaves the collection untouched and reports ``False``.
    """

    def __init__(
        self,
        adapter: Optional[KeyValueStore] = None,
        key_prefix: str = PORTAL_KEY_PREFIX,
    ) -> None:
        self._adapter = adapter or SqlKeyValueStore()
        self.students_key = f"{key_prefix}students"
        self.notices_key = f"{key_prefix}notices"
        self.auth_key = f"{key_prefix}auth_user"

    @property
    def adapter(self) -> KeyValueStore:
        return self._adapter

    def initialize(self) -> list[str]:
        seeded = []
        if not self._adapter.contains(self.students_key):
            self.save_students(INITIAL_STUDENTS)
            seeded.append(self.students_key)
        if not self._adapter.contains(self.notices_key):
            self.save_notices(INITIAL_NOTICES)
            seeded.append(self.notices_key)

        if seeded:
            logger.info(f"Seeded initial data for: {', '.join(seeded)}")
        return seeded

    def _load(
        self,
        key: str,
        parse: Callable[[dict[str, Any]], T],
        *,
        for_update: bool = False,
    ) -> tuple[list[T], int]:
        """Read a collection, skipping entries that do not parse.

        With ``for_update`` any damage raises CorruptCollectionError instead,
        so a write-back never drops entries this code could not read.
        """
        raw, version = self._adapter.get_versioned(key, _UNREADABLE)
        if raw is _UNREADABLE:
            if version and for_update:
                raise CorruptCollectionError(key, "stored value is not valid JSON")
            return [], version

        if not isinstance(raw, list):
            problem = f"expected a list, got {type(raw).__name__}"
            if for_update:
                raise CorruptCollectionError(key, problem)
            logger.warning(f"Stored collection '{key}': {problem}")
            return [], version

        items = []
        for index, item in enumerate(raw):
            try:
                items.append(parse(item))
            except (KeyError, TypeError, ValueError) as e:
                if for_update:
                    raise CorruptCollectionError(key, f"entry {index} is invalid: {e!r}")
                logger.warning(f"Skipping invalid entry {index} in '{key}': {e!r}")
        return items, version

    # Students

    def get_students_with_version(self) -> tuple[list[Student], int]:
        return self._load(self.students_key, Student.from_dict)

    def get_students(self) -> list[Student]:
        students, _ = self.get_students_with_version()
        return students

    def get_student(self, student_id: str) -> Optional[Student]:
        for student in self.get_students():
            if student.id == student_id:
                return student
        return None

    def save_students(
        self, students: Iterable[Student], *, expected_version: Optional[int] = None
    ) -> int:
        return self._adapter.set(
            self.students_key,
            [student.to_dict() for student in students],
            expected_version=expected_version,
        )

    def upsert_student(self, student: Student) -> bool:
        """Replace the student with the same id in place, or append it.

        Returns True when an existing entry was replaced.
        """
        students, version = self._load(
            self.students_key, Student.from_dict, for_update=True
        )
        for index, existing in enumerate(students):
            if existing.id == student.id:
                students[index] = student
                self.save_students(students, expected_version=version)
                return True

        students.append(student)
        self.save_students(students, expected_version=version)
        return False

    def delete_student(self, student_id: str) -> bool:
        students, version = self._load(
            self.students_key, Student.from_dict, for_update=True
        )
        remaining = [s for s in students if s.id != student_id]
        if len(remaining) == len(students):
            logger.debug(f"No student with id {student_id} to delete")
            return False

        self.save_students(remaining, expected_version=version)
        return True

    # Notices

    def get_notices_with_version(self) -> tuple[list[Notice], int]:
        return self._load(self.notices_key, Notice.from_dict)

    def get_notices(self) -> list[Notice]:
        notices, _ = self.get_notices_with_version()
        return notices

    def save_notices(
        self, notices: Iterable[Notice], *, expected_version: Optional[int] = None
    ) -> int:
        return self._adapter.set(
            self.notices_key,
            [notice.to_dict() for notice in notices],
            expected_version=expected_version,
        )

    def add_notice(
        self, title: str, content: str, date: str, type: NoticeType | str
    ) -> Notice:
        notice = Notice(
            id=nanoid.generate(),
            title=title,
            content=content,
            date=date,
            type=NoticeType(type),
        )
        notices, version = self._load(
            self.notices_key, Notice.from_dict, for_update=True
        )
        notices.append(notice)
        self.save_notices(notices, expected_version=version)
        return notice

    def delete_notice(self, notice_id: str) -> bool:
        notices, version = self._load(
            self.notices_key, Notice.from_dict, for_update=True
        )
        remaining = [n for n in notices if n.id != notice_id]
        if len(remaining) == len(notices):
            logger.debug(f"No notice with id {notice_id} to delete")
            return False

        self.save_notices(remaining, expected_version=version)
        return True

    # Signed-in user

    def get_authenticated_user(self) -> Optional[User]:
        raw = self._adapter.get(self.auth_key, None)
        if raw is None:
            return None
        try:
            return User.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Stored user under '{self.auth_key}' is invalid: {e}")
            return None

    def set_authenticated_user(self, user: Optional[User]) -> None:
        if user is None:
            self._adapter.remove(self.auth_key)
            return

        if isinstance(user, Student):
            user = user.as_user()
        self._adapter.set(self.auth_key, user.to_dict())
