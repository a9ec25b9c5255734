import logging
from typing import Optional

from features.store import RecordStore, Role, User

logger = logging.getLogger(__name__)

ADMIN_ID = "ADMIN001"
ADMIN_PASSWORD = "admin123"
STUDENT_PREFIX = "KIST/"
STUDENT_PASSWORD = "student123"

ADMIN_USER = User(
    id="admin-1",
    reg_number=ADMIN_ID,
    username="Prof. Smith",
    role=Role.ADMIN,
)

FALLBACK_STUDENT_ID = "1"
FALLBACK_STUDENT_NAME = "Alice Johnson"
FALLBACK_STUDENT_PHOTO = "https://picsum.photos/seed/alice/200"


class AuthRepository:
    """Fixed demo credentials. Not a security boundary."""

    def __init__(self, store: RecordStore):
        self.store = store

    def authenticate(
        self, role: Role | str, reg_number: str, password: str
    ) -> Optional[User]:
        if not reg_number or not password:
            return None

        role = Role(role)
        if role == Role.ADMIN:
            if reg_number == ADMIN_ID and password == ADMIN_PASSWORD:
                return ADMIN_USER
            return None

        if not reg_number.startswith(STUDENT_PREFIX) or password != STUDENT_PASSWORD:
            return None

        student = self.get_student_by_reg_number(reg_number)
        if student:
            return student.as_user()

        logger.info(f"No roster entry for {reg_number}, using the demo student profile")
        return User(
            id=FALLBACK_STUDENT_ID,
            reg_number=reg_number,
            username=FALLBACK_STUDENT_NAME,
            role=Role.STUDENT,
            photo_url=FALLBACK_STUDENT_PHOTO,
        )

    def get_student_by_reg_number(self, reg_number: str):
        for student in self.store.get_students():
            if student.reg_number == reg_number:
                return student
        return None
