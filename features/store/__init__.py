from .models import Notice, NoticeType, Role, Student, StudentRecord, User
from .repository import RecordStore

__all__ = [
    "RecordStore",
    "User",
    "Role",
    "Student",
    "StudentRecord",
    "Notice",
    "NoticeType",
]
