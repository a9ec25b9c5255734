import logging
from typing import Optional

from base.__version__ import __version__
from base.auth import SessionManager
from base.logging_config import setup_logging
from database.errors import StorageError
from features.notices import NoticeService
from features.store import RecordStore, Role, User
from features.students import StudentService

logger = logging.getLogger(__name__)


def check_existing_session(sessions: SessionManager) -> Optional[User]:
    user = sessions.current_user()
    if user:
        logger.info(f"Valid session found for user: {user.reg_number}")
    return user


def log_summary(store: RecordStore, user: Optional[User]) -> None:
    students = StudentService(store)
    notices = NoticeService(store)

    if user is None or user.role == Role.ADMIN:
        overview = students.class_overview()
        logger.info(
            f"{overview.total_students} students, {overview.total_notices} notices, "
            f"average GPA {overview.average_gpa:.2f}"
        )
        return

    dashboard = students.dashboard(user.id)
    if dashboard is None:
        logger.warning(f"Signed-in student {user.id} is not on the roster")
        return

    logger.info(
        f"{dashboard.student.username}: {dashboard.semester_label}, "
        f"GPA {dashboard.latest_gpa:.2f} ({dashboard.standing_label}), "
        f"{len(notices.list_notices())} notices"
    )


def main():
    setup_logging()

    logger.info(f"Starting KIST Portal v{__version__}")

    try:
        store = RecordStore()
        store.initialize()
    except StorageError as e:
        logger.exception(f"Could not open the record store: {e}")
        raise

    sessions = SessionManager(store)
    user = check_existing_session(sessions)
    log_summary(store, user)


if __name__ == "__main__":
    main()
