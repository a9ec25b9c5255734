import logging
from typing import Optional

from features.store import RecordStore, Role, User

from .repository import AuthRepository

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class SessionManager:
    def __init__(self, store: RecordStore, auth_repository: Optional[AuthRepository] = None):
        self.store = store
        self.auth_repository = auth_repository or AuthRepository(store)

    def login(self, role: Role | str, reg_number: str, password: str) -> User:
        if not reg_number or not password:
            raise InvalidCredentialsError("Please enter both ID and Password")

        user = self.auth_repository.authenticate(role, reg_number, password)
        if user is None:
            logger.info(f"Rejected login for {reg_number}")
            raise InvalidCredentialsError()

        self.store.set_authenticated_user(user)
        logger.info(f"Session saved for user: {user.reg_number}")
        return user

    def logout(self) -> None:
        user = self.store.get_authenticated_user()
        self.store.set_authenticated_user(None)
        if user:
            logger.info(f"Session cleared for user: {user.reg_number}")

    def current_user(self) -> Optional[User]:
        return self.store.get_authenticated_user()

    def is_admin(self) -> bool:
        user = self.current_user()
        return user is not None and user.role == Role.ADMIN
