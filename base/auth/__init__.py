from .repository import AuthRepository
from .session_manager import InvalidCredentialsError, SessionManager

__all__ = ["AuthRepository", "SessionManager", "InvalidCredentialsError"]
