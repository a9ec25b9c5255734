from .service import ClassOverview, StudentDashboard, StudentService

__all__ = ["StudentService", "StudentDashboard", "ClassOverview"]
