from .auth import AuthService as AuthService
from .projects import ProjectService as ProjectService
from .analytics import AnalyticsService as AnalyticsService
