"""
Enumerations for users and projects.
"""

from enum import Enum


class UserRole(str, Enum):
    """Enumeration of possible user roles"""

    USER = "user"
    ADMIN = "admin"


class ProjectStatus(str, Enum):
    """Enumeration of possible project lifecycle statuses"""

    PLANNING = "planning"
    DEVELOPMENT = "development"
    TESTING = "testing"
    DEPLOYED = "deployed"
