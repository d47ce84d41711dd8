from .enums import UserRole as UserRole, ProjectStatus as ProjectStatus
from .relationships import project_collaborators as project_collaborators
from .users import User as User
from .projects import Project as Project
