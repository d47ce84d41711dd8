from .user import UserPublicModel as UserPublicModel
from .project import ProjectModel as ProjectModel
from .analytics import GroupCountModel as GroupCountModel, StatsModel as StatsModel
from .token import AuthTokenModel as AuthTokenModel
