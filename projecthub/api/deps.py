from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.api.helpers.authentication import get_password_hasher, get_token_signer
from projecthub.db.session import get_db
from projecthub.services import AnalyticsService, AuthService, ProjectService


# Database dependency - use get_db directly with FastAPI's Depends()
# DO NOT create helper functions that call next(get_db()) as this breaks
# the generator pattern and causes connection leaks


def get_auth_service(
    request: Request, db: AsyncSession = Depends(get_db)
) -> AuthService:
    return AuthService(
        db, hasher=get_password_hasher(request), signer=get_token_signer(request)
    )


def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)
