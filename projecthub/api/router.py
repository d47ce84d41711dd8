"""
Router assembly.

Auth routes are public. Project and analytics routes sit behind the bearer
token dependency; the endpoints also take it directly to get the caller.
The WebSocket relay is mounted at the application root.
"""

from fastapi import APIRouter, Depends

from projecthub.api.helpers.authentication import get_current_user
from projecthub.api.endpoints import analytics, auth, projects, realtime

# Authenticated endpoints
api_router = APIRouter(dependencies=[Depends(get_current_user)])
api_router.include_router(projects.router)
api_router.include_router(analytics.router)

# Public endpoints
auth_router = APIRouter()
auth_router.include_router(auth.router)

realtime_router = realtime.router
