"""
Registration and login. Both routes are public.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from projecthub.api.deps import get_auth_service
from projecthub.models.pydantic_models import AuthTokenModel
from projecthub.services import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


# ── request schemas ───────────────────────────────────────────────────────
# Fields are optional so missing values reach the service's presence check
# and come back as 400 rather than a schema error.


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


# ── endpoints ─────────────────────────────────────────────────────────────


@router.post(
    "/register", response_model=AuthTokenModel, status_code=status.HTTP_201_CREATED
)
async def register(
    request: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Create an account and receive a JWT."""
    return await auth.register(request.username, request.email, request.password)


@router.post("/login", response_model=AuthTokenModel)
async def login(
    request: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Authenticate with email + password and receive a JWT."""
    return await auth.login(request.email, request.password)
