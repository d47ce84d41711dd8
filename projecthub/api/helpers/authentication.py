"""
Bearer-token authentication for protected routes.

The hasher and signer are read from ``app.state`` (installed at startup,
replaced by fakes in tests). When startup has not run, production
implementations are built from settings on first use.
"""

import logging
from datetime import timedelta

from fastapi import Request

from projecthub.config import settings
from projecthub.core.security import (
    BcryptPasswordHasher,
    JoseTokenSigner,
    PasswordHasher,
    TokenSigner,
)
from projecthub.services.auth import TokenIdentity, verify_token

logger = logging.getLogger(__name__)


def build_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher(rounds=settings.password_hash_rounds)


def build_token_signer() -> TokenSigner:
    return JoseTokenSigner(
        secret_key=settings.secret_key,
        expires_delta=timedelta(hours=settings.access_token_expire_hours),
    )


def get_password_hasher(request: Request) -> PasswordHasher:
    hasher = getattr(request.app.state, "password_hasher", None)
    if hasher is None:
        hasher = request.app.state.password_hasher = build_password_hasher()
    return hasher


def get_token_signer(request: Request) -> TokenSigner:
    signer = getattr(request.app.state, "token_signer", None)
    if signer is None:
        signer = request.app.state.token_signer = build_token_signer()
    return signer


def bearer_token(request: Request) -> str | None:
    auth_header: str | None = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None
    return None


async def get_current_user(request: Request) -> TokenIdentity:
    """Resolve the caller from ``Authorization: Bearer <token>``.

    401 without a token, 403 for a token that does not verify.
    """
    return verify_token(get_token_signer(request), bearer_token(request))
