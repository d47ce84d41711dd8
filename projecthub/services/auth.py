"""
Registration, login and bearer-token verification.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.core.security import InvalidTokenError, PasswordHasher, TokenSigner
from projecthub.models.enums import UserRole
from projecthub.models.pydantic_models import AuthTokenModel, UserPublicModel
from projecthub.models.users import User
from projecthub.services.base import StoreService
from projecthub.services.errors import (
    Conflict,
    Forbidden,
    InvalidInput,
    Unauthenticated,
    Unauthorized,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenIdentity:
    """Who a verified bearer token belongs to."""

    user_id: UUID
    username: str


def _require(**fields: str | None) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise InvalidInput(f"Missing required field(s): {', '.join(missing)}")


def verify_token(signer: TokenSigner, token: str | None) -> TokenIdentity:
    """Check a bearer token; absent means 401, anything wrong with it 403."""
    if not token:
        raise Unauthenticated()
    try:
        payload = signer.verify(token)
    except InvalidTokenError:
        raise Forbidden()

    user_id = payload.get("sub")
    username = payload.get("username")
    if not user_id or username is None:
        raise Forbidden()
    try:
        return TokenIdentity(user_id=UUID(str(user_id)), username=username)
    except ValueError:
        raise Forbidden()


class AuthService(StoreService):
    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        signer: TokenSigner,
        timeout: float | None = None,
    ):
        super().__init__(db, timeout=timeout)
        self.hasher = hasher
        self.signer = signer

    def _issue_token(self, user: User) -> str:
        return self.signer.sign({"sub": str(user.id), "username": user.username})

    async def register(
        self, username: str | None, email: str | None, password: str | None
    ) -> AuthTokenModel:
        _require(username=username, email=email, password=password)

        result = await self._store(
            self.db.execute(
                select(User.id).where(
                    or_(User.email == email, User.username == username)
                )
            )
        )
        if result.first() is not None:
            raise Conflict()

        user = User(
            username=username,
            email=email,
            hashed_password=await self.hasher.hash(password),
            role=UserRole.USER.value,
        )
        self.db.add(user)
        try:
            await self._store(self.db.commit())
        except IntegrityError:
            # lost a race with a concurrent registration of the same name
            await self.db.rollback()
            raise Conflict()

        logger.info("Registered user %s (%s)", user.username, user.id)
        return AuthTokenModel(
            message="User created successfully",
            token=self._issue_token(user),
            user=UserPublicModel.model_validate(user),
        )

    async def login(self, email: str | None, password: str | None) -> AuthTokenModel:
        _require(email=email, password=password)

        result = await self._store(self.db.execute(select(User).where(User.email == email)))
        user = result.scalar_one_or_none()

        if not user:
            raise Unauthorized()

        if not await self.hasher.verify(password, user.hashed_password):
            raise Unauthorized()

        return AuthTokenModel(
            message="Login successful",
            token=self._issue_token(user),
            user=UserPublicModel.model_validate(user),
        )

    def verify(self, token: str | None) -> TokenIdentity:
        return verify_token(self.signer, token)
