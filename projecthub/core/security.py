"""
Password hashing and token signing capabilities.

The services depend only on the two Protocols below. Production wiring
uses bcrypt and python-jose; tests install fast deterministic fakes on
``app.state`` instead.
"""

import asyncio
from datetime import timedelta
from typing import Any, Protocol, runtime_checkable

import bcrypt
from jose import JWTError, jwt

from projecthub.utils import utcnow

ALGORITHM = "HS256"
# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


class InvalidTokenError(Exception):
    """Raised by a ``TokenSigner`` for malformed, expired or mis-signed tokens."""


# ---------------------------------------------------------------------------
# Capability protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class PasswordHasher(Protocol):
    async def hash(self, password: str) -> str:
        ...

    async def verify(self, password: str, hashed_password: str) -> bool:
        ...


@runtime_checkable
class TokenSigner(Protocol):
    def sign(self, claims: dict[str, Any]) -> str:
        ...

    def verify(self, token: str) -> dict[str, Any]:
        """Return the claims or raise ``InvalidTokenError``."""
        ...


# ---------------------------------------------------------------------------
# Production implementations
# ---------------------------------------------------------------------------


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher:
    """Salted bcrypt hashes; the work runs in a thread off the event loop."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def _hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self._hash_sync, password)

    async def verify(self, password: str, hashed_password: str) -> bool:
        return await asyncio.to_thread(
            bcrypt.checkpw, _password_bytes(password), hashed_password.encode("utf-8")
        )


class JoseTokenSigner:
    """HS256 JWTs with a fixed lifetime."""

    def __init__(self, secret_key: str, expires_delta: timedelta):
        self.secret_key = secret_key
        self.expires_delta = expires_delta

    def sign(self, claims: dict[str, Any]) -> str:
        to_encode = claims.copy()
        now = utcnow()
        to_encode.update({"iat": now, "exp": now + self.expires_delta})
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e
