"""
Pydantic model for the result of a successful register or login.
"""

from pydantic import BaseModel

from .user import UserPublicModel


class AuthTokenModel(BaseModel):
    message: str
    token: str
    user: UserPublicModel
