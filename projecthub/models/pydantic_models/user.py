"""
Pydantic model for the public view of a User.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from uuid import UUID


class UserPublicModel(BaseModel):
    """
    What other users and the owner see of a user account.
    Never carries the password hash.
    """

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: UUID
    username: str
    email: str
    role: str
