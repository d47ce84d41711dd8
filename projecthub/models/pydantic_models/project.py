"""
Pydantic model for Project entity.
"""

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from uuid import UUID

from .user import UserPublicModel


class ProjectModel(BaseModel):
    """
    Project with owner and collaborators resolved to public user views.

    Serialised with camelCase keys (``createdAt``, ``updatedAt``) for the
    dashboard.
    """

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: UUID
    name: str
    description: str | None = None
    technology: str
    status: str
    owner: UserPublicModel
    collaborators: list[UserPublicModel] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
