"""
Association tables for many-to-many relationships.

Only project collaborators are modelled this way; ownership is a plain
foreign key on the project row.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Table, Uuid
from sqlalchemy.sql import func
from projecthub.db.base import Base


project_collaborators = Table(
    "project_collaborators",
    Base.metadata,
    Column(
        "project_id",
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
