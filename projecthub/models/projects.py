"""
Project model.

A project has exactly one owner, fixed at creation, and any number of
collaborators. Only the owner may delete it; owner and collaborators may
read and update it.
"""

import uuid

from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from projecthub.db.base import Base
from projecthub.utils import utcnow
from .relationships import project_collaborators
from .enums import ProjectStatus


class Project(Base):
    __tablename__ = "projects"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        unique=True,
        index=True,
        nullable=False,
        default=uuid.uuid4,
    )
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    technology = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=ProjectStatus.PLANNING.value)

    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    owner = relationship("User", back_populates="owned_projects")
    collaborators = relationship(
        "User", secondary=project_collaborators, back_populates="shared_projects"
    )

    __table_args__ = (
        CheckConstraint(
            status.in_([e.value for e in ProjectStatus]),
            name="ck_project_status",
        ),
    )
