"""
User model.

Users are created by registration and never edited or deleted through the
API. ``role`` exists for completeness but no endpoint changes it.
"""

import uuid

from sqlalchemy import Column, String, DateTime, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from projecthub.db.base import Base
from projecthub.utils import utcnow
from .relationships import project_collaborators
from .enums import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        unique=True,
        index=True,
        nullable=False,
        default=uuid.uuid4,
    )
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=UserRole.USER.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    owned_projects = relationship("Project", back_populates="owner")
    shared_projects = relationship(
        "Project", secondary=project_collaborators, back_populates="collaborators"
    )

    __table_args__ = (
        CheckConstraint(
            role.in_([e.value for e in UserRole]),
            name="ck_user_role",
        ),
    )
