"""
Project CRUD scoped by the caller's identity.

Existence and access are always checked in the same query: a caller who
cannot see a project gets the same ``NotFound`` as for a project that does
not exist, so ids cannot be probed.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from projecthub.models.enums import ProjectStatus
from projecthub.models.projects import Project
from projecthub.models.pydantic_models import ProjectModel
from projecthub.models.users import User
from projecthub.services.base import StoreService
from projecthub.services.errors import InvalidInput, NotFound
from projecthub.utils import utcnow

logger = logging.getLogger(__name__)

# Top-level fields a patch may overwrite. Owner and timestamps are not here.
UPDATABLE_FIELDS = ("name", "description", "technology", "status", "collaborators")
REQUIRED_FIELDS = ("name", "technology")

DELETE_NOT_FOUND_MESSAGE = "Project not found or insufficient permissions"


def visible_to(user_id: UUID):
    """Filter matching projects the user owns or collaborates on."""
    return or_(
        Project.owner_id == user_id,
        Project.collaborators.any(User.id == user_id),
    )


def _project_load_options():
    """Build selectinload options for Project queries."""
    return [selectinload(Project.owner), selectinload(Project.collaborators)]


def _parse_id(value: str | UUID) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ProjectService(StoreService):
    async def _fetch(self, project_id: UUID) -> Project:
        result = await self._store(
            self.db.execute(
                select(Project)
                .options(*_project_load_options())
                .where(Project.id == project_id)
                .execution_options(populate_existing=True)
            )
        )
        return result.scalar_one()

    async def _get_accessible(
        self, project_id: str | UUID, user_id: UUID, owner_only: bool = False
    ) -> Project | None:
        pid = _parse_id(project_id)
        if pid is None:
            return None

        access = Project.owner_id == user_id if owner_only else visible_to(user_id)
        result = await self._store(
            self.db.execute(
                select(Project)
                .options(*_project_load_options())
                .where(Project.id == pid, access)
            )
        )
        return result.scalar_one_or_none()

    async def list_visible(self, user_id: UUID) -> list[ProjectModel]:
        result = await self._store(
            self.db.execute(
                select(Project)
                .options(*_project_load_options())
                .where(visible_to(user_id))
                .order_by(Project.created_at)
            )
        )
        return [ProjectModel.model_validate(p) for p in result.scalars().all()]

    async def create(
        self,
        user_id: UUID,
        *,
        name: str | None,
        description: str | None = None,
        technology: str | None,
    ) -> ProjectModel:
        missing = [f for f, v in (("name", name), ("technology", technology)) if _is_blank(v)]
        if missing:
            raise InvalidInput(f"Missing required field(s): {', '.join(missing)}")

        now = utcnow()
        project = Project(
            name=name,
            description=description,
            technology=technology,
            status=ProjectStatus.PLANNING.value,
            owner_id=user_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(project)
        await self._store(self.db.commit())

        logger.info("User %s created project %s", user_id, project.id)
        return ProjectModel.model_validate(await self._fetch(project.id))

    async def _resolve_collaborators(self, raw_ids: Any) -> list[User]:
        if raw_ids is None:
            return []
        if not isinstance(raw_ids, list):
            raise InvalidInput("collaborators must be a list of user ids")

        ids = []
        for raw in raw_ids:
            uid = _parse_id(raw)
            if uid is None:
                raise InvalidInput(f"Invalid collaborator id: {raw}")
            if uid not in ids:
                ids.append(uid)
        if not ids:
            return []

        result = await self._store(self.db.execute(select(User).where(User.id.in_(ids))))
        users = list(result.scalars().all())
        if len(users) != len(ids):
            raise InvalidInput("Unknown collaborator id")
        return users

    async def update(
        self, user_id: UUID, project_id: str | UUID, patch: dict[str, Any]
    ) -> ProjectModel:
        project = await self._get_accessible(project_id, user_id)
        if project is None:
            raise NotFound()

        changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS}

        for field in REQUIRED_FIELDS:
            if field in changes and _is_blank(changes[field]):
                raise InvalidInput(f"{field} cannot be empty")

        if "status" in changes:
            allowed = [s.value for s in ProjectStatus]
            if changes["status"] not in allowed:
                raise InvalidInput(f"status must be one of: {', '.join(allowed)}")

        if "collaborators" in changes:
            project.collaborators = await self._resolve_collaborators(
                changes.pop("collaborators")
            )

        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = utcnow()

        await self._store(self.db.commit())

        logger.info("User %s updated project %s", user_id, project.id)
        return ProjectModel.model_validate(await self._fetch(project.id))

    async def delete(self, user_id: UUID, project_id: str | UUID) -> dict[str, str]:
        project = await self._get_accessible(project_id, user_id, owner_only=True)
        if project is None:
            raise NotFound(DELETE_NOT_FOUND_MESSAGE)

        await self._store(self.db.delete(project))
        await self._store(self.db.commit())

        logger.info("User %s deleted project %s", user_id, project.id)
        return {"message": "Project deleted successfully"}
