"""
Dashboard statistics.

The five numbers come from five independent queries with no shared
transaction, so a project written between two of them may show up in one
count and not another.
"""

from uuid import UUID

from sqlalchemy import func, select

from projecthub.models.projects import Project
from projecthub.models.pydantic_models import GroupCountModel, StatsModel
from projecthub.models.users import User
from projecthub.services.base import StoreService
from projecthub.services.projects import visible_to


class AnalyticsService(StoreService):
    async def _count(self, stmt) -> int:
        result = await self._store(self.db.execute(stmt))
        return result.scalar_one()

    async def _group_visible_by(self, column, user_id: UUID) -> list[GroupCountModel]:
        result = await self._store(
            self.db.execute(
                select(column, func.count(Project.id))
                .where(visible_to(user_id))
                .group_by(column)
                .order_by(column)
            )
        )
        return [GroupCountModel(key=key, count=count) for key, count in result.all()]

    async def stats(self, user_id: UUID) -> StatsModel:
        user_count = await self._count(select(func.count()).select_from(User))
        project_count = await self._count(select(func.count()).select_from(Project))
        user_projects = await self._count(
            select(func.count()).select_from(Project).where(visible_to(user_id))
        )
        by_status = await self._group_visible_by(Project.status, user_id)
        by_technology = await self._group_visible_by(Project.technology, user_id)

        return StatsModel(
            user_count=user_count,
            project_count=project_count,
            user_projects=user_projects,
            projects_by_status=by_status,
            projects_by_technology=by_technology,
        )
