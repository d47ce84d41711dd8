"""
Project CRUD for the authenticated caller.

Update and delete answer 404 both for missing projects and for projects the
caller may not touch.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from projecthub.api.deps import get_project_service
from projecthub.api.helpers.authentication import get_current_user
from projecthub.models.pydantic_models import ProjectModel
from projecthub.services import ProjectService
from projecthub.services.auth import TokenIdentity

router = APIRouter(prefix="/projects", tags=["Projects"])


# ── request / response schemas ────────────────────────────────────────────


class CreateProjectRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    technology: str | None = None


class UpdateProjectRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    description: str | None = None
    technology: str | None = None
    status: str | None = None
    collaborators: list[str] | None = None


class DeleteProjectResponse(BaseModel):
    message: str


# ── endpoints ─────────────────────────────────────────────────────────────


@router.get("", response_model=list[ProjectModel])
async def list_projects(
    current_user: TokenIdentity = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """List every project the caller owns or collaborates on."""
    return await projects.list_visible(current_user.user_id)


@router.post("", response_model=ProjectModel, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: CreateProjectRequest,
    current_user: TokenIdentity = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.create(
        current_user.user_id,
        name=request.name,
        technology=request.technology,
        description=request.description,
    )


@router.put("/{project_id}", response_model=ProjectModel)
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    current_user: TokenIdentity = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """Overwrite the provided top-level fields of a project."""
    return await projects.update(
        current_user.user_id, project_id, request.model_dump(exclude_unset=True)
    )


@router.delete("/{project_id}", response_model=DeleteProjectResponse)
async def delete_project(
    project_id: str,
    current_user: TokenIdentity = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """Delete a project. Owner only."""
    return await projects.delete(current_user.user_id, project_id)
