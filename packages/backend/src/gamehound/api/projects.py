"""Project API routes.

Learn: Routes translate HTTP to ProjectService calls; the service owns
the ownership rules. Every route takes the caller's Identity and passes
its user_id down — there is no way to name a different owner.

PUT and DELETE always answer 200. The body's "result" field says whether
anything happened ("applied") or the project was not visible to the
caller ("not_found_or_not_owned").
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from gamehound.auth.dependencies import get_current_user
from gamehound.auth.jwt import Identity
from gamehound.db.engine import get_db
from gamehound.errors import NotFoundError
from gamehound.schemas.project import (
    INT64_MAX,
    INT64_MIN,
    MutationResponse,
    ProjectCreate,
    ProjectCreated,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)
from gamehound.services.project_service import MutationResult, ProjectService

router = APIRouter(prefix="/projects")

ProjectId = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX)]

_MESSAGES = {
    ("update", MutationResult.APPLIED): "Project updated successfully",
    ("update", MutationResult.NOT_FOUND_OR_NOT_OWNED): "Project not found or not owned",
    ("delete", MutationResult.APPLIED): "Project deleted successfully",
    ("delete", MutationResult.NOT_FOUND_OR_NOT_OWNED): "Project not found or not owned",
}


def _svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    identity: Identity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    """Projects the caller owns (all projects for a lead)."""
    return await svc.list_projects(identity.user_id)


@router.post("", response_model=ProjectCreated)
async def create_project(
    body: ProjectCreate,
    identity: Identity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    project = await svc.create_project(
        caller_id=identity.user_id,
        title=body.title,
        description=body.description,
        status=body.status,
        progress=body.progress,
    )
    return ProjectCreated(id=project.id, message="Project created successfully")


@router.get("/stats", response_model=ProjectStats)
async def project_stats(
    identity: Identity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    """Status counts and average progress for the dashboard charts."""
    return await svc.stats(identity.user_id)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: ProjectId,
    identity: Identity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    project = await svc.get_project(project_id, identity.user_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.put("/{project_id}", response_model=MutationResponse)
async def update_project(
    project_id: ProjectId,
    body: ProjectUpdate,
    identity: Identity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    """Partial update — fields absent from the body are left alone."""
    result = await svc.update_project(
        project_id, identity.user_id, body.model_dump(exclude_unset=True)
    )
    return MutationResponse(message=_MESSAGES[("update", result)], result=result.value)


@router.delete("/{project_id}", response_model=MutationResponse)
async def delete_project(
    project_id: ProjectId,
    identity: Identity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    result = await svc.delete_project(project_id, identity.user_id)
    return MutationResponse(message=_MESSAGES[("delete", result)], result=result.value)
