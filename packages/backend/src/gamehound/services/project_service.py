"""Project service — ownership-scoped project repository.

Learn: Every query here is filtered by the caller:
- a regular caller only sees and mutates projects whose owner_id is
  their own user id
- a caller whose user row has role "lead" sees and mutates everything

The caller's role is read from the users table on each call (not from
the token), so promoting or demoting someone takes effect immediately.

Mutations on a project the caller cannot see do nothing and raise
nothing; they return MutationResult.NOT_FOUND_OR_NOT_OWNED so the API
can tell the client without revealing whether the id exists.
"""

import enum
from typing import Any, Optional

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gamehound.db.models import PROJECT_STATUSES, ROLE_LEAD, Project, Task, User
from gamehound.errors import ValidationError

logger = structlog.get_logger()

UPDATABLE_FIELDS = ("title", "description", "status", "progress")
# Columns that are NOT NULL — an explicit null in an update is ignored
_NON_NULLABLE = ("title", "status", "progress")


class MutationResult(str, enum.Enum):
    APPLIED = "applied"
    NOT_FOUND_OR_NOT_OWNED = "not_found_or_not_owned"


def _project_row(project: Project, owner_name: str) -> dict[str, Any]:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "status": project.status,
        "progress": project.progress,
        "owner_id": project.owner_id,
        "owner_name": owner_name,
        "created_at": project.created_at,
    }


class ProjectService:
    """Business logic for project CRUD, scoped to the calling user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Scoping ─────────────────────────────────────────

    async def is_lead(self, caller_id: int) -> bool:
        role = await self.db.scalar(select(User.role).where(User.id == caller_id))
        return role == ROLE_LEAD

    async def _scope(self, query, caller_id: int):
        """Restrict a SELECT on Project to what the caller may see."""
        if await self.is_lead(caller_id):
            return query
        return query.where(Project.owner_id == caller_id)

    async def _get_visible(self, project_id: int, caller_id: int) -> Optional[Project]:
        query = await self._scope(select(Project).where(Project.id == project_id), caller_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    # ─── Read ────────────────────────────────────────────

    async def list_projects(self, caller_id: int) -> list[dict[str, Any]]:
        """Projects visible to the caller, in storage order, with owner names."""
        query = (
            select(Project, User.name)
            .join(User, Project.owner_id == User.id)
            .order_by(Project.id)
        )
        query = await self._scope(query, caller_id)
        result = await self.db.execute(query)
        return [_project_row(project, owner_name) for project, owner_name in result.all()]

    async def get_project(self, project_id: int, caller_id: int) -> Optional[dict[str, Any]]:
        query = (
            select(Project, User.name)
            .join(User, Project.owner_id == User.id)
            .where(Project.id == project_id)
        )
        query = await self._scope(query, caller_id)
        row = (await self.db.execute(query)).first()
        if row is None:
            return None
        project, owner_name = row
        return _project_row(project, owner_name)

    async def stats(self, caller_id: int) -> dict[str, Any]:
        """Counts per status and mean progress over the caller's projects.

        Learn: This is the aggregate the dashboard's charts are drawn
        from. Unknown statuses (status is not validated) get their own
        bucket next to the three standard ones.
        """
        query = (
            select(Project.status, func.count(Project.id), func.sum(Project.progress))
            .group_by(Project.status)
        )
        query = await self._scope(query, caller_id)
        result = await self.db.execute(query)

        by_status = {status: 0 for status in PROJECT_STATUSES}
        total = 0
        progress_sum = 0
        for status, count, progress in result.all():
            by_status[status] = count
            total += count
            progress_sum += progress or 0

        return {
            "total": total,
            "by_status": by_status,
            "average_progress": round(progress_sum / total, 1) if total else 0.0,
        }

    # ─── Write ───────────────────────────────────────────

    async def create_project(
        self,
        caller_id: int,
        title: Optional[str],
        description: Optional[str] = None,
        status: Optional[str] = None,
        progress: Optional[int] = None,
    ) -> Project:
        """Create a project owned by the caller.

        Learn: status and progress are stored as given (no range check);
        only a missing title is rejected.
        """
        if not title:
            raise ValidationError("Title is required")

        project = Project(
            title=title,
            description=description,
            status=status or "active",
            progress=progress if progress is not None else 0,
            owner_id=caller_id,
        )
        self.db.add(project)
        await self.db.commit()

        logger.info("projects.created", project_id=project.id, owner_id=caller_id)
        return project

    async def update_project(
        self, project_id: int, caller_id: int, fields: dict[str, Any]
    ) -> MutationResult:
        """Apply a partial update if the caller owns the project (or is lead)."""
        changes = {
            k: v for k, v in fields.items()
            if k in UPDATABLE_FIELDS and not (v is None and k in _NON_NULLABLE)
        }
        if "title" in changes and not changes["title"]:
            raise ValidationError("Title cannot be empty")

        project = await self._get_visible(project_id, caller_id)
        if project is None:
            logger.info("projects.update_skipped", project_id=project_id, caller_id=caller_id)
            return MutationResult.NOT_FOUND_OR_NOT_OWNED

        for key, value in changes.items():
            setattr(project, key, value)
        await self.db.commit()

        logger.info("projects.updated", project_id=project_id, fields=sorted(changes))
        return MutationResult.APPLIED

    async def delete_project(self, project_id: int, caller_id: int) -> MutationResult:
        """Delete a project (and its tasks) if the caller owns it (or is lead)."""
        project = await self._get_visible(project_id, caller_id)
        if project is None:
            logger.info("projects.delete_skipped", project_id=project_id, caller_id=caller_id)
            return MutationResult.NOT_FOUND_OR_NOT_OWNED

        await self.db.execute(delete(Task).where(Task.project_id == project_id))
        await self.db.delete(project)
        await self.db.commit()

        logger.info("projects.deleted", project_id=project_id, caller_id=caller_id)
        return MutationResult.APPLIED
