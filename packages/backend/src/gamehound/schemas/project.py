"""Pydantic schemas for projects.

Learn: Separate "Create"/"Update" schemas (input) from "Read" schemas
(output). status and progress are accepted as given — the dashboard
owns presentation, the API does not range-check them. Integers are only
bounded to what an INTEGER column can hold.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

StoredInt = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class ProjectCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[StoredInt] = None


class ProjectUpdate(BaseModel):
    """Partial update — only fields present in the body are written."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[StoredInt] = None


class ProjectRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: str
    progress: int
    owner_id: int
    owner_name: str
    created_at: datetime


class ProjectCreated(BaseModel):
    id: int
    message: str


class MutationResponse(BaseModel):
    """Update/delete outcome.

    result is "applied" or "not_found_or_not_owned"; both are 200.
    """
    message: str
    result: str


class ProjectStats(BaseModel):
    total: int
    by_status: dict[str, int]
    average_progress: float
