from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from app.models.task import TaskPriority, TaskStatus
from app.schemas.common import ApplicationSummary, ProjectSummary, UserSummary, UTCDateTime


class TaskCreate(BaseModel):
    project_id: str
    name: str = Field(..., min_length=1, max_length=200)
    application_id: Optional[str] = None
    description: str = Field("", max_length=5000)
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: Optional[UTCDateTime] = None
    assignee_id: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class TaskUpdate(BaseModel):
    """Partial update - only fields present in the body are applied"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    deadline: Optional[UTCDateTime] = None
    assignee_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class TaskResponse(BaseModel):
    id: str
    name: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    deadline: Optional[datetime] = None
    is_archived: bool
    archived_at: Optional[datetime] = None
    project: Optional[ProjectSummary] = None
    application: Optional[ApplicationSummary] = None
    created_by: UserSummary = Field(validation_alias="creator")
    assignee: Optional[UserSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
