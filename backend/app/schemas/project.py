from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.models.project import ProjectType, MIN_CAPACITY, MAX_CAPACITY
from app.schemas.common import UserSummary, UTCDateTime


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    type: ProjectType = ProjectType.PROJECT
    capacity: Optional[int] = Field(None, ge=MIN_CAPACITY, le=MAX_CAPACITY)
    deadline: Optional[UTCDateTime] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class ProjectUpdate(BaseModel):
    """Partial update - only fields present in the body are applied"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    type: Optional[ProjectType] = None
    capacity: Optional[int] = Field(None, ge=MIN_CAPACITY, le=MAX_CAPACITY)
    deadline: Optional[UTCDateTime] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str
    type: ProjectType
    capacity: Optional[int] = None
    deadline: Optional[datetime] = None
    is_active: bool
    created_by: UserSummary = Field(validation_alias="creator")
    members: List[UserSummary] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProjectDeleteResponse(BaseModel):
    msg: str
    project_id: str
    deleted_tasks: int
    deleted_applications: int
    deleted_events: int


class ProjectReportResponse(BaseModel):
    msg: str
    pdf_url: str
    summary: Dict[str, Any]
