from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from app.models.application import ApplicationStatus
from app.schemas.common import ProjectSummary, UserSummary


class ApplicationCreate(BaseModel):
    project_id: str
    idea: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class ApplicationResponse(BaseModel):
    id: str
    idea: str
    description: str
    status: ApplicationStatus
    project: Optional[ProjectSummary] = None
    created_by: UserSummary = Field(validation_alias="creator")
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
