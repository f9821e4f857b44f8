from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from app.schemas.common import ProjectSummary, TaskSummary, UserSummary, UTCDateTime


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: UTCDateTime
    description: str = Field("", max_length=2000)
    send_alert: bool = False
    project_id: Optional[str] = None
    task_id: Optional[str] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class EventResponse(BaseModel):
    id: str
    title: str
    date: datetime
    description: str = ""
    send_alert: bool = False
    # "event" for stored rows, "project-deadline" for read-time entries
    kind: str = "event"
    project: Optional[ProjectSummary] = None
    task: Optional[TaskSummary] = None
    created_by: Optional[UserSummary] = Field(None, validation_alias="creator")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
