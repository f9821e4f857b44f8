"""Shared schema pieces: summaries of referenced records and datetime normalization"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict

from app.core.types import as_naive_utc


# Incoming datetimes are stored as naive UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_naive_utc)]


class UserSummary(BaseModel):
    id: str
    name: str
    lastname: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ProjectSummary(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ApplicationSummary(BaseModel):
    id: str
    idea: str

    model_config = ConfigDict(from_attributes=True)


class TaskSummary(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    msg: str
    id: Optional[str] = None
