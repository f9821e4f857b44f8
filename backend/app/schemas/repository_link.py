from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime

from app.schemas.common import UserSummary


class RepositoryLinkCreate(BaseModel):
    github_url: str = Field(..., min_length=1, max_length=200)

    model_config = ConfigDict(str_strip_whitespace=True)


class RepositoryLinkResponse(BaseModel):
    id: str
    github_url: str = Field(validation_alias="url")
    created_by: UserSummary = Field(validation_alias="creator")
    members: List[UserSummary] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
