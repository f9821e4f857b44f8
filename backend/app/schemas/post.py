from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime

from app.schemas.common import UserSummary


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)

    model_config = ConfigDict(str_strip_whitespace=True)


class CommentResponse(BaseModel):
    id: str
    content: str
    created_by: UserSummary = Field(validation_alias="creator")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    created_by: UserSummary = Field(validation_alias="creator")
    comments: List[CommentResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
