from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.application import ApplicationResponse
from app.schemas.project import ProjectResponse


class UserListItem(BaseModel):
    id: str
    name: str
    lastname: str
    email: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class ProfileImageUpdate(BaseModel):
    """``null`` clears the image"""
    profile_image: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class DashboardResponse(BaseModel):
    users: List[UserListItem]
    projects: List[ProjectResponse]
    my_projects: List[ProjectResponse]
    applications: List[ApplicationResponse]
    my_applications: List[ApplicationResponse]
