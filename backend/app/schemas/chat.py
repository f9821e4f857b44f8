from pydantic import BaseModel, Field, ConfigDict
from typing import Annotated, Any, Dict, List, Literal, Optional, Union


class ChatContext(BaseModel):
    """Client-supplied snapshot of the caller's workspace"""
    projects: List[Dict[str, Any]] = []
    tasks: List[Dict[str, Any]] = []
    applications: List[Dict[str, Any]] = []


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    context: ChatContext = Field(default_factory=ChatContext)

    model_config = ConfigDict(str_strip_whitespace=True)


# Reply contract. Field values are re-validated against the task/project
# schemas when the action is executed.

class CreateTaskAction(BaseModel):
    type: Literal["create_task"]
    project_id: str
    name: str
    description: str = ""
    priority: Optional[str] = None
    deadline: Optional[str] = None


class CreateProjectAction(BaseModel):
    type: Literal["create_project"]
    name: str
    description: str
    project_type: Optional[str] = None
    capacity: Optional[int] = None
    deadline: Optional[str] = None


AssistantAction = Annotated[
    Union[CreateTaskAction, CreateProjectAction],
    Field(discriminator="type"),
]


class AssistantReply(BaseModel):
    message: str
    actions: List[AssistantAction] = []


class ActionResult(BaseModel):
    type: str
    success: bool
    detail: str
    id: Optional[str] = None


class ChatResponse(BaseModel):
    message: str
    actions: List[ActionResult] = []
    success: bool = True
