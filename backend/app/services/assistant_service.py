"""
Assistant Service - chat gateway to the completion API

Builds the system prompt from the caller's workspace snapshot, sends the
message, parses the structured reply and executes any requested actions
through the task and project services.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.modules.auth.permissions import Action, can
from app.schemas.chat import (
    ActionResult,
    ChatContext,
    ChatRequest,
    ChatResponse,
    CreateProjectAction,
    CreateTaskAction,
)
from app.schemas.project import ProjectCreate
from app.schemas.task import TaskCreate
from app.services.project_service import ProjectService
from app.services.task_service import TaskService
from app.utils.assistant_client import AssistantClient
from app.utils.response_parser import parse_assistant_reply
from app.core.exceptions import AssistantServiceError, ProjectPartnerError
from app.core.logging_config import logger
from app.core.types import as_naive_utc, utcnow


PRIORITIES = ("low", "medium", "high")

REPLY_CONTRACT = """Always answer with a single JSON object and nothing else:
{"message": "<your answer for the user>", "actions": []}

"actions" may contain, only when the user explicitly asks for it:
{"type": "create_task", "project_id": "<id from the projects list>", "name": "...", "description": "...", "priority": "low|medium|high", "deadline": "YYYY-MM-DD"}
{"type": "create_project", "name": "...", "description": "...", "project_type": "project|feature|bug/fix|other|task|application", "capacity": 5, "deadline": "YYYY-MM-DD"}

Leave "actions" empty when nothing should be created."""


def normalize_priority(value: Optional[str]) -> str:
    """low/medium/high, anything else becomes medium"""
    value = (value or "").strip().lower()
    return value if value in PRIORITIES else "medium"


def _parse_deadline(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return as_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def compute_quick_stats(context: ChatContext, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or utcnow()
    open_tasks = [t for t in context.tasks if t.get("status") != "completed"]
    overdue = 0
    for task in open_tasks:
        deadline = _parse_deadline(task.get("deadline"))
        if deadline and deadline < now:
            overdue += 1
    return {
        "projects": len(context.projects),
        "active_tasks": len(open_tasks),
        "pending_applications": sum(1 for a in context.applications if a.get("status") == "pending"),
        "overdue_tasks": overdue,
        "today": now.strftime("%Y-%m-%d"),
    }


def _first_error(error: PydanticValidationError) -> str:
    err = error.errors()[0]
    location = ".".join(str(part) for part in err.get("loc", ()))
    return f"{location}: {err.get('msg')}" if location else err.get("msg", "invalid value")


class AssistantService:

    def __init__(self, db: AsyncSession, client: AssistantClient):
        self.db = db
        self.client = client

    def build_system_prompt(self, user: User, context: ChatContext) -> str:
        stats = compute_quick_stats(context)
        role = "an administrator" if user.is_admin else "a team member"
        return "\n\n".join([
            "You are ProjectPartner, an assistant that helps a team manage projects, "
            f"tasks and applications. You are talking to {user.name} {user.lastname}, {role}.",
            f"Projects:\n{json.dumps(context.projects, default=str)}",
            f"Tasks:\n{json.dumps(context.tasks, default=str)}",
            f"Applications:\n{json.dumps(context.applications, default=str)}",
            "Quick stats:\n"
            f"- Projects: {stats['projects']}\n"
            f"- Active tasks: {stats['active_tasks']}\n"
            f"- Pending applications: {stats['pending_applications']}\n"
            f"- Overdue tasks: {stats['overdue_tasks']}\n"
            f"- Today: {stats['today']}",
            REPLY_CONTRACT,
        ])

    async def chat(self, user: User, request: ChatRequest) -> ChatResponse:
        system_prompt = self.build_system_prompt(user, request.context)

        try:
            result = await self.client.generate(prompt=request.message, system_prompt=system_prompt)
        except Exception as e:
            logger.log_error_with_context(e, context="assistant_generate")
            raise AssistantServiceError() from e

        reply = parse_assistant_reply(result.get("content", ""))

        results: List[ActionResult] = []
        for action in reply.actions:
            if isinstance(action, CreateTaskAction):
                results.append(await self._create_task(user, action))
            else:
                results.append(await self._create_project(user, action))

        message = reply.message
        if results:
            lines = [("✅ " if r.success else "❌ ") + r.detail for r in results]
            message = f"{message}\n\n" + "\n".join(lines)

        logger.log_assistant_event(
            "chat",
            tokens_used=result.get("total_tokens", 0),
            actions_requested=len(results),
            actions_succeeded=sum(1 for r in results if r.success),
        )
        return ChatResponse(message=message, actions=results, success=True)

    async def _create_task(self, user: User, action: CreateTaskAction) -> ActionResult:
        try:
            data = TaskCreate(
                project_id=action.project_id,
                name=action.name,
                description=action.description or "",
                priority=normalize_priority(action.priority),
                deadline=action.deadline or None,
            )
        except PydanticValidationError as e:
            return ActionResult(type=action.type, success=False, detail=f"Task not created ({_first_error(e)})")

        try:
            task = await TaskService(self.db).create_task(user, data)
        except ProjectPartnerError as e:
            return ActionResult(type=action.type, success=False, detail=f"Task not created: {e.message}")

        return ActionResult(type=action.type, success=True, detail=f"Task '{task.name}' created", id=task.id)

    async def _create_project(self, user: User, action: CreateProjectAction) -> ActionResult:
        if not can(user, Action.PROJECT_MANAGE):
            return ActionResult(
                type=action.type,
                success=False,
                detail="Project not created: only administrators can create projects"
            )

        try:
            data = ProjectCreate(
                name=action.name,
                description=action.description,
                type=action.project_type or "project",
                capacity=action.capacity,
                deadline=action.deadline or None,
            )
        except PydanticValidationError as e:
            return ActionResult(type=action.type, success=False, detail=f"Project not created ({_first_error(e)})")

        project = await ProjectService(self.db).create_project(user, data)
        return ActionResult(type=action.type, success=True, detail=f"Project '{project.name}' created", id=project.id)
