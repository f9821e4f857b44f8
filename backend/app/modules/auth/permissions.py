"""
Authorization policy.

Every ownership or role gated route asks ``ensure_can(actor, action, resource)``
instead of comparing ids inline. Admins pass every check except deleting
someone else's post or comment.
"""
import enum
from typing import Any, Callable, Dict, Optional

from app.core.exceptions import AuthorizationError


class Action(str, enum.Enum):
    PROJECT_MANAGE = "project:manage"
    APPLICATION_DECIDE = "application:decide"
    TASK_QUERY_ANY = "task:query_any"
    TASK_UPDATE = "task:update"
    TASK_ARCHIVE = "task:archive"
    TASK_DELETE = "task:delete"
    EVENT_DELETE = "event:delete"
    POST_DELETE = "post:delete"
    COMMENT_DELETE = "comment:delete"


def _same(a: Any, b: Any) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def _is_owner(actor, resource) -> bool:
    return _same(getattr(resource, "created_by_id", None), actor.id)


def _works_on_task(actor, task) -> bool:
    if _is_owner(actor, task) or _same(task.assignee_id, actor.id):
        return True
    project = task.project
    return project is not None and project.has_member(actor.id)


def _admin_only(actor, resource) -> bool:
    return False


_POLICY: Dict[Action, Callable[[Any, Any], bool]] = {
    Action.PROJECT_MANAGE: _admin_only,
    Action.APPLICATION_DECIDE: _admin_only,
    Action.TASK_QUERY_ANY: _admin_only,
    Action.TASK_UPDATE: _works_on_task,
    Action.TASK_ARCHIVE: _works_on_task,
    Action.TASK_DELETE: _is_owner,
    Action.EVENT_DELETE: _is_owner,
    Action.POST_DELETE: _is_owner,
    Action.COMMENT_DELETE: _is_owner,
}

# Authorship is required even for admins
_NO_ADMIN_OVERRIDE = {Action.POST_DELETE, Action.COMMENT_DELETE}

_DENIED_MESSAGES = {
    Action.PROJECT_MANAGE: "Only administrators can manage projects",
    Action.APPLICATION_DECIDE: "Only administrators can decide applications",
    Action.TASK_QUERY_ANY: "Only administrators can query other users' tasks",
    Action.TASK_UPDATE: "Only project members can update this task",
    Action.TASK_ARCHIVE: "Only project members can archive this task",
    Action.TASK_DELETE: "Only the task creator or an admin can delete this task",
    Action.EVENT_DELETE: "Only owner or admin can delete event",
    Action.POST_DELETE: "Only the author can delete this post",
    Action.COMMENT_DELETE: "Only the author can delete this comment",
}


def can(actor, action: Action, resource: Optional[Any] = None) -> bool:
    """Can ``actor`` (a User) perform ``action`` on ``resource``?"""
    if actor is None:
        return False
    if actor.is_admin and action not in _NO_ADMIN_OVERRIDE:
        return True
    return _POLICY[action](actor, resource)


def ensure_can(actor, action: Action, resource: Optional[Any] = None) -> None:
    """Raise AuthorizationError (403) unless ``can`` allows the action"""
    if not can(actor, action, resource):
        raise AuthorizationError(_DENIED_MESSAGES[action], action=action.value)
