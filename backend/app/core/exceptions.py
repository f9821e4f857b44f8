"""
Custom Exceptions for ProjectPartner
====================================

Services raise these instead of HTTPException so the same operation can be
reused outside a request (the assistant executes task/project creation
through the services). The handlers in app.main turn them into
``{"msg": ..., "code": ...}`` JSON responses with the right status code.

Usage:
    from app.core.exceptions import ProjectNotFoundError, MembershipError

    if not project:
        raise ProjectNotFoundError(project_id)

    if len(project.members) >= project.capacity:
        raise MembershipError("Project is full", code="PROJECT_FULL")
"""

from typing import Optional, Any, Dict


class ProjectPartnerError(Exception):
    """Base exception for all ProjectPartner errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"msg": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ProjectPartnerError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", code: str = "AUTH_FAILED"):
        super().__init__(message, code=code)


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password - deliberately indistinguishable"""

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class InvalidTokenError(AuthenticationError):
    """JWT token is missing, malformed, expired or of the wrong type"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class AuthorizationError(ProjectPartnerError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized", action: Optional[str] = None):
        super().__init__(message, code="NOT_AUTHORIZED", details={"action": action} if action else None)


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(ProjectPartnerError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class ProjectNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class ApplicationNotFoundError(ResourceNotFoundError):
    def __init__(self, application_id: str):
        super().__init__("Application", application_id)


class TaskNotFoundError(ResourceNotFoundError):
    def __init__(self, task_id: str):
        super().__init__("Task", task_id)


class EventNotFoundError(ResourceNotFoundError):
    def __init__(self, event_id: str):
        super().__init__("Event", event_id)


class PostNotFoundError(ResourceNotFoundError):
    def __init__(self, post_id: str):
        super().__init__("Post", post_id)


class CommentNotFoundError(ResourceNotFoundError):
    def __init__(self, comment_id: str):
        super().__init__("Comment", comment_id)


# ============================================
# Validation / Conflict Errors (400-type)
# ============================================

class ValidationError(ProjectPartnerError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConflictError(ProjectPartnerError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, code=code)


class MembershipError(ProjectPartnerError):
    """Join/leave/approve rejected by the membership rules"""

    status_code = 400

    def __init__(self, message: str, code: str = "MEMBERSHIP_ERROR", project_id: Optional[str] = None):
        super().__init__(message, code=code, details={"project_id": project_id} if project_id else None)


# ============================================
# Report Errors
# ============================================

class ReportGenerationError(ProjectPartnerError):
    """Rendering the project closure report failed"""

    def __init__(self, message: str = "Report generation failed", project_id: Optional[str] = None):
        super().__init__(
            message,
            code="REPORT_GENERATION_FAILED",
            details={"project_id": project_id} if project_id else None
        )


# ============================================
# Assistant Errors
# ============================================

class AssistantServiceError(ProjectPartnerError):
    """Upstream completion API call failed"""

    def __init__(self, message: str = "Error processing AI request"):
        super().__init__(message, code="AI_SERVICE_ERROR")


class AssistantUnavailableError(ProjectPartnerError):
    """No completion API key configured"""

    status_code = 503

    def __init__(self):
        super().__init__("AI assistant is not configured", code="AI_NOT_CONFIGURED")
