# API endpoints
from . import auth, users, projects, applications, tasks, calendar, posts, repositories, chat

__all__ = ["auth", "users", "projects", "applications", "tasks", "calendar", "posts", "repositories", "chat"]
