from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, projects, applications, tasks, calendar, posts, repositories, chat

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
api_router.include_router(posts.router, prefix="/posts", tags=["Posts"])
api_router.include_router(repositories.router, prefix="/githubs", tags=["Repositories"])
api_router.include_router(chat.router, prefix="/chat", tags=["Assistant"])
