from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.schemas.chat import ChatRequest, ChatResponse
from app.modules.auth.dependencies import get_current_user
from app.services.assistant_service import AssistantService
from app.utils.assistant_client import AssistantClient, get_assistant_client

router = APIRouter()


@router.post("", response_model=ChatResponse)
async def chat(
    chat_request: ChatRequest,
    current_user: User = Depends(get_current_user),
    client: AssistantClient = Depends(get_assistant_client),
    db: AsyncSession = Depends(get_db)
):
    """
    Ask the assistant. Structured replies may create tasks (any user) or
    projects (admins); the outcome of each action is appended to the message.
    """
    return await AssistantService(db, client).chat(current_user, chat_request)
