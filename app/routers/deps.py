from fastapi import Depends, Header
from typing import Optional
import uuid

from app.repositories.subtask_repository import SubtaskRepository
from app.repositories.task_repository import TaskRepository
from app.services.ai_pipeline import AIPipelineService
from app.services.session import SessionProvider, parse_bearer
from app.services.task_service import TaskService


async def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    return parse_bearer(authorization)


async def get_session_provider() -> SessionProvider:
    return SessionProvider()


async def get_current_user_id(
    token: Optional[str] = Depends(get_bearer_token),
    sessions: SessionProvider = Depends(get_session_provider),
) -> uuid.UUID:
    return await sessions.require_user(token)


async def get_ai_pipeline() -> AIPipelineService:
    return AIPipelineService()


async def get_task_service() -> TaskService:
    return TaskService(TaskRepository(), SubtaskRepository())
