from fastapi import APIRouter, Depends
from typing import Optional

from app.routers.deps import get_ai_pipeline, get_bearer_token
from app.schemas.ai import (
    GenerateSubtasksRequest,
    GenerateSubtasksResponse,
    SearchResultOut,
    SmartSearchRequest,
    SmartSearchResponse,
    TaskEmbeddingRequest,
    TaskEmbeddingResponse,
)
from app.schemas.task import TaskOut
from app.services.ai_pipeline import AIPipelineService

router = APIRouter()


@router.post("/generate-subtasks",
    response_model=GenerateSubtasksResponse,
    summary="Генерация подзадач",
    description="Просит модель разбить задачу на подзадачи. Подсказки не сохраняются.",
)
async def generate_subtasks(
    payload: GenerateSubtasksRequest,
    token: Optional[str] = Depends(get_bearer_token),
    pipeline: AIPipelineService = Depends(get_ai_pipeline),
):
    subtasks = await pipeline.generate_subtasks(token, payload.task_title)
    return GenerateSubtasksResponse(subtasks=subtasks)


@router.post("/generate-task-embedding",
    response_model=TaskEmbeddingResponse,
    summary="Обновление эмбеддинга задачи",
    description="Best-effort: ошибка провайдера возвращается как warning со статусом 200.",
)
async def generate_task_embedding(
    payload: TaskEmbeddingRequest,
    token: Optional[str] = Depends(get_bearer_token),
    pipeline: AIPipelineService = Depends(get_ai_pipeline),
):
    outcome = await pipeline.refresh_embedding(token, payload.task_id, payload.task_title)
    return TaskEmbeddingResponse(
        stored=outcome.stored,
        warning=outcome.warning,
        task_id=outcome.task_id,
        model=outcome.model_version,
    )


@router.post("/smart-search",
    response_model=SmartSearchResponse,
    summary="Умный поиск",
    description="Поиск задач пользователя по смыслу запроса, по убыванию сходства.",
)
async def smart_search(
    payload: SmartSearchRequest,
    token: Optional[str] = Depends(get_bearer_token),
    pipeline: AIPipelineService = Depends(get_ai_pipeline),
):
    ranked = await pipeline.smart_search(token, payload.query)
    results = [
        SearchResultOut(**TaskOut.model_validate(item.task).model_dump(), score=item.score)
        for item in ranked
    ]
    return SmartSearchResponse(results=results)
