from fastapi import APIRouter, Depends, Response, status
from typing import List, Optional
import uuid

from app.routers.deps import get_ai_pipeline, get_bearer_token, get_current_user_id, get_task_service
from app.schemas.task import SubtaskCreate, SubtaskOut, SubtaskUpdate, TaskCreate, TaskOut, TaskUpdate
from app.services.ai_pipeline import AIPipelineService
from app.services.task_service import TaskService

router = APIRouter()
subtasks_router = APIRouter()


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED, summary="Создание задачи")
async def create_task(payload: TaskCreate, user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    return await svc.create_task(user_id, payload)


@router.get("", response_model=List[TaskOut], summary="Список задач")
async def list_tasks(user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    return await svc.list_tasks(user_id)


@router.patch("/{task_id}", response_model=TaskOut, summary="Изменение задачи")
async def update_task(task_id: uuid.UUID, payload: TaskUpdate, user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    return await svc.update_task(user_id, task_id, payload)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Удаление задачи")
async def delete_task(task_id: uuid.UUID, user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    await svc.delete_task(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{task_id}/subtasks", response_model=List[SubtaskOut], summary="Подзадачи задачи")
async def list_subtasks(task_id: uuid.UUID, user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    return await svc.list_subtasks(user_id, task_id)


@router.post("/{task_id}/subtasks", response_model=SubtaskOut, status_code=status.HTTP_201_CREATED,
    summary="Сохранение подзадачи",
    description="Сохраняет введённую подзадачу или принятую подсказку. Повторный вызов создаёт ещё одну запись.",
)
async def save_subtask(
    task_id: uuid.UUID,
    payload: SubtaskCreate,
    token: Optional[str] = Depends(get_bearer_token),
    pipeline: AIPipelineService = Depends(get_ai_pipeline),
):
    return await pipeline.save_suggestion(token, task_id, payload.title)


@subtasks_router.patch("/{subtask_id}", response_model=SubtaskOut, summary="Отметка выполнения подзадачи")
async def update_subtask(subtask_id: uuid.UUID, payload: SubtaskUpdate, user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    return await svc.set_subtask_completed(user_id, subtask_id, payload.completed)


@subtasks_router.delete("/{subtask_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Удаление подзадачи")
async def delete_subtask(subtask_id: uuid.UUID, user_id: uuid.UUID = Depends(get_current_user_id), svc: TaskService = Depends(get_task_service)):
    await svc.delete_subtask(user_id, subtask_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
