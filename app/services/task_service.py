from app.core.errors import NotFound
from app.models.subtask import Subtask
from app.models.task import Task
from app.repositories.subtask_repository import SubtaskRepository
from app.repositories.task_repository import TaskRepository
from app.schemas.task import TaskCreate, TaskUpdate
from app.workers.embeddings.tasks import schedule_embedding_refresh
from typing import Callable, List
import logging
import uuid

logger = logging.getLogger(__name__)


class TaskService:
    """CRUD задач и подзадач в рамках одного владельца"""

    def __init__(
        self,
        repo: TaskRepository,
        subtasks: SubtaskRepository,
        schedule_embedding: Callable[[uuid.UUID], bool] = schedule_embedding_refresh,
    ):
        self.repo = repo
        self.subtasks = subtasks
        self.schedule_embedding = schedule_embedding

    async def _get_owned(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        task = await self.repo.get_for_user(user_id, task_id)
        if task is None:
            raise NotFound(f"Task {task_id} not found")
        return task

    async def create_task(self, user_id: uuid.UUID, payload: TaskCreate) -> Task:
        task = await self.repo.create(
            user_id=user_id,
            title=payload.title.strip(),
            priority=payload.priority,
            status=payload.status,
        )
        logger.info(f"Создана задача {task.id} пользователя {user_id}")
        self.schedule_embedding(task.id)
        return task

    async def list_tasks(self, user_id: uuid.UUID) -> List[Task]:
        return await self.repo.list_for_user(user_id)

    async def update_task(self, user_id: uuid.UUID, task_id: uuid.UUID, payload: TaskUpdate) -> Task:
        task = await self._get_owned(user_id, task_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        title_changed = "title" in changes and changes["title"] != task.title

        if changes:
            task = await self.repo.update(task, **changes)
        if title_changed:
            self.schedule_embedding(task.id)
        return task

    async def delete_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> None:
        deleted = await self.repo.delete(user_id, task_id)
        if not deleted:
            raise NotFound(f"Task {task_id} not found")
        logger.info(f"Удалена задача {task_id} пользователя {user_id}")

    async def list_subtasks(self, user_id: uuid.UUID, task_id: uuid.UUID) -> List[Subtask]:
        await self._get_owned(user_id, task_id)
        return await self.subtasks.list_for_task(user_id, task_id)

    async def set_subtask_completed(self, user_id: uuid.UUID, subtask_id: uuid.UUID, completed: bool) -> Subtask:
        subtask = await self.subtasks.get_for_user(user_id, subtask_id)
        if subtask is None:
            raise NotFound(f"Subtask {subtask_id} not found")
        return await self.subtasks.set_completed(subtask, completed)

    async def delete_subtask(self, user_id: uuid.UUID, subtask_id: uuid.UUID) -> None:
        if not await self.subtasks.delete(user_id, subtask_id):
            raise NotFound(f"Subtask {subtask_id} not found")
