from app.models.task import Task
from typing import Optional, List, Iterable
import uuid


class TaskRepository:
    """Доступ к задачам. Все выборки ограничены владельцем."""

    async def create(self, user_id: uuid.UUID, *, title: str, priority: str, status: str) -> Task:
        return await Task.create(user_id=user_id, title=title, priority=priority, status=status)

    async def get_for_user(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Optional[Task]:
        return await Task.filter(id=task_id, user_id=user_id).first()

    async def get(self, task_id: uuid.UUID) -> Optional[Task]:
        return await Task.filter(id=task_id).first()

    async def list_for_user(self, user_id: uuid.UUID) -> List[Task]:
        return await Task.filter(user_id=user_id).order_by("-created_at").all()

    async def get_many_for_user(self, user_id: uuid.UUID, task_ids: Iterable[uuid.UUID]) -> List[Task]:
        ids = list(task_ids)
        if not ids:
            return []
        return await Task.filter(user_id=user_id, id__in=ids).all()

    async def update(self, task: Task, **changes) -> Task:
        task.update_from_dict(changes)
        await task.save()
        return task

    async def delete(self, user_id: uuid.UUID, task_id: uuid.UUID) -> int:
        # Подзадачи и эмбеддинг удаляются каскадом
        return await Task.filter(id=task_id, user_id=user_id).delete()
