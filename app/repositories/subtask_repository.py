from app.models.subtask import Subtask
from typing import Optional, List
import uuid


class SubtaskRepository:
    async def create(self, user_id: uuid.UUID, task_id: uuid.UUID, title: str) -> Subtask:
        # Без дедупликации: повторное сохранение создаёт новую строку
        return await Subtask.create(user_id=user_id, task_id=task_id, title=title)

    async def get_for_user(self, user_id: uuid.UUID, subtask_id: uuid.UUID) -> Optional[Subtask]:
        return await Subtask.filter(id=subtask_id, user_id=user_id).first()

    async def list_for_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> List[Subtask]:
        return await Subtask.filter(task_id=task_id, user_id=user_id).order_by("created_at").all()

    async def set_completed(self, subtask: Subtask, completed: bool) -> Subtask:
        subtask.completed = completed
        await subtask.save(update_fields=["completed"])
        return subtask

    async def delete(self, user_id: uuid.UUID, subtask_id: uuid.UUID) -> int:
        return await Subtask.filter(id=subtask_id, user_id=user_id).delete()
