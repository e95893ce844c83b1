from app.models.embedding import TaskEmbedding
from app.services.semantic_search import EmbeddingCandidate
from tortoise.exceptions import IntegrityError
from typing import List, Sequence
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)


class EmbeddingRepository:
    async def upsert(self, task_id: uuid.UUID, vector: Sequence[float], model_version: str) -> TaskEmbedding:
        """
        Заменяет текущий вектор задачи. Конкурентные вызовы разрешаются
        по принципу last-write-wins.
        """
        values = [float(v) for v in vector]
        fields = {"vector": values, "dimensions": len(values), "model_version": model_version}

        updated = await TaskEmbedding.filter(task_id=task_id).update(**fields, updated_at=datetime.now(timezone.utc))
        if updated:
            return await TaskEmbedding.get(task_id=task_id)

        try:
            return await TaskEmbedding.create(task_id=task_id, **fields)
        except IntegrityError:
            # Параллельный запрос успел создать запись - перезаписываем её
            logger.debug(f"Гонка при создании эмбеддинга задачи {task_id}, обновляем")
            await TaskEmbedding.filter(task_id=task_id).update(**fields, updated_at=datetime.now(timezone.utc))
            return await TaskEmbedding.get(task_id=task_id)

    async def candidates_for_user(self, user_id: uuid.UUID, model_version: str) -> List[EmbeddingCandidate]:
        """Векторы задач владельца, построенные текущей версией модели"""
        rows = await TaskEmbedding.filter(
            task__user_id=user_id, model_version=model_version
        ).select_related("task")
        return [
            EmbeddingCandidate(task_id=row.task.id, vector=row.vector, created_at=row.task.created_at)
            for row in rows
        ]
