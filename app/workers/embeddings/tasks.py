"""
Фоновое обновление эмбеддингов задач.
Запускается при создании задачи и смене её названия, UI результата не ждёт.
"""
import dramatiq
import logging
import uuid

from app.core.dramatiq_setup import broker
from app.core.db import init_db, close_db
from app.repositories.task_repository import TaskRepository
from app.services.embedding_indexer import EmbeddingIndexer, EmbeddingOutcome

logger = logging.getLogger(__name__)


async def _refresh_task_embedding_impl(task_id: str) -> EmbeddingOutcome | None:
    """
    Пересчитывает эмбеддинг по текущему названию задачи.

    Args:
        task_id: UUID задачи строкой (сообщения Dramatiq сериализуются в JSON)
    """
    task = await TaskRepository().get(uuid.UUID(task_id))
    if task is None:
        logger.info(f"Embeddings: задача {task_id} уже удалена, пропускаем")
        return None

    outcome = await EmbeddingIndexer().refresh(task.id, task.title)
    if outcome.warning:
        logger.warning(f"Embeddings: задача {task_id} без эмбеддинга: {outcome.warning}")
    return outcome


# Ретраев нет: повторная генерация произойдёт при следующем изменении задачи
@dramatiq.actor(broker=broker, max_retries=0)
async def refresh_task_embedding(task_id: str):
    # Инициализируем Tortoise ORM для воркера
    await init_db()
    try:
        await _refresh_task_embedding_impl(task_id)
    finally:
        await close_db()


def schedule_embedding_refresh(task_id: uuid.UUID) -> bool:
    """Ставит обновление в очередь. Ошибка брокера не должна ломать работу с задачей."""
    try:
        refresh_task_embedding.send(str(task_id))
        return True
    except Exception as e:
        logger.error(f"Embeddings: не удалось поставить задачу {task_id} в очередь: {e}")
        return False
