"""
Запись эмбеддингов задач.

Эмбеддинг - обогащение, а не требование: любая ошибка превращается в
предупреждение в EmbeddingOutcome и логируется, исключение наружу не уходит.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import uuid

from app.core.errors import PipelineError
from app.repositories.embedding_repository import EmbeddingRepository
from app.services.embedding_client import EmbeddingClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddingOutcome:
    task_id: Optional[uuid.UUID]
    stored: bool
    warning: Optional[str] = None
    model_version: Optional[str] = None
    dimensions: Optional[int] = None


def write_path_client() -> EmbeddingClient:
    # На пути записи ретраи не делаем: обратная связь о создании задачи важнее
    return EmbeddingClient(max_retries=0)


class EmbeddingIndexer:
    def __init__(
        self,
        repo: Optional[EmbeddingRepository] = None,
        client_factory: Callable[[], EmbeddingClient] = write_path_client,
    ):
        self.repo = repo or EmbeddingRepository()
        self.client_factory = client_factory

    async def refresh(self, task_id: uuid.UUID, text: str) -> EmbeddingOutcome:
        """Генерирует вектор для текста задачи и заменяет текущую запись"""
        try:
            client = self.client_factory()
            embedding = await client.embed(text)
            await self.repo.upsert(task_id, embedding.values, embedding.model_version)
        except PipelineError as e:
            logger.warning(f"Эмбеддинг задачи {task_id} не обновлён: {e}")
            return EmbeddingOutcome(task_id=task_id, stored=False, warning=e.public_message)
        except Exception as e:
            logger.exception(f"Непредвиденная ошибка при обновлении эмбеддинга задачи {task_id}: {e}")
            return EmbeddingOutcome(task_id=task_id, stored=False, warning="Embedding could not be stored")

        logger.info(f"Эмбеддинг задачи {task_id} обновлён ({embedding.dimensions} измерений, {embedding.model_version})")
        return EmbeddingOutcome(
            task_id=task_id,
            stored=True,
            model_version=embedding.model_version,
            dimensions=embedding.dimensions,
        )
