"""
Оркестратор AI пайплайна.

Каждая операция начинается с проверки сессии, затем вызывает внешний
провайдер и передаёт результат в нормализатор или поисковый движок.
Состояния между вызовами нет.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Union
import logging
import uuid

from app.core.config import get_settings
from app.core.errors import InvalidInput, MalformedResponse, NotFound
from app.models.subtask import Subtask
from app.models.task import Task
from app.repositories.embedding_repository import EmbeddingRepository
from app.repositories.subtask_repository import SubtaskRepository
from app.repositories.task_repository import TaskRepository
from app.services.embedding_client import EmbeddingClient
from app.services.embedding_indexer import EmbeddingIndexer, EmbeddingOutcome
from app.services.llm_gateway import LLMGateway
from app.services.semantic_search import search
from app.services.session import SessionProvider
from app.services.subtask_normalizer import SubtaskNormalizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedTask:
    task: Task
    score: float


def _require_text(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(message)
    return text


def _parse_task_id(value: Union[uuid.UUID, str, None]) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID((value or "").strip())
    except (AttributeError, ValueError):
        return None


class AIPipelineService:
    def __init__(
        self,
        sessions: Optional[SessionProvider] = None,
        tasks: Optional[TaskRepository] = None,
        subtasks: Optional[SubtaskRepository] = None,
        embeddings: Optional[EmbeddingRepository] = None,
        indexer: Optional[EmbeddingIndexer] = None,
        gateway_factory: Callable[[], LLMGateway] = LLMGateway,
        embedding_client_factory: Callable[[], EmbeddingClient] = EmbeddingClient,
        normalizer: Optional[SubtaskNormalizer] = None,
    ):
        self.sessions = sessions or SessionProvider()
        self.tasks = tasks or TaskRepository()
        self.subtasks = subtasks or SubtaskRepository()
        self.embeddings = embeddings or EmbeddingRepository()
        self.indexer = indexer or EmbeddingIndexer(repo=self.embeddings)
        self.gateway_factory = gateway_factory
        self.embedding_client_factory = embedding_client_factory
        self.normalizer = normalizer or SubtaskNormalizer()

    async def generate_subtasks(self, token: Optional[str], task_title: Optional[str]) -> List[str]:
        """Подсказки подзадач. Ничего не сохраняет."""
        user_id = await self.sessions.require_user(token)
        title = _require_text(task_title, "Task title is required")

        gateway = self.gateway_factory()
        raw_text = await gateway.request_subtasks(title)

        try:
            suggestions = self.normalizer.normalize(raw_text)
        except MalformedResponse as e:
            # Сырой ответ только в логах: клиенту уходит общее сообщение
            logger.error(f"Не удалось разобрать ответ модели для пользователя {user_id}: {e}; raw={e.raw_text!r}")
            raise

        logger.info(f"Сгенерировано {len(suggestions)} подсказок для пользователя {user_id}")
        return suggestions

    async def save_suggestion(self, token: Optional[str], task_id: uuid.UUID, title: Optional[str]) -> Subtask:
        """
        Превращает подсказку в подзадачу. Идемпотентности нет:
        повторное сохранение той же строки создаёт вторую запись.
        """
        user_id = await self.sessions.require_user(token)
        text = _require_text(title, "Subtask title is required")

        task = await self.tasks.get_for_user(user_id, task_id)
        if task is None:
            raise NotFound(f"Task {task_id} not found")

        return await self.subtasks.create(user_id=user_id, task_id=task.id, title=text)

    async def refresh_embedding(
        self, token: Optional[str], task_id: Union[uuid.UUID, str, None], task_title: Optional[str] = None
    ) -> EmbeddingOutcome:
        """
        Обновляет эмбеддинг задачи. Ошибки провайдера и неверный id
        не пробрасываются, а возвращаются предупреждением в результате.
        """
        user_id = await self.sessions.require_user(token)
        parsed_id = _parse_task_id(task_id)
        if parsed_id is None:
            logger.warning(f"Эмбеддинг: неверный id задачи {task_id!r} от пользователя {user_id}")
            return EmbeddingOutcome(task_id=None, stored=False, warning="Invalid task id")

        task = await self.tasks.get_for_user(user_id, parsed_id)
        if task is None:
            logger.warning(f"Эмбеддинг: задача {task_id} не найдена у пользователя {user_id}")
            return EmbeddingOutcome(task_id=parsed_id, stored=False, warning="Task not found")

        text = (task_title or "").strip() or task.title
        return await self.indexer.refresh(task.id, text)

    async def smart_search(self, token: Optional[str], query: Optional[str]) -> List[RankedTask]:
        """Поиск по смыслу среди задач пользователя"""
        user_id = await self.sessions.require_user(token)
        text = _require_text(query, "Search query is required")
        settings = get_settings()

        # Ошибка эмбеддинга запроса прерывает поиск
        client = self.embedding_client_factory()
        query_embedding = await client.embed(text)

        candidates = await self.embeddings.candidates_for_user(user_id, query_embedding.model_version)
        hits = search(
            query_embedding.values,
            candidates,
            top_k=settings.search_top_k,
            min_similarity=settings.search_min_similarity,
        )
        if not hits:
            logger.info(f"Умный поиск: ничего не найдено для пользователя {user_id}")
            return []

        owned = {task.id: task for task in await self.tasks.get_many_for_user(user_id, [h.task_id for h in hits])}
        results = [RankedTask(task=owned[hit.task_id], score=hit.score) for hit in hits if hit.task_id in owned]

        logger.info(f"Умный поиск: {len(results)} результатов для пользователя {user_id}")
        return results
