import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.repositories.task_repository import TaskRepository
from app.services.embedding_indexer import EmbeddingOutcome
from app.workers.embeddings.tasks import (
    _refresh_task_embedding_impl,
    refresh_task_embedding,
    schedule_embedding_refresh,
)


@pytest.mark.database
class TestRefreshTaskEmbeddingActor:

    @pytest.mark.asyncio
    async def test_embeds_current_title(self, make_user):
        user, _ = await make_user()
        task = await TaskRepository().create(user.id, title="Call John", priority="low", status="pending")
        indexer = MagicMock()
        indexer.refresh = AsyncMock(return_value=EmbeddingOutcome(task_id=task.id, stored=True))

        with patch("app.workers.embeddings.tasks.EmbeddingIndexer", return_value=indexer):
            outcome = await _refresh_task_embedding_impl(str(task.id))

        assert outcome.stored is True
        indexer.refresh.assert_awaited_once_with(task.id, "Call John")

    @pytest.mark.asyncio
    async def test_deleted_task_is_skipped(self, db):
        with patch("app.workers.embeddings.tasks.EmbeddingIndexer") as indexer_cls:
            assert await _refresh_task_embedding_impl(str(uuid.uuid4())) is None
        indexer_cls.assert_not_called()


class TestScheduleEmbeddingRefresh:

    def test_enqueues_message(self):
        with patch.object(refresh_task_embedding, "send") as send:
            task_id = uuid.uuid4()
            assert schedule_embedding_refresh(task_id) is True
        send.assert_called_once_with(str(task_id))

    def test_broker_failure_is_swallowed(self):
        with patch.object(refresh_task_embedding, "send", side_effect=ConnectionError("redis down")):
            assert schedule_embedding_refresh(uuid.uuid4()) is False

    def test_actor_has_no_retries(self):
        assert refresh_task_embedding.options.get("max_retries") == 0
