import uuid
from unittest.mock import Mock

import pytest

from app.core.errors import NotFound
from app.models.task import TaskPriority, TaskStatus
from app.repositories.subtask_repository import SubtaskRepository
from app.repositories.task_repository import TaskRepository
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.task_service import TaskService


@pytest.fixture
def scheduler():
    return Mock(return_value=True)


@pytest.fixture
def service(scheduler):
    return TaskService(TaskRepository(), SubtaskRepository(), schedule_embedding=scheduler)


@pytest.mark.database
class TestTaskService:

    @pytest.mark.asyncio
    async def test_create_schedules_embedding(self, make_user, service, scheduler):
        user, _ = await make_user()

        task = await service.create_task(user.id, TaskCreate(title="  Call John ", priority="high"))

        assert task.title == "Call John"
        assert task.priority == TaskPriority.HIGH
        assert task.status == TaskStatus.PENDING
        scheduler.assert_called_once_with(task.id)

    @pytest.mark.asyncio
    async def test_title_change_reschedules_embedding(self, make_user, service, scheduler):
        user, _ = await make_user()
        task = await service.create_task(user.id, TaskCreate(title="Call John"))
        scheduler.reset_mock()

        await service.update_task(user.id, task.id, TaskUpdate(status="done"))
        scheduler.assert_not_called()

        await service.update_task(user.id, task.id, TaskUpdate(title="Call John"))
        scheduler.assert_not_called()

        updated = await service.update_task(user.id, task.id, TaskUpdate(title="Email John"))
        assert updated.title == "Email John"
        assert updated.status == TaskStatus.DONE
        scheduler.assert_called_once_with(task.id)

    @pytest.mark.asyncio
    async def test_scheduler_failure_does_not_block_creation(self, make_user):
        user, _ = await make_user()
        service = TaskService(TaskRepository(), SubtaskRepository(), schedule_embedding=Mock(return_value=False))

        task = await service.create_task(user.id, TaskCreate(title="Buy groceries"))

        assert task.id is not None

    @pytest.mark.asyncio
    async def test_foreign_task_operations(self, make_user, service):
        owner, _ = await make_user()
        other, _ = await make_user()
        task = await service.create_task(owner.id, TaskCreate(title="Mine"))

        with pytest.raises(NotFound):
            await service.update_task(other.id, task.id, TaskUpdate(title="Hacked"))
        with pytest.raises(NotFound):
            await service.delete_task(other.id, task.id)
        with pytest.raises(NotFound):
            await service.list_subtasks(other.id, task.id)

    @pytest.mark.asyncio
    async def test_subtask_lifecycle(self, make_user, service):
        user, _ = await make_user()
        task = await service.create_task(user.id, TaskCreate(title="Bake bread"))
        subtask = await SubtaskRepository().create(user.id, task.id, "Buy flour")

        done = await service.set_subtask_completed(user.id, subtask.id, True)
        assert done.completed is True
        assert [s.id for s in await service.list_subtasks(user.id, task.id)] == [subtask.id]

        await service.delete_subtask(user.id, subtask.id)
        assert await service.list_subtasks(user.id, task.id) == []
        with pytest.raises(NotFound):
            await service.delete_subtask(user.id, subtask.id)
        with pytest.raises(NotFound):
            await service.set_subtask_completed(user.id, uuid.uuid4(), True)
