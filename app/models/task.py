from enum import Enum
from tortoise import fields, models
from tortoise.indexes import Index
import uuid


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Task(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="tasks", on_delete=fields.CASCADE)
    title = fields.CharField(max_length=255)
    priority = fields.CharEnumField(TaskPriority, max_length=20, default=TaskPriority.MEDIUM)
    status = fields.CharEnumField(TaskStatus, max_length=20, default=TaskStatus.PENDING)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    subtasks: fields.ReverseRelation["Subtask"]
    embedding: fields.BackwardOneToOneRelation["TaskEmbedding"]

    class Meta:
        table = "tasks"
        indexes = [
            Index(fields=("user_id",), name="idx_task_user"),
            Index(fields=("created_at",), name="idx_task_created"),
        ]
