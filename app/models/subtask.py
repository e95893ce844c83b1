from tortoise import fields, models
from tortoise.indexes import Index
import uuid

SUBTASK_TITLE_MAX_LENGTH = 500


class Subtask(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    task = fields.ForeignKeyField("models.Task", related_name="subtasks", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="subtasks", on_delete=fields.CASCADE)
    title = fields.CharField(max_length=SUBTASK_TITLE_MAX_LENGTH)
    completed = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "subtasks"
        indexes = [
            Index(fields=("task_id",), name="idx_subtask_task"),
        ]
