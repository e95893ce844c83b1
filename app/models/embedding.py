from tortoise import fields, models
from tortoise.indexes import Index
import uuid


class TaskEmbedding(models.Model):
    """
    Текущий вектор задачи. Одна запись на задачу: новая генерация
    перезаписывает запись, удаление задачи удаляет её каскадом.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    task = fields.OneToOneField("models.Task", related_name="embedding", on_delete=fields.CASCADE)
    vector = fields.JSONField()  # list[float]
    dimensions = fields.IntField()
    model_version = fields.CharField(max_length=100)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "task_embeddings"
        indexes = [
            Index(fields=("model_version",), name="idx_embedding_model"),
        ]
