from tortoise import fields, models
import uuid

class User(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    email = fields.CharField(max_length=255, unique=True)
    display_name = fields.CharField(max_length=100, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    tasks: fields.ReverseRelation["Task"]
    sessions: fields.ReverseRelation["UserSession"]

    class Meta:
        table = "users"


class UserSession(models.Model):
    """Сессия, выданная внешним провайдером аутентификации. Токен передаётся как Bearer."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="sessions", on_delete=fields.CASCADE)
    token = fields.CharField(max_length=128, unique=True)
    expires_at = fields.DatetimeField(null=True)
    revoked = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "user_sessions"
