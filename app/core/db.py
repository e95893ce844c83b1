from tortoise import Tortoise
from app.core.config import get_settings

MODEL_MODULES = [
    "app.models.user",
    "app.models.task",
    "app.models.subtask",
    "app.models.embedding",
]


def get_tortoise_config(db_url: str | None = None) -> dict:
    settings = get_settings()
    return {
        "connections": {"default": db_url or settings.db_url},
        "apps": {
            "models": {
                "models": [*MODEL_MODULES, "aerich.models"],
                "default_connection": "default",
            }
        },
    }


# Используется aerich (см. [tool.aerich] в pyproject.toml)
TORTOISE_ORM = get_tortoise_config()


async def init_db() -> None:
    settings = get_settings()
    await Tortoise.init(config=get_tortoise_config())
    # В проде схемой управляют миграции aerich
    if settings.db_generate_schemas:
        await Tortoise.generate_schemas()


async def close_db() -> None:
    await Tortoise.close_connections()
