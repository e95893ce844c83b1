import os
import sys

import pytest
import pytest_asyncio

# Тесты не должны ходить в Redis, Postgres и к провайдеру
os.environ.setdefault("DRAMATIQ_BROKER", "stub")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

# Корень проекта и папка с моками в пути Python
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
sys.path.insert(0, os.path.dirname(__file__))

from app.core.config import reset_settings  # noqa: E402
from app.core.logging_config import setup_test_logging  # noqa: E402

setup_test_logging("DEBUG")


def pytest_configure(config):
    """Регистрируем кастомные маркеры"""
    config.addinivalue_line(
        "markers", "database: marks tests that use the in-memory database"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that wire several layers together"
    )


@pytest.fixture
def settings_env(monkeypatch):
    """Переопределение настроек через переменные окружения на время теста"""
    def apply(**values):
        for key, value in values.items():
            if value is None:
                monkeypatch.delenv(key.upper(), raising=False)
            else:
                monkeypatch.setenv(key.upper(), str(value))
        reset_settings()

    yield apply
    reset_settings()


@pytest_asyncio.fixture
async def db():
    """SQLite в памяти со свежей схемой на каждый тест"""
    from tortoise import Tortoise
    from app.core.db import MODEL_MODULES

    await Tortoise.init(db_url="sqlite://:memory:", modules={"models": MODEL_MODULES})
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def make_user(db):
    """Создаёт пользователя с активной сессией, возвращает (user, token)"""
    from app.repositories.user_repository import SessionRepository, UserRepository

    users = UserRepository()
    sessions = SessionRepository()
    counter = {"n": 0}

    async def factory(email: str | None = None):
        counter["n"] += 1
        user = await users.create(email=email or f"user{counter['n']}@example.com")
        session = await sessions.create(user.id)
        return user, session.token

    return factory
