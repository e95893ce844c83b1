"""
Интеграция с Dramatiq для фоновой обработки.
Брокер - Redis в бою, StubBroker в тестах (DRAMATIQ_BROKER=stub).
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import CurrentMessage
from dramatiq.middleware.asyncio import AsyncIO
import logging
from app.core.config import get_settings

logger = logging.getLogger(__name__)

_broker = None


def get_broker() -> dramatiq.Broker:
    """Получить брокер с ленивой инициализацией"""
    global _broker
    if _broker is None:
        settings = get_settings()
        if settings.dramatiq_broker == "stub":
            _broker = StubBroker()
            logger.info("Dramatiq инициализирован со StubBroker")
        else:
            _broker = RedisBroker(
                host=settings.redis_host,
                port=settings.redis_port,
                db=settings.redis_db,
                password=settings.redis_password if settings.redis_password else None
            )
            logger.info(f"Dramatiq инициализирован с Redis брокером: {settings.redis_host}:{settings.redis_port}")

        _broker.add_middleware(AsyncIO())
        _broker.add_middleware(CurrentMessage())
        dramatiq.set_broker(_broker)

    return _broker


class _LazyBroker:
    """Откладывает создание брокера до первого обращения (объявления актора)."""
    _instance = None

    def __str__(self):
        return str(self._instance) if self._instance else "<uninitialized broker>"

    def __getattr__(self, name):
        if self._instance is None:
            self._instance = get_broker()
        return getattr(self._instance, name)


broker = _LazyBroker()

__all__ = ["broker", "get_broker"]
