"""
Общая настройка AsyncOpenAI и перевод исключений SDK в ошибки пайплайна.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple
import logging

import openai
from openai import AsyncOpenAI

from app.core.config import get_settings
from app.core.errors import UpstreamError, UpstreamTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)

# Глобальные клиенты: у каждого свой пул соединений httpx
_clients: Dict[Tuple, AsyncOpenAI] = {}


def _client_options(max_retries: Optional[int]) -> Dict[str, Any]:
    settings = get_settings()
    if not settings.openai_api_key:
        raise UpstreamUnavailable("OPENAI_API_KEY is not configured")

    client_kwargs = {
        "api_key": settings.openai_api_key,
        "timeout": settings.upstream_timeout_seconds,
        "max_retries": settings.upstream_max_retries if max_retries is None else max_retries,
    }
    if settings.openai_base_url:
        client_kwargs["base_url"] = settings.openai_base_url
    return client_kwargs


def get_openai_client(max_retries: Optional[int] = None) -> AsyncOpenAI:
    """
    Общий клиент с ограниченным таймаутом, создаётся при первом обращении
    и переиспользуется, пока настройки не изменились.
    Без ключа API - UpstreamUnavailable, а не падение приложения.
    """
    options = _client_options(max_retries)
    key = tuple(sorted(options.items()))
    client = _clients.get(key)
    if client is None:
        client = _clients[key] = AsyncOpenAI(**options)
        logger.debug(f"Создан клиент OpenAI (max_retries={options['max_retries']})")
    return client


async def close_openai_clients():
    while _clients:
        _, client = _clients.popitem()
        await client.close()


@contextmanager
def upstream_errors(operation: str) -> Iterator[None]:
    """Оборачивает вызов провайдера: исключения SDK -> Upstream* ошибки."""
    try:
        yield
    except openai.APITimeoutError as e:
        logger.warning(f"{operation}: таймаут запроса к провайдеру")
        raise UpstreamTimeout(f"{operation} timed out") from e
    except openai.APIStatusError as e:
        logger.error(f"{operation}: провайдер вернул статус {e.status_code}: {e.message}")
        raise UpstreamError(f"{operation} failed with status {e.status_code}", status=e.status_code) from e
    except openai.APIConnectionError as e:
        logger.error(f"{operation}: ошибка соединения с провайдером: {e}")
        raise UpstreamError(f"{operation} connection failed") from e
