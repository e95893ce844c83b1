"""
Таксономия ошибок пайплайна.
Каждая ошибка знает свой HTTP статус и безопасное сообщение для клиента.
Диагностика (сырой ответ модели, текст ошибки провайдера) остаётся в логах.
"""

from typing import Optional


class PipelineError(Exception):
    """Базовая ошибка пайплайна."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)


class Unauthenticated(PipelineError):
    """Нет активной сессии - пользователь должен войти заново."""

    status_code = 401
    public_message = "Unauthorized"


class InvalidInput(PipelineError):
    """Пустое или отсутствующее обязательное поле."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        # Сообщение о валидации адресовано пользователю, его можно показывать
        self.public_message = message


class NotFound(PipelineError):
    status_code = 404
    public_message = "Not found"


class UpstreamUnavailable(PipelineError):
    """Провайдер не сконфигурирован (нет ключа API). Исправляет оператор."""

    public_message = "AI provider is not configured"


class UpstreamError(PipelineError):
    """Провайдер вернул неуспешный статус или соединение не удалось."""

    public_message = "AI provider request failed"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class UpstreamTimeout(PipelineError):
    """Запрос к провайдеру превысил дедлайн."""

    public_message = "AI provider timed out"


class MalformedResponse(PipelineError):
    """Модель вернула контент, из которого не удалось извлечь список."""

    public_message = "Invalid response format from AI"

    def __init__(self, message: str, raw_text: str):
        super().__init__(message)
        self.raw_text = raw_text


__all__ = [
    "PipelineError",
    "Unauthenticated",
    "InvalidInput",
    "NotFound",
    "UpstreamUnavailable",
    "UpstreamError",
    "UpstreamTimeout",
    "MalformedResponse",
]
