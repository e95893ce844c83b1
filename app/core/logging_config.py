"""
Конфигурация логирования для TaskPilot.
INFO логи уходят в stdout, WARNING и выше - в stderr.
"""

import logging
import sys

LOG_FORMAT = '[%(asctime)s] [PID %(process)d] [%(threadName)s] [%(name)s] [%(levelname)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Библиотеки, которые слишком многословны на уровне INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


class InfoFilter(logging.Filter):
    """Пропускает только INFO и DEBUG сообщения."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= logging.INFO


class ErrorFilter(logging.Filter):
    """Пропускает только WARNING, ERROR и CRITICAL сообщения."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING


def _quiet_libraries() -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Настройка логирования с разделением потоков для логгеров app.*.
    Root logger не трогаем, чтобы не конфликтовать с uvicorn и Dramatiq.

    Args:
        log_level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(InfoFilter())
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(ErrorFilter())
    stderr_handler.setFormatter(formatter)

    app_logger = logging.getLogger("app")
    app_logger.handlers.clear()
    app_logger.addHandler(stdout_handler)
    app_logger.addHandler(stderr_handler)
    app_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    app_logger.propagate = False

    _quiet_libraries()

    app_logger.info("Логирование настроено, уровень %s", log_level.upper())


def setup_test_logging(log_level: str = "INFO") -> None:
    """
    Настройка логирования для тестов.
    propagate=True нужен, чтобы caplog ловил сообщения.
    """
    app_logger = logging.getLogger("app")
    app_logger.handlers.clear()
    app_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    app_logger.propagate = True

    _quiet_libraries()
