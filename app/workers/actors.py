"""
Точка входа для запуска Dramatiq воркеров:
    dramatiq app.workers.actors
Импортирует модули с акторами для их регистрации.
"""

from app.core.config import get_settings
from app.core.dramatiq_setup import get_broker
from app.core.logging_config import setup_logging

setup_logging(get_settings().log_level)
broker = get_broker()

import app.workers.embeddings.tasks  # noqa: E402,F401
