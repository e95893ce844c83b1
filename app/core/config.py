from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from urllib.parse import urlparse


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Параметры базы данных
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_name: str = Field(default="taskpilot")
    db_user: str = Field(default="user")
    db_password: str = Field(default="password")
    database_url: str | None = Field(default=None)
    db_generate_schemas: bool = Field(default=False)

    # Redis настройки для Dramatiq
    redis_url: str = Field(default="redis://localhost:6379/0")
    dramatiq_broker: str = Field(default="redis")  # redis | stub

    # Провайдер генерации текста и эмбеддингов
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    gpt_model_fast: str = Field(default="gpt-4o-mini")
    embedding_model: str = Field(default="text-embedding-3-small")
    embedding_dimensions: int | None = Field(default=None)

    # Генерация подзадач
    subtasks_min_items: int = Field(default=3)
    subtasks_max_items: int = Field(default=7)
    subtasks_temperature: float = Field(default=0.7)
    subtasks_max_tokens: int = Field(default=500)
    subtasks_json_mode: bool = Field(default=True)

    # Таймауты и ретраи исходящих запросов
    upstream_timeout_seconds: float = Field(default=20.0)
    upstream_max_retries: int = Field(default=1)

    # Умный поиск
    search_top_k: int = Field(default=10)
    search_min_similarity: float | None = Field(default=None)

    # Остальные настройки
    log_level: str = Field(default="INFO")
    cors_allow_origin: str = Field(default="*")

    @property
    def redis_host(self) -> str:
        """Извлекает host из REDIS_URL"""
        parsed = urlparse(self.redis_url)
        return parsed.hostname or "localhost"

    @property
    def redis_port(self) -> int:
        """Извлекает port из REDIS_URL"""
        parsed = urlparse(self.redis_url)
        return parsed.port or 6379

    @property
    def redis_db(self) -> int:
        """Извлекает database из REDIS_URL"""
        parsed = urlparse(self.redis_url)
        if parsed.path and parsed.path != '/':
            db_part = parsed.path.lstrip('/')
            if db_part.isdigit():
                return int(db_part)
        return 0

    @property
    def redis_password(self) -> Optional[str]:
        """Извлекает password из REDIS_URL"""
        parsed = urlparse(self.redis_url)
        return parsed.password

    @property
    def postgres_dsn(self) -> str:
        """Конструирует DSN для PostgreSQL из отдельных параметров"""
        return f"postgres://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def db_url(self) -> str:
        """DATABASE_URL имеет приоритет над отдельными параметрами"""
        return self.database_url or self.postgres_dsn

    @property
    def embedding_model_version(self) -> str:
        """
        Тег версии эмбеддингов. Смена модели или размерности меняет тег,
        и старые векторы перестают участвовать в поиске.
        """
        if self.embedding_dimensions:
            return f"{self.embedding_model}:{self.embedding_dimensions}"
        return self.embedding_model


settings = None

def get_settings() -> Settings:
    """Получить настройки приложения с ленивой инициализацией"""
    global settings
    if settings is None:
        settings = Settings()
    return settings

def reset_settings():
    """Сбросить кэшированные настройки (для тестирования)"""
    global settings
    settings = None
