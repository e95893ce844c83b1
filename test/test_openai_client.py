import pytest

from app.core.config import get_settings
from app.core.errors import UpstreamUnavailable
from app.services import openai_client
from app.services.embedding_client import EmbeddingClient
from app.services.embedding_indexer import write_path_client
from app.services.llm_gateway import LLMGateway
from app.services.openai_client import close_openai_clients, get_openai_client


@pytest.fixture(autouse=True)
def fresh_clients(monkeypatch):
    """Каждый тест начинает с пустого кэша клиентов"""
    monkeypatch.setattr(openai_client, "_clients", {})


class TestOpenAIClient:

    def test_timeout_and_retries_from_settings(self, settings_env):
        settings_env(upstream_timeout_seconds=12.5, upstream_max_retries=1)
        settings = get_settings()

        client = get_openai_client()

        assert client.timeout == settings.upstream_timeout_seconds
        assert client.max_retries == settings.upstream_max_retries

    def test_client_is_reused(self):
        assert get_openai_client() is get_openai_client()
        assert get_openai_client(max_retries=0) is not get_openai_client()

    def test_settings_change_builds_new_client(self, settings_env):
        first = get_openai_client()
        settings_env(upstream_timeout_seconds=5)

        second = get_openai_client()

        assert second is not first
        assert second.timeout == 5

    def test_missing_api_key(self, settings_env):
        settings_env(openai_api_key=None)
        with pytest.raises(UpstreamUnavailable):
            get_openai_client()

    @pytest.mark.asyncio
    async def test_close_drops_cached_clients(self):
        first = get_openai_client()
        await close_openai_clients()
        assert get_openai_client() is not first


class TestClientRetries:
    """Путь чтения допускает ограниченный ретрай, путь записи эмбеддинга - нет"""

    def test_write_path_has_no_retries(self, settings_env):
        settings_env(upstream_max_retries=2)

        client = write_path_client()

        assert client.client.max_retries == 0
        assert client.client.timeout == get_settings().upstream_timeout_seconds

    def test_read_path_uses_configured_retries(self, settings_env):
        settings_env(upstream_max_retries=1)

        assert EmbeddingClient().client.max_retries == 1
        assert LLMGateway().client.max_retries == 1

    def test_gateway_and_query_embeddings_share_client(self):
        assert LLMGateway().client is EmbeddingClient().client
