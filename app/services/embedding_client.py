from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from openai import AsyncOpenAI

from app.core.config import get_settings
from app.core.errors import InvalidInput, UpstreamError
from app.services.openai_client import get_openai_client, upstream_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddingVector:
    values: List[float]
    model_version: str

    @property
    def dimensions(self) -> int:
        return len(self.values)


class EmbeddingClient:
    """Клиент эндпоинта эмбеддингов"""

    def __init__(self, client: Optional[AsyncOpenAI] = None, max_retries: Optional[int] = None):
        self.settings = get_settings()
        self.client = client or get_openai_client(max_retries=max_retries)
        self.model = self.settings.embedding_model
        self.model_version = self.settings.embedding_model_version

    async def embed(self, text: str) -> EmbeddingVector:
        text = (text or "").strip()
        if not text:
            raise InvalidInput("Text to embed is required")

        request: Dict[str, Any] = {"model": self.model, "input": text}
        if self.settings.embedding_dimensions:
            request["dimensions"] = self.settings.embedding_dimensions

        with upstream_errors("embeddings"):
            response = await self.client.embeddings.create(**request)

        if not response.data or not response.data[0].embedding:
            raise UpstreamError("Embedding response contains no vector")

        values = [float(v) for v in response.data[0].embedding]
        return EmbeddingVector(values=values, model_version=self.model_version)
