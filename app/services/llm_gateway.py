from typing import Any, Dict, List, Optional
import logging

from openai import AsyncOpenAI

from app.core.config import get_settings
from app.services.openai_client import get_openai_client, upstream_errors
from app.utils.prompt_manager import prompt_manager

logger = logging.getLogger(__name__)


class LLMGateway:
    """
    Клиент генерации подзадач. Возвращает текст модели как есть:
    интерпретация ответа - забота SubtaskNormalizer.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None, gpt_model: Optional[str] = None):
        self.settings = get_settings()
        self.client = client or get_openai_client()
        self.model = gpt_model or self.settings.gpt_model_fast

    def build_messages(self, task_title: str) -> List[Dict[str, str]]:
        system_prompt = prompt_manager.render(
            "subtask_system",
            min_items=self.settings.subtasks_min_items,
            max_items=self.settings.subtasks_max_items,
        )
        user_prompt = prompt_manager.render("subtask_request", task_title=task_title)
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    async def request_subtasks(self, task_title: str) -> str:
        """Запрашивает у модели разбиение задачи на подзадачи, возвращает сырой текст"""
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": self.build_messages(task_title),
            "max_tokens": self.settings.subtasks_max_tokens,
            "temperature": self.settings.subtasks_temperature,
        }
        if self.settings.subtasks_json_mode:
            request["response_format"] = {"type": "json_object"}

        with upstream_errors("generate-subtasks"):
            response = await self.client.chat.completions.create(**request)

        if not response.choices:
            logger.warning("Модель вернула ответ без choices")
            return ""
        content = response.choices[0].message.content or ""
        logger.debug(f"Ответ модели для '{task_title}': {len(content)} символов")
        return content
