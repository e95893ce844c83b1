"""
Тела запросов и ответов AI эндпоинтов.
Браузерный клиент шлёт camelCase, поэтому поля объявлены с алиасами.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Any, List, Optional
import uuid

from app.schemas.task import TaskOut


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TextRequest(CamelModel):
    """
    Тело из текстовых полей. Значение не того типа считается отсутствующим:
    поля проверяет пайплайн, и только после проверки сессии.
    """

    @field_validator("*", mode="before")
    @classmethod
    def text_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class GenerateSubtasksRequest(TextRequest):
    task_title: Optional[str] = Field(default=None, alias="taskTitle")


class GenerateSubtasksResponse(BaseModel):
    subtasks: List[str]


class TaskEmbeddingRequest(TextRequest):
    # Строка, а не UUID: неверный id превращается в warning со статусом 200
    task_id: Optional[str] = Field(default=None, alias="taskId")
    task_title: Optional[str] = Field(default=None, alias="taskTitle")


class TaskEmbeddingResponse(CamelModel):
    success: bool = True
    stored: bool
    warning: Optional[str] = None
    task_id: Optional[uuid.UUID] = Field(default=None, alias="taskId")
    model: Optional[str] = None


class SmartSearchRequest(TextRequest):
    query: Optional[str] = None


class SearchResultOut(TaskOut):
    score: float


class SmartSearchResponse(BaseModel):
    results: List[SearchResultOut]
