from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional
import uuid

from app.models.subtask import SUBTASK_TITLE_MAX_LENGTH
from app.models.task import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255, description="Название задачи")
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime


class SubtaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=SUBTASK_TITLE_MAX_LENGTH, description="Текст подзадачи или принятой подсказки")


class SubtaskUpdate(BaseModel):
    completed: bool


class SubtaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    task_id: uuid.UUID
    title: str
    completed: bool
    created_at: datetime
