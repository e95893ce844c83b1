from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.config import get_settings
from app.core.db import init_db, close_db
from app.core.http import setup_http
from app.core.logging_config import setup_logging
from app.routers import ai, tasks
from app.services.openai_client import close_openai_clients


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(get_settings().log_level)
    await init_db()
    yield
    # Shutdown
    await close_openai_clients()
    await close_db()


app = FastAPI(
    title="TaskPilot API",
    description="Менеджер задач с AI: разбиение задач на подзадачи и умный поиск по эмбеддингам",
    version="1.0.0",
    lifespan=lifespan
)

setup_http(app)

app.include_router(ai.router, tags=["ai"])
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
app.include_router(tasks.subtasks_router, prefix="/subtasks", tags=["tasks"])


@app.get("/health", summary="Проверка работоспособности")
async def health():
    return {"status": "ok"}


__all__ = ["app"]
