"""
HTTP обвязка: CORS заголовки для браузерного клиента и обработчики ошибок.
Клиент всегда получает {"error": "..."} без внутренних подробностей.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
import logging

from app.core.config import get_settings
from app.core.errors import MalformedResponse, PipelineError

logger = logging.getLogger(__name__)

CORS_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
CORS_HEADERS = "Content-Type, Authorization, X-Client-Info, Apikey"


def cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": get_settings().cors_allow_origin,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Allow-Headers": CORS_HEADERS,
    }


async def cors_middleware(request: Request, call_next):
    # Pre-flight: пустой 200 без прохода в роутеры
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=cors_headers())
    response = await call_next(request)
    for name, value in cors_headers().items():
        response.headers.setdefault(name, value)
    return response


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    if exc.status_code >= 500:
        # Для MalformedResponse сырой ответ уже залогирован оркестратором
        level = logging.WARNING if isinstance(exc, MalformedResponse) else logging.ERROR
        logger.log(level, f"{request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.status_code} {type(exc).__name__}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path}: невалидное тело запроса: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Необработанная ошибка в {request.method} {request.url.path}: {exc}")
    # Этот обработчик срабатывает снаружи middleware, поэтому CORS добавляем сами
    return JSONResponse(status_code=500, content={"error": "Internal server error"}, headers=cors_headers())


def setup_http(app: FastAPI) -> None:
    app.middleware("http")(cors_middleware)
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
