import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import InvalidInputError, TaskApiError
from .logging_setup import setup_logging
from .repositories import build_repository
from .settings import get_settings
from .routers import procedures as procedures_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "Create, list, update and delete task records.",
    },
]

_settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and build the task repository once per process."""
    setup_logging(_settings.log_level, _settings.log_format)
    app.state.repository = build_repository(_settings)
    logger.info("Task backend started backend=%s", _settings.persistence_backend)
    yield
    logger.info("Task backend stopped")


app = FastAPI(
    title="Task Backend",
    description="Backend API service for tracking simple tasks.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# CORS origins from CORS_ALLOW_ORIGINS, with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TaskApiError)
async def task_api_error_handler(request: Request, exc: TaskApiError) -> JSONResponse:
    """
    Render every TaskApiError with its own status code and envelope:

        {"error": "<code>", "message": "...", "detail": ...}
    """
    if exc.http_status >= 500:
        logger.error(
            "%s on %s: %s", exc.code, request.url.path, exc.message,
            extra={"error_code": exc.code, "path": request.url.path},
        )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report request validation failures as InvalidInput errors.
    """
    error = InvalidInputError.from_errors(exc.errors())
    logger.warning("Validation error on %s: %s", request.url.path, error.issues)
    return JSONResponse(status_code=error.http_status, content=error.to_response())


# Include routers
app.include_router(procedures_router.router)
