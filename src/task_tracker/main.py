from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .errors import StoreError
from .repositories import TaskStore, create_store
from .routers import tasks as tasks_router
from .schemas import HealthStatus
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and store connectivity."},
    {"name": "tasks", "description": "Create, list, update and delete tasks."},
]


def _lifespan(store: TaskStore) -> Callable[[FastAPI], AsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            store.connect()
        except StoreError as e:
            # Fatal: let the exception escape so the server process stops
            logger.critical("Could not connect to database: %s", e)
            raise
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    return lifespan


def _jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic puts the raised ValueError into ctx, which is not JSON serializable
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report request validation errors as 400.

    Response format:
        {
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": [... pydantic error details ...]
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": _jsonable_errors(exc),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, store: Optional[TaskStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings; read from the environment when omitted.
        store: Task store to use; built from settings.store_conn_str when omitted.
            It is connected on startup and closed on shutdown.

    Serve directly with `uvicorn --factory task_tracker.main:create_app`, or
    through the `task-tracker-server` entry point.
    """
    settings = settings or get_settings()
    store = store or create_store(settings)

    app = FastAPI(
        title="Task Tracker",
        description="REST service for creating, listing, toggling and deleting tasks.",
        version=__version__,
        openapi_tags=openapi_tags,
        lifespan=_lifespan(store),
    )

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # PUBLIC_INTERFACE
    @app.get("/ok", response_model=HealthStatus, summary="Health Check", tags=["health"])
    def health_check(request: Request) -> HealthStatus:
        """
        Health check endpoint reporting store connectivity.
        """
        current: Optional[TaskStore] = getattr(request.app.state, "store", None)
        connected = current is not None and current.ping()
        return HealthStatus(status="ok", database="connected" if connected else "disconnected")

    app.include_router(tasks_router.router)
    return app
