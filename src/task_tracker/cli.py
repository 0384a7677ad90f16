from __future__ import annotations

import logging

import uvicorn

from .logging_setup import setup_logging
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def run_server() -> None:
    """
    Entry point for `task-tracker-server`: configure logging and serve the API
    with uvicorn on HOST:PORT. A store connection failure at startup stops
    the process with a non-zero exit code.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    from .main import create_app

    app = create_app(settings)
    logger.info("Server listening on %s:%s (store: %s)", settings.host, settings.port, settings.store_backend)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


# PUBLIC_INTERFACE
def run_console() -> None:
    """
    Entry point for `task-tracker-console`: interactive client against TASKS_API_URL.
    """
    from .client import TaskApi, TaskBoard
    from .client.console import render_tasks, run_console_loop

    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    with TaskApi(base_url=settings.api_url) as api:
        board = TaskBoard(api, on_change=lambda tasks: print(render_tasks(tasks)))
        run_console_loop(board)
