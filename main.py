# main.py

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from config import Settings, build_settings
from logging_config import setup_logging
from registry import RepoRegistry
from sync import RepoLocks, SyncExecutor

# Routers
from routers.health import router as health_router
from routers.webhook import router as webhook_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings, executor: Optional[SyncExecutor] = None) -> FastAPI:
    """
    Builds the application around a resolved configuration. The repo registry
    and the sync executor live on app.state and are handed to the routes as
    dependencies.
    """
    app = FastAPI(
        title="AutoPull",
        description="Pulls main into local clones when GitHub reports a push",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )

    app.state.settings = settings
    app.state.registry = RepoRegistry.from_paths(settings.repo_paths)
    app.state.repo_locks = RepoLocks()
    app.state.executor = executor or SyncExecutor(
        git_path=settings.git_path,
        timeout=settings.sync_timeout
    )

    if not len(app.state.registry):
        logger.warning("No repositories configured. Every push to main will fail to resolve.")

    app.include_router(health_router)
    app.include_router(webhook_router)
    return app


def run():
    settings = build_settings()
    setup_logging(settings.debug, settings.log_db_path)
    logger.info("Starting the AutoPull application...")
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
