"""FastAPI application -- kubevalidator webhook entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import kubevalidator.deps as deps
from kubevalidator import __version__
from kubevalidator.api.webhook import router as webhook_router
from kubevalidator.github.client import GitHubClient
from kubevalidator.github.handler import CheckSuiteHandler
from kubevalidator.settings import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init resources on startup, clean up on shutdown."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=logging.DEBUG if settings.dev_mode else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "kubevalidator %s starting (api: %s, concurrency: %d)",
        __version__, settings.github_api_url, settings.max_concurrency,
    )
    if not settings.github_token:
        logger.warning("GITHUB_TOKEN not set; GitHub API calls will be unauthenticated")

    deps._settings = settings
    deps._github_client = GitHubClient(
        token=settings.github_token,
        base_url=settings.github_api_url,
        timeout=settings.http_timeout,
    )
    deps._check_suite_handler = CheckSuiteHandler(deps._github_client, settings)

    yield

    # Shutdown
    if deps._github_client:
        await deps._github_client.close()
    deps._settings = None
    deps._github_client = None
    deps._check_suite_handler = None


app = FastAPI(
    title="kubevalidator",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(webhook_router)
