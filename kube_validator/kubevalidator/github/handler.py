"""Check suite handling -- the full lifecycle of one check run."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from kubevalidator.candidate import ChangedFile
from kubevalidator.config.loader import ConfigError, match_candidates, parse_config
from kubevalidator.content import ContentNotFoundError, TransientContentError
from kubevalidator.github.client import GitHubClient, RepositoryContent
from kubevalidator.pipeline import build_report, run_validation
from kubevalidator.report.aggregator import (
    build_config_invalid_report,
    build_config_missing_report,
    build_error_report,
    build_initial_report,
)
from kubevalidator.report.models import Report
from kubevalidator.settings import CONFIG_FILE_NAME, Settings
from kubevalidator.validator.engine import SchemaStore

logger = logging.getLogger(__name__)

HANDLED_ACTIONS = {"requested", "rerequested"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CheckSuiteHandler:
    """Runs validation for a ``check_suite`` webhook event and reports the result."""

    def __init__(
        self,
        github: GitHubClient,
        settings: Settings,
        schema_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._github = github
        self._settings = settings
        self._schema_transport = schema_transport

    async def handle(self, event: dict[str, Any]) -> None:
        """Process one event; failures are logged rather than raised."""
        try:
            await self._handle(event)
        except Exception:
            logger.exception("Check suite handling failed")

    async def _handle(self, event: dict[str, Any]) -> None:
        if event.get("action") not in HANDLED_ACTIONS:
            logger.debug("Ignoring check_suite action %s", event.get("action"))
            return

        owner = event["repository"]["owner"]["login"]
        repo = event["repository"]["name"]
        suite = event["check_suite"]
        head_sha = suite["head_sha"]
        started_at = _now()

        check_run_id = await self._github.create_check_run(
            owner, repo, build_initial_report(started_at), head_sha, suite.get("head_branch"),
        )

        try:
            report = await self._validate(owner, repo, suite, started_at)
        except (TransientContentError, httpx.HTTPError) as e:
            logger.exception("%s/%s@%s: validation could not complete", owner, repo, head_sha)
            report = build_error_report(started_at, _now(), e)

        await self._github.update_check_run(owner, repo, check_run_id, report)
        logger.info("%s/%s@%s: %s (%s)", owner, repo, head_sha, report.conclusion, report.title)

    async def _validate(
        self,
        owner: str,
        repo: str,
        suite: dict[str, Any],
        started_at: datetime,
    ) -> Report:
        """Build the terminal report for one check suite."""
        head_sha = suite["head_sha"]
        new_config_url = (
            f"https://github.com/{owner}/{repo}/new/{suite.get('head_branch')}?filename={CONFIG_FILE_NAME}"
        )
        config_url = f"https://github.com/{owner}/{repo}/blob/{head_sha}/{CONFIG_FILE_NAME}"
        content = RepositoryContent(self._github, owner, repo)

        try:
            config = parse_config(await content.fetch(CONFIG_FILE_NAME, head_sha))
        except ContentNotFoundError:
            logger.info("%s/%s has no %s", owner, repo, CONFIG_FILE_NAME)
            return build_config_missing_report(started_at, _now(), new_config_url)
        except ConfigError as e:
            logger.info("%s/%s has an invalid configuration: %s", owner, repo, e)
            return build_config_invalid_report(
                started_at, _now(), new_config_url, [e.to_annotation(config_url)],
            )

        files: list[ChangedFile] = []
        for pr in suite.get("pull_requests", []):
            files.extend(await self._github.list_pull_request_files(owner, repo, pr["number"]))
        candidates = match_candidates(files, config)

        async with httpx.AsyncClient(
            timeout=self._settings.http_timeout, transport=self._schema_transport,
        ) as schema_client:
            annotations = await run_validation(
                candidates,
                content,
                head_sha,
                SchemaStore(schema_client),
                max_concurrency=self._settings.max_concurrency,
            )

        return build_report(candidates, annotations, started_at, _now(), config_url)
