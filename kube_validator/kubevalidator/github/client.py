"""GitHub REST client for file contents, pull request files and check runs."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from kubevalidator.candidate import ChangedFile
from kubevalidator.content import ContentNotFoundError, TransientContentError
from kubevalidator.report.models import Report

logger = logging.getLogger(__name__)

# The check-runs API accepts at most 50 annotations per request
MAX_ANNOTATIONS_PER_REQUEST = 50
PAGE_SIZE = 100


class GitHubClient:
    """Thin async wrapper around the GitHub REST API."""

    def __init__(
        self,
        token: str = "",
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def get_contents(self, owner: str, repo: str, path: str, ref: str) -> bytes:
        """Return the raw bytes of ``path`` at ``ref``."""
        client = await self._get_client()
        try:
            resp = await client.get(
                f"/repos/{owner}/{repo}/contents/{quote(path)}",
                params={"ref": ref},
                headers={"Accept": "application/vnd.github.raw"},
            )
        except httpx.HTTPError as e:
            raise TransientContentError(f"Couldn't load {path}: {e}") from e
        if resp.status_code == 404:
            raise ContentNotFoundError(f"Couldn't load {path}: not found at {ref}")
        if resp.status_code != 200:
            raise TransientContentError(
                f"Couldn't load contents of {path}: HTTP {resp.status_code}"
            )
        return resp.content

    async def list_pull_request_files(
        self, owner: str, repo: str, number: int,
    ) -> list[ChangedFile]:
        client = await self._get_client()
        files: list[ChangedFile] = []
        page = 1
        while True:
            resp = await client.get(
                f"/repos/{owner}/{repo}/pulls/{number}/files",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            resp.raise_for_status()
            batch = resp.json()
            files.extend(
                ChangedFile(
                    filename=item["filename"],
                    sha=item.get("sha") or "",
                    blob_url=item.get("blob_url") or "",
                    status=item.get("status", "modified"),
                )
                for item in batch
            )
            if len(batch) < PAGE_SIZE:
                return files
            page += 1

    async def create_check_run(
        self,
        owner: str,
        repo: str,
        report: Report,
        head_sha: str,
        head_branch: str | None = None,
    ) -> int:
        """Create a check run for ``report`` and return its id."""
        client = await self._get_client()
        batches = _annotation_batches(report)
        payload = report.to_check_run()
        payload["head_sha"] = head_sha
        if head_branch:
            payload["head_branch"] = head_branch
        if batches:
            payload["output"]["annotations"] = batches[0]

        resp = await client.post(f"/repos/{owner}/{repo}/check-runs", json=payload)
        if resp.is_error:
            logger.error("Couldn't create check run: HTTP %d %s", resp.status_code, resp.text)
        resp.raise_for_status()
        check_run_id = int(resp.json()["id"])

        await self._send_remaining(client, owner, repo, check_run_id, report, batches[1:])
        return check_run_id

    async def update_check_run(
        self,
        owner: str,
        repo: str,
        check_run_id: int,
        report: Report,
    ) -> None:
        client = await self._get_client()
        batches = _annotation_batches(report)
        payload = report.to_check_run()
        if batches:
            payload["output"]["annotations"] = batches[0]

        resp = await client.patch(
            f"/repos/{owner}/{repo}/check-runs/{check_run_id}", json=payload,
        )
        if resp.is_error:
            logger.error("Couldn't update check run: HTTP %d %s", resp.status_code, resp.text)
        resp.raise_for_status()

        await self._send_remaining(client, owner, repo, check_run_id, report, batches[1:])

    async def _send_remaining(
        self,
        client: httpx.AsyncClient,
        owner: str,
        repo: str,
        check_run_id: int,
        report: Report,
        batches: list[list[dict[str, Any]]],
    ) -> None:
        # Further annotations are appended by updating the output again
        for batch in batches:
            resp = await client.patch(
                f"/repos/{owner}/{repo}/check-runs/{check_run_id}",
                json={
                    "output": {
                        "title": report.title,
                        "summary": report.summary,
                        "annotations": batch,
                    }
                },
            )
            resp.raise_for_status()


class RepositoryContent:
    """ContentSource bound to one repository."""

    def __init__(self, client: GitHubClient, owner: str, repo: str) -> None:
        self._client = client
        self.owner = owner
        self.repo = repo

    async def fetch(self, path: str, ref: str) -> bytes:
        return await self._client.get_contents(self.owner, self.repo, path, ref)


def _annotation_batches(report: Report) -> list[list[dict[str, Any]]]:
    rendered = [a.to_check_run() for a in report.annotations]
    return [
        rendered[i:i + MAX_ANNOTATIONS_PER_REQUEST]
        for i in range(0, len(rendered), MAX_ANNOTATIONS_PER_REQUEST)
    ]
