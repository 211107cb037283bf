"""Tests for kubevalidator.github.client -- REST calls against a mock transport."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from kubevalidator.annotations import Annotation
from kubevalidator.content import ContentNotFoundError, TransientContentError
from kubevalidator.github import GitHubClient, RepositoryContent
from kubevalidator.report import build_final_report, build_initial_report

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _client(handler) -> GitHubClient:
    return GitHubClient(token="t0ken", transport=httpx.MockTransport(handler))


class TestGetContents:
    @pytest.mark.asyncio
    async def test_returns_raw_bytes(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"kind: Service\n")

        client = _client(handler)
        data = await RepositoryContent(client, "octo", "repo").fetch("deploy/svc.yaml", "abc123")
        await client.close()

        assert data == b"kind: Service\n"
        request = seen[0]
        assert request.url.path == "/repos/octo/repo/contents/deploy/svc.yaml"
        assert request.url.params["ref"] == "abc123"
        assert request.headers["Accept"] == "application/vnd.github.raw"
        assert request.headers["Authorization"] == "Bearer t0ken"

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        client = _client(lambda request: httpx.Response(404, json={"message": "Not Found"}))
        with pytest.raises(ContentNotFoundError):
            await client.get_contents("octo", "repo", "missing.yaml", "abc")
        await client.close()

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self) -> None:
        client = _client(lambda request: httpx.Response(502))
        with pytest.raises(TransientContentError):
            await client.get_contents("octo", "repo", "a.yaml", "abc")
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_is_transient(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        client = _client(handler)
        with pytest.raises(TransientContentError):
            await client.get_contents("octo", "repo", "a.yaml", "abc")
        await client.close()


class TestPullRequestFiles:
    @pytest.mark.asyncio
    async def test_paginates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            count = 100 if page == 1 else 3
            return httpx.Response(
                200,
                json=[
                    {
                        "filename": f"p{page}/f{i}.yaml",
                        "sha": "s",
                        "blob_url": f"https://blob/p{page}/f{i}.yaml",
                        "status": "added",
                    }
                    for i in range(count)
                ],
            )

        client = _client(handler)
        files = await client.list_pull_request_files("octo", "repo", 7)
        await client.close()

        assert len(files) == 103
        assert files[0].filename == "p1/f0.yaml"
        assert files[-1].status == "added"


class TestCheckRuns:
    @pytest.mark.asyncio
    async def test_create_returns_id(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"id": 42})

        client = _client(handler)
        check_run_id = await client.create_check_run(
            "octo", "repo", build_initial_report(NOW), "abc", "main",
        )
        await client.close()

        assert check_run_id == 42
        assert bodies[0]["head_sha"] == "abc"
        assert bodies[0]["head_branch"] == "main"
        assert bodies[0]["status"] == "in_progress"
        assert "annotations" not in bodies[0]["output"]

    @pytest.mark.asyncio
    async def test_update_batches_annotations(self) -> None:
        requests: list[tuple[str, str, dict]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"id": 42})

        annotations = [
            Annotation(path="a.yaml", start_line=i, end_line=i, title="t", message="m")
            for i in range(1, 121)
        ]
        report = build_final_report(1, annotations, ["* a"], NOW, NOW)

        client = _client(handler)
        await client.update_check_run("octo", "repo", 42, report)
        await client.close()

        assert [method for method, _, _ in requests] == ["PATCH", "PATCH", "PATCH"]
        assert {path for _, path, _ in requests} == {"/repos/octo/repo/check-runs/42"}
        sizes = [len(body["output"]["annotations"]) for _, _, body in requests]
        assert sizes == [50, 50, 20]
        assert requests[0][2]["conclusion"] == "failure"
        assert requests[0][2]["output"]["title"] == "1 file checked, 120 errors"

    @pytest.mark.asyncio
    async def test_update_raises_on_error(self) -> None:
        client = _client(lambda request: httpx.Response(422, json={"message": "Invalid"}))
        with pytest.raises(httpx.HTTPStatusError):
            await client.update_check_run(
                "octo", "repo", 1, build_final_report(0, [], [], NOW, NOW),
            )
        await client.close()
