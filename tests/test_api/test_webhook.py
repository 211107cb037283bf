"""Tests for the webhook API."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

import pytest
from fastapi.testclient import TestClient

from kubevalidator.api.webhook import verify_signature
from kubevalidator.deps import get_check_suite_handler, get_settings
from kubevalidator.main import app
from kubevalidator.settings import Settings

EVENT = {
    "action": "requested",
    "repository": {"name": "repo", "owner": {"login": "octo"}},
    "check_suite": {"head_sha": "abc", "head_branch": "main", "pull_requests": []},
}


class RecordingHandler:
    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    async def handle(self, event: dict[str, Any]) -> None:
        self.events.append(event)


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def client(recorder: RecordingHandler):
    settings = Settings(webhook_secret="s3cret")
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_check_suite_handler] = lambda: recorder
    yield TestClient(app)
    app.dependency_overrides.clear()


def _sign(body: bytes, secret: str = "s3cret") -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def _post(client: TestClient, payload: Any, event: str = "check_suite", signature: str | None = None):
    body = json.dumps(payload).encode()
    headers = {
        "X-GitHub-Event": event,
        "X-Hub-Signature-256": signature if signature is not None else _sign(body),
        "Content-Type": "application/json",
    }
    return client.post("/webhook", content=body, headers=headers)


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_check_suite_is_scheduled(client: TestClient, recorder: RecordingHandler) -> None:
    resp = _post(client, EVENT)
    assert resp.status_code == 200
    assert resp.json()["accepted"] is True
    assert recorder.events == [EVENT]


def test_bad_signature_is_rejected(client: TestClient, recorder: RecordingHandler) -> None:
    resp = _post(client, EVENT, signature="sha256=deadbeef")
    assert resp.status_code == 401
    assert recorder.events == []


def test_other_events_are_ignored(client: TestClient, recorder: RecordingHandler) -> None:
    resp = _post(client, {"zen": "Keep it logically awesome."}, event="ping")
    assert resp.status_code == 200
    assert resp.json()["accepted"] is False
    assert recorder.events == []


def test_completed_action_is_ignored(client: TestClient, recorder: RecordingHandler) -> None:
    resp = _post(client, {**EVENT, "action": "completed"})
    assert resp.json()["accepted"] is False
    assert recorder.events == []


def test_invalid_json(client: TestClient) -> None:
    body = b"{not json"
    resp = client.post(
        "/webhook",
        content=body,
        headers={"X-GitHub-Event": "check_suite", "X-Hub-Signature-256": _sign(body)},
    )
    assert resp.status_code == 400


class TestVerifySignature:
    def test_valid(self) -> None:
        assert verify_signature("k", b"body", _sign(b"body", "k"))

    def test_missing(self) -> None:
        assert not verify_signature("k", b"body", None)

    def test_wrong_scheme(self) -> None:
        digest = hmac.new(b"k", b"body", hashlib.sha1).hexdigest()
        assert not verify_signature("k", b"body", f"sha1={digest}")
