"""Report data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from kubevalidator.annotations.models import Annotation

CHECK_RUN_NAME = "Kubernetes YAML"


class Conclusion(str, Enum):
    neutral = "neutral"
    success = "success"
    failure = "failure"


class CheckStatus(str, Enum):
    in_progress = "in_progress"
    completed = "completed"


class Report(BaseModel):
    """The verdict of one validation run."""

    name: str = CHECK_RUN_NAME
    status: CheckStatus = CheckStatus.completed
    conclusion: Conclusion | None = None
    title: str
    summary: str
    annotations: list[Annotation] = Field(default_factory=list)
    started_at: datetime
    completed_at: datetime | None = None

    def to_check_run(self) -> dict[str, Any]:
        """Render the check-run body, without annotations.

        Annotations are sent separately, in batches, by the GitHub client.
        """
        payload: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "output": {"title": self.title, "summary": self.summary},
        }
        if self.conclusion is not None:
            payload["conclusion"] = self.conclusion.value
        if self.completed_at is not None:
            payload["completed_at"] = self.completed_at.isoformat()
        return payload
