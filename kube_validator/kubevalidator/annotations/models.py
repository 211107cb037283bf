"""Annotation data models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AnnotationLevel(str, Enum):
    notice = "notice"
    warning = "warning"
    failure = "failure"


class Annotation(BaseModel):
    """A line-anchored diagnostic for one file, ready for a check run."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1)
    blob_href: str = ""
    start_line: int = Field(1, ge=1)
    end_line: int = Field(1, ge=1)
    annotation_level: AnnotationLevel = AnnotationLevel.failure
    title: str
    message: str
    raw_details: str | None = None

    @model_validator(mode="after")
    def _ordered(self) -> Annotation:
        if self.end_line < self.start_line:
            raise ValueError("end_line must not precede start_line")
        return self

    @property
    def sort_key(self) -> tuple[str, int, int]:
        return self.path, self.start_line, self.end_line

    def to_check_run(self) -> dict[str, Any]:
        """Render as a GitHub check-run annotation object."""
        data: dict[str, Any] = {
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "annotation_level": self.annotation_level.value,
            "title": self.title,
            "message": self.message,
        }
        if self.raw_details:
            data["raw_details"] = self.raw_details
        return data
