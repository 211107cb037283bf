"""Validation data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ViolationRecord(BaseModel):
    """A single failed schema constraint, normalised from the engine output."""

    model_config = ConfigDict(frozen=True)

    path: str
    message: str
    kind: str
    api_version: str
    violation_type: str
    field: str = ""
    document_index: int = 0
    details: dict[str, str] = Field(default_factory=dict)


class DocumentResult(BaseModel):
    """Engine output for one document of a (possibly multi-document) stream."""

    document_index: int
    kind: str
    api_version: str
    violations: list[ViolationRecord] = Field(default_factory=list)


class EngineError(Exception):
    """The engine could not evaluate the document at all.

    Raised for unparsable YAML, documents missing ``kind``/``apiVersion`` and
    unreachable or invalid schemas. ``kind`` is the first resource kind the
    engine learned before failing, if any.
    """

    def __init__(self, errors: list[str], kind: str | None = None) -> None:
        self.errors = errors
        self.kind = kind
        super().__init__(self._format())

    def _format(self) -> str:
        if len(self.errors) == 1:
            return self.errors[0]
        return "\n\t".join(f"* {err}" for err in self.errors)
