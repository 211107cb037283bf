"""Line localization data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LineRange(BaseModel):
    """Inclusive, 1-based range of source lines."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(1, ge=1)
    end: int = Field(1, ge=1)

    @model_validator(mode="after")
    def _ordered(self) -> LineRange:
        if self.end < self.start:
            raise ValueError(f"end line {self.end} precedes start line {self.start}")
        return self


FALLBACK_RANGE = LineRange(start=1, end=1)


class Hunk(BaseModel):
    """One ``@@`` hunk of a unified diff."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[str] = Field(default_factory=list)

    @property
    def added(self) -> list[str]:
        return [line[1:] for line in self.lines if line.startswith("+")]

    @property
    def removed(self) -> list[str]:
        return [line[1:] for line in self.lines if line.startswith("-")]
