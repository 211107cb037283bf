"""Candidate -- one changed file and the schemas it is validated against."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from kubevalidator.annotations.builder import (
    build_engine_error_annotation,
    build_load_error_annotation,
    build_violation_annotation,
    sort_annotations,
)
from kubevalidator.annotations.models import Annotation
from kubevalidator.content import ContentNotFoundError, ContentSource, TransientContentError
from kubevalidator.localizer.engine import DEFAULT_POLICY, localize
from kubevalidator.localizer.models import FALLBACK_RANGE
from kubevalidator.localizer.strategies import EditPolicy
from kubevalidator.schema.models import LineNumberMode, SchemaSpec
from kubevalidator.schema.resolver import DEFAULT_SCHEMA
from kubevalidator.validator.adapter import ValidatorConfig, validate_document
from kubevalidator.validator.engine import SchemaStore
from kubevalidator.validator.models import EngineError

logger = logging.getLogger(__name__)


class ChangedFile(BaseModel):
    """A file touched by a change set, as listed by the VCS host."""

    model_config = ConfigDict(frozen=True)

    filename: str
    sha: str = ""
    blob_url: str = ""
    status: str = "modified"


class Candidate:
    """A changed file selected for validation.

    Bytes are absent (``None``) until :meth:`load_bytes` succeeds; an empty
    file is ``b""`` and is still validated.
    """

    def __init__(
        self,
        file: ChangedFile,
        schemas: list[SchemaSpec] | None = None,
        data: bytes | None = None,
    ) -> None:
        self.file = file
        self.schemas: tuple[SchemaSpec, ...] = tuple(schemas) if schemas else (DEFAULT_SCHEMA,)
        self._bytes = data

    @property
    def filename(self) -> str:
        return self.file.filename

    @property
    def bytes(self) -> bytes | None:
        return self._bytes

    @property
    def loaded(self) -> bool:
        return self._bytes is not None

    async def load_bytes(self, source: ContentSource, ref: str) -> Annotation | None:
        """Hydrate bytes once; return a load-error annotation on failure."""
        if self._bytes is not None:
            return None
        try:
            data = await source.fetch(self.filename, ref)
        except (ContentNotFoundError, TransientContentError) as e:
            logger.warning("Couldn't load %s at %s: %s", self.filename, ref, e)
            return build_load_error_annotation(self.filename, self.file.blob_url, e)
        self._bytes = data
        return None

    def markdown_list_item(self) -> str:
        return f"* [`./{self.filename}`]({self.file.blob_url})"

    async def validate(
        self,
        store: SchemaStore,
        policy: EditPolicy = DEFAULT_POLICY,
    ) -> list[Annotation]:
        """Validate against every schema spec and return sorted annotations."""
        if self._bytes is None:
            return [
                build_load_error_annotation(
                    self.filename, self.file.blob_url, "No content was loaded for this file",
                )
            ]

        annotations: list[Annotation] = []
        for spec in self.schemas:
            config = ValidatorConfig.from_spec(spec)
            try:
                violations = await validate_document(self._bytes, self.filename, config, store)
            except EngineError as e:
                annotations.append(
                    build_engine_error_annotation(self.filename, self.file.blob_url, e, spec)
                )
                continue

            for violation in violations:
                if spec.line_numbers is LineNumberMode.default:
                    line_range = localize(self._bytes, violation, policy)
                else:
                    line_range = FALLBACK_RANGE
                annotations.append(
                    build_violation_annotation(
                        self.filename, self.file.blob_url, violation, line_range, spec,
                    )
                )

        return sort_annotations(annotations)
