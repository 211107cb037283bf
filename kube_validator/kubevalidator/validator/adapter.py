"""Adapter between a Candidate and the structural validation engine.

Every call receives its own ValidatorConfig, so concurrent validations of
different candidates against different schema specs never share settings.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from kubevalidator.schema.models import SchemaSpec
from kubevalidator.schema.resolver import schema_location
from kubevalidator.validator import engine
from kubevalidator.validator.engine import SchemaStore
from kubevalidator.validator.models import DocumentResult, EngineError, ViolationRecord

logger = logging.getLogger(__name__)


class ValidatorConfig(BaseModel):
    """Call-scoped engine settings resolved from one SchemaSpec."""

    model_config = ConfigDict(frozen=True)

    location: str
    version: str
    strict: bool
    openshift: bool

    @classmethod
    def from_spec(cls, spec: SchemaSpec) -> ValidatorConfig:
        return cls(
            location=schema_location(spec),
            version=spec.version,
            strict=spec.strict,
            openshift=spec.openshift,
        )


async def validate_documents(
    data: bytes,
    filename: str,
    config: ValidatorConfig,
    store: SchemaStore,
) -> list[DocumentResult]:
    """Run the engine once and return its per-document results.

    Raises EngineError when the engine itself fails (unparsable YAML,
    unreachable schema, missing kind/apiVersion).
    """
    try:
        results = await engine.validate(
            data, filename, config.location, config.openshift, store,
        )
    except EngineError as e:
        logger.warning(
            "Engine error validating %s against %s (version %s, strict=%s): %s",
            filename, config.location, config.version, config.strict, e,
        )
        raise
    return results


async def validate_document(
    data: bytes,
    filename: str,
    config: ValidatorConfig,
    store: SchemaStore,
) -> list[ViolationRecord]:
    """Return every violation found in ``data``, flattened across documents."""
    results = await validate_documents(data, filename, config, store)
    violations = [v for result in results for v in result.violations]
    logger.debug(
        "%s: %d document(s), %d violation(s) against %s",
        filename, len(results), len(violations), config.location,
    )
    return violations
