"""Structural validation of Kubernetes manifests against JSON schemas."""

from kubevalidator.validator.adapter import ValidatorConfig, validate_document
from kubevalidator.validator.engine import SchemaStore
from kubevalidator.validator.models import DocumentResult, EngineError, ViolationRecord

__all__ = [
    "DocumentResult",
    "EngineError",
    "SchemaStore",
    "ValidatorConfig",
    "ViolationRecord",
    "validate_document",
]
