"""Annotations: finished, line-anchored diagnostics."""

from kubevalidator.annotations.builder import (
    build_engine_error_annotation,
    build_load_error_annotation,
    build_violation_annotation,
    detail_string,
    doc_link,
    sort_annotations,
)
from kubevalidator.annotations.models import Annotation, AnnotationLevel

__all__ = [
    "Annotation",
    "AnnotationLevel",
    "build_engine_error_annotation",
    "build_load_error_annotation",
    "build_violation_annotation",
    "detail_string",
    "doc_link",
    "sort_annotations",
]
