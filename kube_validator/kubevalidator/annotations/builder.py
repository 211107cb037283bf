"""Build annotations from violations, engine errors and load errors."""

from __future__ import annotations

from kubevalidator.annotations.models import Annotation
from kubevalidator.localizer.models import FALLBACK_RANGE, LineRange
from kubevalidator.schema.models import SchemaSpec
from kubevalidator.schema.resolver import display_name, schema_location
from kubevalidator.validator.models import EngineError, ViolationRecord

API_REFERENCE_URL = "https://kubernetes.io/docs/reference/generated/kubernetes-api"


def detail_string(details: dict[str, str]) -> str:
    """Render a detail mapping as a bullet list sorted by key."""
    return "".join(f"* {key}: {details[key]}\n" for key in sorted(details))


def doc_link(version: str, kind: str, api_version: str) -> str:
    """Link to the generated API reference for ``kind`` at ``version``.

    The reference anchors read ``#deployment-v1-apps`` for ``apps/v1``, so the
    apiVersion segments are reversed.
    """
    minor = ".".join(version.lstrip("v").split(".")[:2])
    anchor = "-".join(reversed(api_version.split("/")))
    return f"{API_REFERENCE_URL}/v{minor}/#{kind.lower()}-{anchor}"


def violation_message(violation: ViolationRecord, spec: SchemaSpec) -> str:
    if not spec.pinned:
        return violation.message
    link = doc_link(spec.version, violation.kind, violation.api_version)
    return f"{violation.message}; see {link} for more details"


def build_violation_annotation(
    path: str,
    blob_href: str,
    violation: ViolationRecord,
    line_range: LineRange,
    spec: SchemaSpec,
) -> Annotation:
    return Annotation(
        path=path,
        blob_href=blob_href,
        start_line=line_range.start,
        end_line=line_range.end,
        title=f"Error validating {violation.kind} against {display_name(spec)} schema",
        message=violation_message(violation, spec),
        raw_details=detail_string(violation.details),
    )


def build_engine_error_annotation(
    path: str,
    blob_href: str,
    error: EngineError,
    spec: SchemaSpec,
) -> Annotation:
    name = display_name(spec)
    location = schema_location(spec)
    if error.kind:
        title = f"Internal error when validating {error.kind} against {name} schemas from {location}"
        message = (
            "This may indicate an incorrect 'apiVersion' or 'kind' field, a missing "
            f"upstream schema version, or an intermittent error. Details:\n\n{error}"
        )
    else:
        title = f"Internal error when validating against {name} schemas from {location}"
        message = str(error)
    return Annotation(
        path=path,
        blob_href=blob_href,
        start_line=FALLBACK_RANGE.start,
        end_line=FALLBACK_RANGE.end,
        title=title,
        message=message,
    )


def build_load_error_annotation(path: str, blob_href: str, error: Exception | str) -> Annotation:
    return Annotation(
        path=path,
        blob_href=blob_href,
        start_line=FALLBACK_RANGE.start,
        end_line=FALLBACK_RANGE.end,
        title=f"Error loading {path}",
        message=str(error),
    )


def sort_annotations(annotations: list[Annotation]) -> list[Annotation]:
    """Drop exact duplicates and order by (path, start line, end line).

    Annotations sharing the ordering key keep their relative order.
    """
    unique = list(dict.fromkeys(annotations))
    return sorted(unique, key=lambda a: a.sort_key)
