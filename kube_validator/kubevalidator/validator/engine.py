"""Structural validation engine -- YAML documents against Kubernetes JSON schemas."""

from __future__ import annotations

import json
import logging
import re
from io import StringIO
from typing import Any, Iterable

import httpx
from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.validators import validator_for
from referencing.exceptions import Unresolvable
from ruamel.yaml import YAML, YAMLError

from kubevalidator.schema.resolver import schema_url
from kubevalidator.validator.models import DocumentResult, EngineError, ViolationRecord

logger = logging.getLogger(__name__)

ROOT = "(root)"

_REQUIRED_RE = re.compile(r"^'(.+)' is a required property$")

# jsonschema keyword -> error type name reported in annotations
VIOLATION_TYPES: dict[str, str] = {
    "type": "invalid_type",
    "required": "required",
    "additionalProperties": "additional_property_not_allowed",
    "enum": "enum",
    "const": "const",
    "pattern": "does_not_match_pattern",
    "format": "format",
    "minimum": "number_gte",
    "maximum": "number_lte",
    "exclusiveMinimum": "number_gt",
    "exclusiveMaximum": "number_lt",
    "minLength": "string_gte",
    "maxLength": "string_lte",
    "minItems": "array_min_items",
    "maxItems": "array_max_items",
    "uniqueItems": "unique",
    "minProperties": "array_min_properties",
    "maxProperties": "array_max_properties",
    "oneOf": "number_one_of",
    "anyOf": "number_any_of",
    "allOf": "number_all_of",
    "not": "number_not",
    "multipleOf": "multiple_of",
}

_JSON_TYPES: list[tuple[type, str]] = [
    (bool, "boolean"),
    (int, "integer"),
    (float, "number"),
    (str, "string"),
    (list, "array"),
    (dict, "object"),
]


class SchemaStore:
    """Fetches and caches JSON schemas by URL for the duration of one run.

    A store is created per validation run and passed down explicitly; nothing
    about schema locations is kept at module level.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._schemas: dict[str, dict[str, Any]] = {}

    async def get(self, url: str) -> dict[str, Any]:
        if url in self._schemas:
            return self._schemas[url]
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as e:
            raise EngineError([f"Failed to download schema from {url}: {e}"]) from e
        if resp.status_code != 200:
            raise EngineError(
                [f"Could not find schema at {url} (HTTP {resp.status_code})"]
            )
        try:
            schema = resp.json()
        except json.JSONDecodeError as e:
            raise EngineError([f"Schema at {url} is not valid JSON: {e}"]) from e
        if not isinstance(schema, dict):
            raise EngineError([f"Schema at {url} is not a JSON object"])
        logger.debug("Loaded schema %s", url)
        self._schemas[url] = schema
        return schema


def format_path(parts: Iterable[str | int]) -> str:
    """Render a jsonschema path as ``(root).spec.containers.0.image``.

    Keys that would be ambiguous in dotted form are rendered ``["a.b"]``.
    """
    rendered = ROOT
    for part in parts:
        if isinstance(part, int):
            rendered += f".{part}"
        elif any(c in part for c in '.[]"'):
            rendered += "[" + json.dumps(part) + "]"
        else:
            rendered += f".{part}"
    return rendered


def field_name(path: str) -> str:
    """Return ``path`` without its root prefix (``(root)`` for the root itself)."""
    if path == ROOT:
        return ROOT
    return path[len(ROOT):].lstrip(".")


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    for py_type, name in _JSON_TYPES:
        if isinstance(value, py_type):
            return name
    return type(value).__name__


def _details(error: ValidationError, path: str, violation_type: str) -> dict[str, str]:
    details = {
        "context": path,
        "field": field_name(path),
        "keyword": str(error.validator),
        "given": _json_type(error.instance),
    }
    expected = error.validator_value
    if violation_type == "required":
        match = _REQUIRED_RE.match(error.message)
        if match:
            details["property"] = match.group(1)
    elif isinstance(expected, list):
        details["expected"] = ", ".join(str(v) for v in expected)
    elif not isinstance(expected, dict):
        details["expected"] = str(expected)

    if violation_type == "additional_property_not_allowed" and isinstance(error.instance, dict):
        allowed = set((error.schema or {}).get("properties", {}))
        extras = sorted(str(k) for k in error.instance if str(k) not in allowed)
        if extras:
            details["property"] = extras[0]
    return details


def _violation(
    error: ValidationError, kind: str, api_version: str, document_index: int
) -> ViolationRecord:
    path = format_path(error.absolute_path)
    violation_type = VIOLATION_TYPES.get(str(error.validator), str(error.validator))
    field = field_name(path)
    return ViolationRecord(
        path=path,
        message=f"{field}: {error.message}",
        kind=kind,
        api_version=api_version,
        violation_type=violation_type,
        field=field,
        document_index=document_index,
        details=_details(error, path, violation_type),
    )


def _sort_key(error: ValidationError) -> tuple[list[str], str]:
    return [str(p) for p in error.absolute_path], str(error.validator)


def load_documents(data: bytes) -> list[Any]:
    """Parse a YAML stream into JSON-compatible documents, keeping empty slots.

    Empty documents stay in the list as ``None`` so indices line up with the
    position of each document in the stream.
    """
    yaml = YAML(typ="safe", pure=True)
    try:
        documents = list(yaml.load_all(StringIO(data.decode("utf-8"))))
    except (YAMLError, UnicodeDecodeError) as e:
        raise EngineError([f"Failed to decode YAML: {e}"]) from e
    # Round-trip through JSON so timestamps and other YAML-only types become strings
    try:
        return [json.loads(json.dumps(_json_keys(doc), default=str)) for doc in documents]
    except (TypeError, ValueError) as e:
        raise EngineError([f"Failed to convert YAML to JSON: {e}"]) from e


def _json_key(key: Any) -> Any:
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return str(key)


def _json_keys(value: Any, parents: frozenset[int] = frozenset()) -> Any:
    """Stringify mapping keys JSON cannot encode (dates, tuples, ...)."""
    if isinstance(value, (dict, list)):
        if id(value) in parents:
            raise ValueError("recursive alias in document")
        parents = parents | {id(value)}
    if isinstance(value, dict):
        return {_json_key(k): _json_keys(v, parents) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_keys(v, parents) for v in value]
    return value


async def validate(
    data: bytes,
    filename: str,
    location: str,
    openshift: bool,
    store: SchemaStore,
) -> list[DocumentResult]:
    """Validate every document in ``data`` against the schemas under ``location``.

    Returns one DocumentResult per non-empty document. Raises EngineError
    carrying every document-level failure when any document could not be
    evaluated.
    """
    documents = load_documents(data)
    results: list[DocumentResult] = []
    errors: list[str] = []

    for index, document in enumerate(documents):
        if document is None:
            continue
        if not isinstance(document, dict):
            errors.append(f"{filename}: document {index} is not a mapping")
            continue

        kind = document.get("kind")
        api_version = document.get("apiVersion")
        if not kind:
            errors.append(f"{filename}: Missing a kind key")
            continue
        if not api_version:
            errors.append(f"{filename}: Missing an apiVersion key")
            results.append(DocumentResult(document_index=index, kind=str(kind), api_version=""))
            continue
        kind = str(kind)
        api_version = str(api_version)
        results.append(DocumentResult(document_index=index, kind=kind, api_version=api_version))

        try:
            schema = await store.get(schema_url(location, kind, api_version, openshift))
        except EngineError as e:
            errors.extend(e.errors)
            continue

        try:
            validator_cls = validator_for(schema, default=Draft4Validator)
            validator_cls.check_schema(schema)
            errors_found = sorted(validator_cls(schema).iter_errors(document), key=_sort_key)
        except SchemaError as e:
            errors.append(f"{filename}: schema for {kind} {api_version} is invalid: {e.message}")
            continue
        except Unresolvable as e:
            errors.append(f"{filename}: schema for {kind} {api_version} has an unresolvable reference: {e}")
            continue
        results[-1].violations.extend(
            _violation(error, kind, api_version, index) for error in errors_found
        )

    if errors:
        first_kind = results[0].kind if results else None
        raise EngineError(errors, kind=first_kind)
    return results
