"""Structured patching of YAML source through a ruamel.yaml round trip.

Edits land on the addressed node of the parsed document, and the rest of the
document is re-emitted with its comments, quoting and indentation intact, so a
line diff against the original isolates the edited node.
"""

from __future__ import annotations

from enum import Enum
from io import StringIO
from typing import Any

from ruamel.yaml import YAML, YAMLError

from kubevalidator.localizer.pointer import split_pointer


class PatchOp(str, Enum):
    replace = "replace"
    remove = "remove"


class PatchError(Exception):
    """The patch could not be applied to the document."""


class PathNotFoundError(PatchError):
    """The pointer does not resolve against the document structure."""


def guess_indent(source: str) -> tuple[int, int]:
    """Return ``(mapping_indent, sequence_dash_offset)`` used by ``source``.

    Looks at the first line nested under a bare ``key:`` line. Defaults to
    two-space mappings with sequences flush against their parent key.
    """
    mapping: int | None = None
    offset: int | None = None
    prev_indent = 0
    prev_is_key = False

    for line in source.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("---"):
            continue
        indent = len(line) - len(line.lstrip(" "))
        if prev_is_key:
            if stripped.startswith("-"):
                if offset is None and indent >= prev_indent:
                    offset = indent - prev_indent
            elif mapping is None and indent > prev_indent:
                mapping = indent - prev_indent
        if mapping is not None and offset is not None:
            break
        prev_indent = indent
        prev_is_key = stripped.endswith(":") and not stripped.startswith("-")

    return mapping or 2, offset or 0


def _round_trip_yaml(source: str) -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 4096
    mapping, offset = guess_indent(source)
    yaml.indent(mapping=mapping, sequence=offset + 2, offset=offset)
    yaml.explicit_start = source.lstrip().startswith("---")
    return yaml


def _child(node: Any, token: str) -> tuple[Any, Any]:
    """Return ``(container_key, child)`` for ``token`` within ``node``."""
    if isinstance(node, dict):
        for key in node:
            if str(key) == token:
                return key, node[key]
        raise PathNotFoundError(f"Key {token!r} not found")
    if isinstance(node, list):
        if not token.isdigit() or int(token) >= len(node):
            raise PathNotFoundError(f"Index {token!r} out of range")
        return int(token), node[int(token)]
    raise PathNotFoundError(f"Cannot descend into scalar with {token!r}")


def apply_patch(
    source: str,
    pointer: str,
    op: PatchOp,
    value: Any = None,
    document_index: int = 0,
) -> str:
    """Apply one ``replace`` or ``remove`` operation and return the new source."""
    yaml = _round_trip_yaml(source)
    try:
        documents = list(yaml.load_all(source))
    except YAMLError as e:
        raise PatchError(f"Cannot parse document: {e}") from e

    if document_index >= len(documents):
        raise PathNotFoundError(f"Document {document_index} not found")

    tokens = split_pointer(pointer)
    if not tokens:
        if op is PatchOp.replace:
            documents[document_index] = value
        else:
            del documents[document_index]
    else:
        node = documents[document_index]
        for token in tokens[:-1]:
            _, node = _child(node, token)
        key, _ = _child(node, tokens[-1])
        if op is PatchOp.replace:
            node[key] = value
        else:
            del node[key]

    buf = StringIO()
    try:
        yaml.dump_all(documents, buf)
    except YAMLError as e:
        raise PatchError(f"Cannot serialise patched document: {e}") from e
    return buf.getvalue()
