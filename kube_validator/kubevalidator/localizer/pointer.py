"""Convert validator paths into slash-delimited pointers.

Validators address nodes differently: ``(root).spec.containers.0.image``,
``spec.containers[0].image`` or ``metadata.annotations["app.kubernetes.io/name"]``.
All of them normalise to ``/spec/containers/0/image`` style pointers, with
``~`` and ``/`` inside keys escaped as ``~0`` and ``~1``.
"""

from __future__ import annotations

import json
import re

ROOT_PREFIX = "(root)"

_SEGMENT_RE = re.compile(
    r"""
    \.(?P<key>[^.\[\]]+)               # .key or .0
    | \[(?P<index>\d+)\]                # [0]
    | \[(?P<quoted>"(?:[^"\\]|\\.)*")\] # ["dotted.key"]
    """,
    re.VERBOSE,
)


class PointerError(ValueError):
    """The path could not be parsed into pointer segments."""


def escape_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def unescape_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def path_segments(path: str) -> list[str]:
    """Split a dotted/bracketed logical path into raw (unescaped) segments."""
    path = path.strip()
    if path.startswith(ROOT_PREFIX):
        path = path[len(ROOT_PREFIX):]
    if not path:
        return []
    if path[0] not in ".[":
        path = "." + path

    segments: list[str] = []
    pos = 0
    while pos < len(path):
        match = _SEGMENT_RE.match(path, pos)
        if match is None:
            raise PointerError(f"Cannot parse path {path!r} at offset {pos}")
        if match.group("key") is not None:
            segments.append(match.group("key"))
        elif match.group("index") is not None:
            segments.append(match.group("index"))
        else:
            segments.append(json.loads(match.group("quoted")))
        pos = match.end()
    return segments


def to_pointer(path: str) -> str:
    """Return the pointer addressing ``path``; the root is the empty pointer."""
    return "".join("/" + escape_token(segment) for segment in path_segments(path))


def split_pointer(pointer: str) -> list[str]:
    """Inverse of building a pointer: return its unescaped tokens."""
    if not pointer:
        return []
    if not pointer.startswith("/"):
        raise PointerError(f"Pointer {pointer!r} must start with '/'")
    return [unescape_token(token) for token in pointer[1:].split("/")]
