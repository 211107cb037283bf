"""Line-oriented unified diffs and hunk parsing."""

from __future__ import annotations

import difflib
import re

from kubevalidator.localizer.models import Hunk

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def unified_diff(before: str, after: str, context: int = 0) -> str:
    """Return a unified diff of two texts, without trailing newlines on lines."""
    return "\n".join(
        difflib.unified_diff(
            before.splitlines(),
            after.splitlines(),
            fromfile="original",
            tofile="patched",
            n=context,
            lineterm="",
        )
    )


def parse_hunks(diff_text: str) -> list[Hunk]:
    """Parse the hunks of a single-file unified diff.

    A zero-length side reports the line *before* the change as its start,
    exactly as ``diff -u`` does.
    """
    hunks: list[Hunk] = []
    current: Hunk | None = None

    for line in diff_text.splitlines():
        match = _HUNK_HEADER_RE.match(line)
        if match:
            old_start, old_lines, new_start, new_lines = match.groups()
            current = Hunk(
                old_start=int(old_start),
                old_lines=1 if old_lines is None else int(old_lines),
                new_start=int(new_start),
                new_lines=1 if new_lines is None else int(new_lines),
            )
            hunks.append(current)
        elif current is not None and line[:1] in (" ", "-", "+", "\\"):
            current.lines.append(line)
        # file headers (---/+++) precede the first hunk and are skipped

    return hunks


def diff_hunks(before: str, after: str, context: int = 0) -> list[Hunk]:
    return parse_hunks(unified_diff(before, after, context))
