"""Line localizer -- map a violation's logical path to source lines.

The validator only knows *where in the parsed structure* a document failed.
To recover source lines, the addressed node is disturbed with a structured
patch and the patched text is diffed against the original; the hunk carrying
the disturbance is the node's line range.
"""

from __future__ import annotations

import logging

from kubevalidator.localizer.diff import diff_hunks
from kubevalidator.localizer.models import FALLBACK_RANGE, LineRange
from kubevalidator.localizer.patch import PatchError
from kubevalidator.localizer.pointer import PointerError
from kubevalidator.localizer.strategies import (
    EditPolicy,
    SentinelReplacePolicy,
    target_pointers,
)
from kubevalidator.validator.models import ViolationRecord

logger = logging.getLogger(__name__)

DEFAULT_POLICY: EditPolicy = SentinelReplacePolicy()


def localize_pointer(
    source: str,
    pointer: str,
    document_index: int = 0,
    policy: EditPolicy = DEFAULT_POLICY,
    context: int = 0,
) -> LineRange | None:
    """Return the range of ``pointer`` in ``source``, or None if it cannot be found.

    Raises PatchError when the pointer does not resolve.
    """
    patched = policy.patch(source, pointer, document_index)
    return policy.select(diff_hunks(source, patched, context))


def localize(
    source: bytes,
    violation: ViolationRecord,
    policy: EditPolicy = DEFAULT_POLICY,
    context: int = 0,
) -> LineRange:
    """Best-effort line range for ``violation``; never raises.

    Falls back to line 1 when the path cannot be converted or resolved, or when
    no hunk carries the edit.
    """
    try:
        text = source.decode("utf-8")
        pointers = target_pointers(violation, policy)
    except (UnicodeDecodeError, PointerError) as e:
        logger.debug("Cannot localize %s: %s", violation.path, e)
        return FALLBACK_RANGE

    for pointer in pointers:
        try:
            line_range = localize_pointer(
                text, pointer, violation.document_index, policy, context,
            )
        except (PatchError, PointerError) as e:
            logger.debug("Patch at %s failed: %s", pointer, e)
            continue
        except Exception:
            logger.exception("Unexpected failure localizing %s", pointer)
            return FALLBACK_RANGE
        if line_range is not None:
            return line_range
        logger.debug("No hunk matched the edit at %s", pointer)

    return FALLBACK_RANGE
