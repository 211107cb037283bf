"""Edit policies and per-violation localization strategies.

An edit policy decides how the addressed node is disturbed before diffing,
and therefore which hunk shape identifies it:

* SentinelReplacePolicy replaces the node with a marker string; the hunk
  whose added lines contain the marker is the node.
* RemovePolicy deletes the node; the first pure deletion hunk is the node.

Both report the range on the original side of the hunk.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable

from kubevalidator.localizer.models import Hunk, LineRange
from kubevalidator.localizer.patch import PatchOp, apply_patch
from kubevalidator.localizer.pointer import escape_token, to_pointer
from kubevalidator.validator.models import ViolationRecord

SENTINEL = "KUBEVALIDATOR___LINE___MARKER___7F3C"

PathConverter = Callable[[str], str]


def original_range(hunk: Hunk) -> LineRange:
    """Inclusive range covered by ``hunk`` in the original text."""
    if hunk.old_lines == 0:
        line = max(hunk.old_start, 1)
        return LineRange(start=line, end=line)
    return LineRange(start=hunk.old_start, end=hunk.old_start + hunk.old_lines - 1)


class EditPolicy(ABC):
    """Disturbs one node of a document and recognises the resulting hunk."""

    def __init__(self, converter: PathConverter = to_pointer) -> None:
        self.converter = converter

    def pointer(self, path: str) -> str:
        return self.converter(path)

    @abstractmethod
    def patch(self, source: str, pointer: str, document_index: int = 0) -> str:
        ...

    @abstractmethod
    def select(self, hunks: list[Hunk]) -> LineRange | None:
        """Return the range of the hunk produced by :meth:`patch`, if any."""
        ...


class SentinelReplacePolicy(EditPolicy):
    def patch(self, source: str, pointer: str, document_index: int = 0) -> str:
        return apply_patch(source, pointer, PatchOp.replace, SENTINEL, document_index)

    def select(self, hunks: list[Hunk]) -> LineRange | None:
        for hunk in hunks:
            if any(SENTINEL in line for line in hunk.added):
                return original_range(hunk)
        return None


class RemovePolicy(EditPolicy):
    def patch(self, source: str, pointer: str, document_index: int = 0) -> str:
        return apply_patch(source, pointer, PatchOp.remove, None, document_index)

    def select(self, hunks: list[Hunk]) -> LineRange | None:
        deletions = [h for h in hunks if h.old_lines > 0]
        for hunk in deletions:
            if hunk.new_lines == 0:
                return original_range(hunk)
        if deletions:
            return original_range(deletions[0])
        return None


class LocalizationStrategy(str, Enum):
    """How the pointer for a violation is chosen."""

    default = "default"
    additional_property = "additional_property"


_STRATEGIES: dict[str, LocalizationStrategy] = {
    "additional_property_not_allowed": LocalizationStrategy.additional_property,
}


def strategy_for(violation_type: str) -> LocalizationStrategy:
    return _STRATEGIES.get(violation_type, LocalizationStrategy.default)


def target_pointers(violation: ViolationRecord, policy: EditPolicy) -> list[str]:
    """Pointers to try for ``violation``, most precise first."""
    base = policy.pointer(violation.path)
    strategy = strategy_for(violation.violation_type)
    if strategy is LocalizationStrategy.additional_property:
        prop = violation.details.get("property")
        if prop:
            return [f"{base}/{escape_token(prop)}", base]
    return [base]
