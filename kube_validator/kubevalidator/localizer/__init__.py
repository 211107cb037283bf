"""Recover source line ranges for violations reported on parsed documents."""

from kubevalidator.localizer.engine import DEFAULT_POLICY, localize, localize_pointer
from kubevalidator.localizer.models import FALLBACK_RANGE, Hunk, LineRange
from kubevalidator.localizer.patch import PatchError, PatchOp, PathNotFoundError, apply_patch
from kubevalidator.localizer.pointer import PointerError, to_pointer
from kubevalidator.localizer.strategies import (
    EditPolicy,
    LocalizationStrategy,
    RemovePolicy,
    SentinelReplacePolicy,
    strategy_for,
)

__all__ = [
    "DEFAULT_POLICY",
    "EditPolicy",
    "FALLBACK_RANGE",
    "Hunk",
    "LineRange",
    "LocalizationStrategy",
    "PatchError",
    "PatchOp",
    "PathNotFoundError",
    "PointerError",
    "RemovePolicy",
    "SentinelReplacePolicy",
    "apply_patch",
    "localize",
    "localize_pointer",
    "strategy_for",
    "to_pointer",
]
