"""Content collaborator interface -- where Candidate bytes come from."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ContentNotFoundError(LookupError):
    """The file does not exist at the requested ref."""


class TransientContentError(Exception):
    """The content host failed in a way that may succeed on a later run."""


class ContentSource(Protocol):
    async def fetch(self, path: str, ref: str) -> bytes:
        """Return the raw bytes of ``path`` at ``ref``.

        Raises ContentNotFoundError or TransientContentError.
        """
        ...


class LocalContentSource:
    """Reads files from a local checkout; ``ref`` is ignored."""

    def __init__(self, root: Path) -> None:
        self._root = root

    async def fetch(self, path: str, ref: str) -> bytes:
        target = self._root / path
        if not target.is_file():
            raise ContentNotFoundError(f"Couldn't load {path}")
        try:
            return target.read_bytes()
        except OSError as e:
            raise TransientContentError(f"Couldn't load contents of {path}: {e}") from e
