"""Build reference trees from directories on disk."""

from __future__ import annotations

import logging
from pathlib import Path

from treedeco.config.models import ScannerSettings

from .errors import TreeError
from .models import Directory, FileEntry, Root

LOGGER = logging.getLogger(__name__)


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


class TreeScanner:
    """Mirror a filesystem directory into a :class:`Root` subject to filters."""

    def __init__(self, *, include_hidden: bool = False, follow_symlinks: bool = False) -> None:
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks

    @classmethod
    def from_settings(cls, settings: ScannerSettings) -> "TreeScanner":
        """Build a scanner configured from ``settings``."""
        return cls(include_hidden=settings.include_hidden, follow_symlinks=settings.follow_symlinks)

    def scan(self, path: Path) -> Root:
        """Return a tree whose root mirrors ``path``.

        Args:
            path: Directory (or single file) to mirror.

        Returns:
            Root: Tree with one node per discovered entry, children sorted by name.

        Raises:
            TreeError: If ``path`` does not exist.
        """
        path = path.expanduser().resolve()
        if not path.exists():
            raise TreeError(f"No such file or directory: {path}")

        root = Root(path.name)
        if path.is_file():
            FileEntry(path.name, root)
            return root

        visited = {path}
        stack: list[tuple[Path, Directory]] = [(path, root)]
        while stack:
            directory_path, node = stack.pop()
            for entry in self._iter_entries(directory_path):
                if entry.is_dir() and (self.follow_symlinks or not entry.is_symlink()):
                    real = entry.resolve()
                    if real in visited:
                        LOGGER.debug("Skipping already visited directory %s", entry)
                        continue
                    visited.add(real)
                    stack.append((entry, Directory(entry.name, node)))
                elif entry.is_file():
                    FileEntry(entry.name, node)
        return root

    def _iter_entries(self, directory: Path) -> list[Path]:
        """Return the filtered, name-sorted entries of ``directory``."""
        try:
            entries = sorted(directory.iterdir(), key=lambda item: item.name)
        except OSError as exc:
            LOGGER.debug("Skipping unreadable directory %s: %s", directory, exc)
            return []
        if self.include_hidden:
            return entries
        return [entry for entry in entries if not _is_hidden(entry.name)]


__all__ = ["TreeScanner"]
