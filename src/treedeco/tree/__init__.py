"""Reference file tree consumed by the decoration engine."""

from .discovery import TreeScanner
from .errors import InvalidMoveError, TreeError
from .models import Directory, FileEntry, FileType, Root

__all__ = [
    "Directory",
    "FileEntry",
    "FileType",
    "Root",
    "TreeScanner",
    "TreeError",
    "InvalidMoveError",
]
