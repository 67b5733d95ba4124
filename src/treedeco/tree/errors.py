"""Reference tree errors."""


class TreeError(Exception):
    """Base exception for reference tree operations."""


class InvalidMoveError(TreeError):
    """Raised when a node cannot be moved to the requested parent."""
