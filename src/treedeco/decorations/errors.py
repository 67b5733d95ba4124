"""Decoration engine errors."""


class DecorationError(Exception):
    """Base exception for decoration engine operations."""


class UnsupportedRootError(DecorationError, TypeError):
    """Raised when a manager is built on something other than a tree root."""


class ManagerDisposedError(DecorationError, RuntimeError):
    """Raised when a disposed manager is asked to track a decoration."""
