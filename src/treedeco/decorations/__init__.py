"""Decoration tokens, composites and the resolution engine."""

from .composite import CompositeKind, DecorationComposite
from .errors import DecorationError, ManagerDisposedError, UnsupportedRootError
from .manager import DecorationMeta, DecorationsManager
from .models import Decoration

__all__ = [
    "CompositeKind",
    "Decoration",
    "DecorationComposite",
    "DecorationError",
    "DecorationMeta",
    "DecorationsManager",
    "ManagerDisposedError",
    "UnsupportedRootError",
]
