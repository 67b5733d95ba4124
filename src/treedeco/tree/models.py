"""In-memory file tree used as the structural collaborator of the decoration engine.

Nodes carry an opaque ``node_id`` that stays stable for their whole life.
Structural notifications (reparent and dispose) are tree-wide and published
by the :class:`Root`, so a single subscription observes every node.
"""

from __future__ import annotations

import itertools
import logging
from enum import Enum
from typing import Iterator, Optional

from treedeco.events import Disposable, Emitter

from .errors import InvalidMoveError, TreeError

LOGGER = logging.getLogger(__name__)

_NODE_IDS = itertools.count(1)


class FileType(str, Enum):
    """Kinds of entries a tree can hold."""

    FILE = "file"
    DIRECTORY = "directory"


class FileEntry:
    """Leaf node of the tree."""

    type: FileType = FileType.FILE

    def __init__(self, name: str, parent: Optional["Directory"]) -> None:
        self.node_id: int = next(_NODE_IDS)
        self.name = name
        self.disposed = False
        self._parent: Optional[Directory] = None
        self._root: Optional[Root] = None
        if parent is not None:
            if parent.disposed:
                raise TreeError(f"Cannot attach {name!r} to disposed directory {parent.path!r}")
            parent._attach(self)
            self._parent = parent
            self._root = parent.root

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.path!r}, id={self.node_id})"

    @property
    def parent(self) -> Optional["Directory"]:
        """Return the containing directory, or None for a root or detached node."""
        return self._parent

    @property
    def root(self) -> Optional["Root"]:
        """Return the root this node was created under."""
        return self._root

    @property
    def depth(self) -> int:
        """Return the number of ancestors between this node and the top of its chain."""
        depth = 0
        current = self._parent
        while current is not None:
            depth += 1
            current = current._parent
        return depth

    @property
    def path(self) -> str:
        """Return the slash-joined names from the top of the chain down to this node."""
        parts: list[str] = []
        current: Optional[FileEntry] = self
        while current is not None and current._parent is not None:
            parts.append(current.name)
            current = current._parent
        return "/".join(reversed(parts))

    def is_descendant_of(self, other: "FileEntry") -> bool:
        """Return True if ``other`` is a strict ancestor of this node."""
        current = self._parent
        while current is not None:
            if current is other:
                return True
            current = current._parent
        return False

    def move_to(self, new_parent: "Directory") -> None:
        """Reparent this node under ``new_parent``.

        Args:
            new_parent: Destination directory within the same tree.

        Raises:
            InvalidMoveError: If the move would break the tree's structure.
        """
        if self.disposed:
            raise InvalidMoveError(f"Cannot move disposed node {self!r}")
        if not isinstance(new_parent, Directory):
            raise InvalidMoveError(f"Destination {new_parent!r} is not a directory")
        if new_parent.disposed:
            raise InvalidMoveError(f"Destination {new_parent!r} is disposed")
        if new_parent is self or new_parent.is_descendant_of(self):
            raise InvalidMoveError(f"Cannot move {self!r} into its own subtree")
        if self._root is not None and new_parent.root is not self._root:
            raise InvalidMoveError(f"Cannot move {self!r} to a different tree")
        if new_parent is self._parent:
            return
        if new_parent.get_child(self.name) is not None:
            raise InvalidMoveError(f"{new_parent.path or '/'} already contains {self.name!r}")
        self._set_parent(new_parent)

    def detach(self) -> None:
        """Unlink this node from its parent, keeping it alive."""
        if self.disposed:
            raise InvalidMoveError(f"Cannot detach disposed node {self!r}")
        if self._parent is None:
            return
        self._set_parent(None)

    def dispose(self) -> None:
        """Dispose this node, announcing it on the tree's dispose stream."""
        if self.disposed:
            return
        self.disposed = True
        if self._parent is not None:
            self._parent._detach(self)
            self._parent = None
        LOGGER.debug("Disposed %r", self)
        if self._root is not None:
            self._root._dispose_emitter.emit(self)

    def _set_parent(self, new_parent: Optional["Directory"]) -> None:
        previous = self._parent
        if previous is not None:
            previous._detach(self)
        if new_parent is not None:
            new_parent._attach(self)
        self._parent = new_parent
        if self._root is not None:
            self._root._parent_emitter.emit(self, previous, new_parent)


class Directory(FileEntry):
    """Node that may contain other nodes."""

    type: FileType = FileType.DIRECTORY

    def __init__(self, name: str, parent: Optional["Directory"]) -> None:
        self._children: dict[str, FileEntry] = {}
        super().__init__(name, parent)

    @property
    def children(self) -> tuple[FileEntry, ...]:
        """Return the direct children in insertion order."""
        return tuple(self._children.values())

    def get_child(self, name: str) -> Optional[FileEntry]:
        """Return the direct child called ``name`` if present."""
        return self._children.get(name)

    def walk(self) -> Iterator[FileEntry]:
        """Yield every descendant depth-first, parents before children."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Directory):
                stack.extend(reversed(node.children))

    def dispose(self) -> None:
        if self.disposed:
            return
        for child in self.children:
            child.dispose()
        super().dispose()

    def _attach(self, node: FileEntry) -> None:
        existing = self._children.get(node.name)
        if existing is not None and existing is not node:
            raise InvalidMoveError(f"{self.path or '/'} already contains {node.name!r}")
        self._children[node.name] = node

    def _detach(self, node: FileEntry) -> None:
        if self._children.get(node.name) is node:
            del self._children[node.name]


class Root(Directory):
    """Top of a tree; publishes the tree-wide structural notifications."""

    def __init__(self, name: str = "") -> None:
        self._parent_emitter = Emitter()
        self._dispose_emitter = Emitter()
        super().__init__(name, None)
        self._root = self

    def on_did_change_parent(self, callback) -> Disposable:
        """Subscribe to ``callback(node, previous_parent, new_parent)`` reparent events."""
        return self._parent_emitter.subscribe(callback)

    def on_did_dispose(self, callback) -> Disposable:
        """Subscribe to ``callback(node)`` disposal events."""
        return self._dispose_emitter.subscribe(callback)

    def lookup(self, path: str) -> Optional[FileEntry]:
        """Return the node at the slash-separated ``path`` relative to this root.

        Args:
            path: Relative path such as ``"src/app/main.py"``; empty means the root.

        Returns:
            Optional[FileEntry]: Matching node, or None when any segment is missing.
        """
        node: FileEntry = self
        for segment in (part for part in path.split("/") if part):
            if not isinstance(node, Directory):
                return None
            child = node.get_child(segment)
            if child is None:
                return None
            node = child
        return node

    def move_to(self, new_parent: Directory) -> None:
        raise InvalidMoveError("The root cannot be moved")

    def detach(self) -> None:
        raise InvalidMoveError("The root cannot be detached")


__all__ = ["FileType", "FileEntry", "Directory", "Root"]
