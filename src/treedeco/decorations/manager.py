"""Decoration resolution engine.

The manager maps every node it has seen to a :class:`DecorationMeta` pair of
composites. Nodes that are never targeted directly still get metadata the
first time they, or one of their descendants, are resolved; that metadata
simply points at the parent's ``inheritable`` composite until a decoration
targets or negates the node itself.

Terminology used below:

* a *direct target* is a node listed in a decoration's applied or negated
  targets;
* every other node is an implicit target that inherits from its parent's
  ``inheritable`` composite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from treedeco.config.models import ResolutionSettings
from treedeco.events import DisposableGroup
from treedeco.tree import Directory, FileEntry, FileType, Root

from .composite import CompositeKind, DecorationComposite
from .errors import ManagerDisposedError, UnsupportedRootError
from .models import Decoration

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DecorationMeta:
    """Resolved decoration state attached to one node.

    Attributes:
        applicable: Decorations rendered on the node itself.
        inheritable: Decorations handed down to children; None for files.
    """

    applicable: DecorationComposite
    inheritable: Optional[DecorationComposite]


class DecorationsManager:
    """Resolve decorations for every node of a tree and keep them current."""

    def __init__(self, root: Root, *, settings: ResolutionSettings | None = None) -> None:
        """Seed the manager with the tree's root.

        Args:
            root: Root of the tree to decorate.
            settings: Optional resolution settings; defaults apply when omitted.

        Raises:
            UnsupportedRootError: If ``root`` is not a :class:`Root`.
        """
        if not isinstance(root, Root):
            raise UnsupportedRootError(
                f"Unexpected object type {type(root).__name__!r}; expected a treedeco Root."
            )
        self._root = root
        self._settings = settings or ResolutionSettings()
        self._decorations: dict[Decoration, DisposableGroup] = {}
        self._meta: dict[int, DecorationMeta] = {}
        # node_id -> ids of cached nodes whose composites inherit from that node.
        self._dependents: dict[int, set[int]] = {}
        self._disposables = DisposableGroup()
        self._disposed = False

        # Base case for every lazy resolution walk.
        self._meta[root.node_id] = DecorationMeta(
            applicable=DecorationComposite(root.node_id, CompositeKind.APPLICABLE, None),
            inheritable=DecorationComposite(root.node_id, CompositeKind.INHERITABLE, None),
        )

        self._disposables.add(root.on_did_change_parent(self._switch_parent))
        self._disposables.add(root.on_did_dispose(self._forget_node))

    @property
    def root(self) -> Root:
        """Return the root the manager was seeded with."""
        return self._root

    @property
    def disposed(self) -> bool:
        """Return whether :meth:`dispose` has been called."""
        return self._disposed

    @property
    def decorations(self) -> tuple[Decoration, ...]:
        """Return the tracked decorations in registration order."""
        return tuple(self._decorations)

    @property
    def tracked_node_count(self) -> int:
        """Return the number of nodes with cached metadata."""
        return len(self._meta)

    def __contains__(self, node: object) -> bool:
        node_id = getattr(node, "node_id", None)
        return node_id is not None and node_id in self._meta

    def dispose(self) -> None:
        """Permanently disengage the manager from the tree."""
        if self._disposed:
            return
        for decoration in tuple(self._decorations):
            self.remove_decoration(decoration)
        self._disposables.dispose()
        self._meta.clear()
        self._dependents.clear()
        self._disposed = True
        LOGGER.info("Decorations manager for %r disposed", self._root)

    def has_decoration(self, decoration: Decoration) -> bool:
        """Return True while ``decoration`` is tracked by this manager."""
        return decoration in self._decorations

    def add_decoration(self, decoration: Decoration) -> None:
        """Track ``decoration`` and apply its current targets.

        Decorations have no visible effect until they target nodes; targets
        added before registration are replayed here.

        Args:
            decoration: Decoration to track.

        Raises:
            ManagerDisposedError: If the manager has been disposed.
        """
        if self._disposed:
            raise ManagerDisposedError("DecorationsManager disposed")
        if decoration in self._decorations:
            return

        subscriptions = DisposableGroup()
        subscriptions.add(decoration.on_did_add_target(self._target_decoration))
        subscriptions.add(decoration.on_did_remove_target(self._un_target_decoration))
        subscriptions.add(decoration.on_did_negate_target(self._negate_decoration))
        subscriptions.add(decoration.on_did_un_negate_target(self._un_negate_decoration))
        self._decorations[decoration] = subscriptions

        for target in decoration.applied_targets:
            self._target_decoration(decoration, target)
        for target in decoration.negated_targets:
            self._negate_decoration(decoration, target)

    def remove_decoration(self, decoration: Decoration) -> None:
        """Undo every effect ``decoration`` has on the tree.

        The decoration's own targets are left intact, so calling
        :meth:`add_decoration` again with unchanged targets restores the
        previous state.

        Args:
            decoration: Decoration to stop tracking.
        """
        subscriptions = self._decorations.pop(decoration, None)
        if subscriptions is None:
            return

        for target in decoration.applied_targets:
            meta = self._meta.get(target.node_id)
            if meta is not None:
                meta.applicable.remove(decoration)
                if meta.inheritable is not None:
                    meta.inheritable.remove(decoration)

        for target in decoration.negated_targets:
            meta = self._meta.get(target.node_id)
            if meta is not None:
                meta.applicable.un_negate(decoration)
                if meta.inheritable is not None:
                    meta.inheritable.un_negate(decoration)

        subscriptions.dispose()

    def get_decorations(self, node: FileEntry | None) -> list[str] | None:
        """Return the resolved decoration identifiers for ``node``.

        Resolution accounts for inheritance and for negations that void part
        or all of it.

        Args:
            node: File or directory to resolve.

        Returns:
            list[str] | None: Identifiers in effect, or None if the node cannot be resolved.
        """
        if node is None or getattr(node, "type", None) not in (FileType.FILE, FileType.DIRECTORY):
            return None
        meta = self.get_decoration_data(node)
        if meta is None:
            return None
        return meta.applicable.composite_css_classlist

    def get_decoration_data(self, node: FileEntry | None) -> DecorationMeta | None:
        """Return the metadata for ``node``, building it along the ancestor chain if needed.

        Args:
            node: Node to resolve.

        Returns:
            DecorationMeta | None: Cached or freshly built metadata, or None when the
            engine is disposed or the node is not connected to a resolvable ancestor.
        """
        if self._disposed or node is None:
            return None
        meta = self._meta.get(node.node_id)
        if meta is not None:
            return meta

        pending: list[FileEntry] = []
        current: FileEntry | None = node
        while meta is None:
            if current is None or current.disposed:
                return None
            if len(pending) >= self._settings.max_depth:
                LOGGER.warning(
                    "Gave up resolving %r after %d ancestors", node, self._settings.max_depth
                )
                return None
            pending.append(current)
            current = current.parent
            if current is not None:
                meta = self._meta.get(current.node_id)

        for item in reversed(pending):
            if meta.inheritable is None:
                return None
            meta = self._build_meta(item, meta.inheritable)
        return meta

    # Internal helpers -------------------------------------------------

    def _build_meta(self, node: FileEntry, parent: DecorationComposite) -> DecorationMeta:
        meta = DecorationMeta(
            applicable=DecorationComposite(node.node_id, CompositeKind.APPLICABLE, parent),
            inheritable=(
                DecorationComposite(node.node_id, CompositeKind.INHERITABLE, parent)
                if node.type is FileType.DIRECTORY
                else None
            ),
        )
        self._meta[node.node_id] = meta
        self._dependents.setdefault(parent.target_id, set()).add(node.node_id)
        LOGGER.debug("Created decoration metadata for %r", node)
        return meta

    def _target_decoration(self, decoration: Decoration, target: FileEntry) -> None:
        meta = self._resolve_target(decoration, target, "target", decoration.has_target(target))
        if meta is None:
            return
        meta.applicable.add(decoration)
        if meta.inheritable is not None:
            meta.inheritable.add(decoration)

    def _un_target_decoration(self, decoration: Decoration, target: FileEntry) -> None:
        meta = self._resolve_target(
            decoration, target, "untarget", not decoration.has_target(target)
        )
        if meta is None:
            return
        meta.applicable.remove(decoration)
        if meta.inheritable is not None:
            meta.inheritable.remove(decoration)

    def _negate_decoration(self, decoration: Decoration, target: FileEntry) -> None:
        meta = self._resolve_target(
            decoration, target, "negate", decoration.has_negated_target(target)
        )
        if meta is None:
            return
        meta.applicable.negate(decoration)
        if meta.inheritable is not None:
            meta.inheritable.negate(decoration)

    def _un_negate_decoration(self, decoration: Decoration, target: FileEntry) -> None:
        meta = self._resolve_target(
            decoration, target, "un-negate", not decoration.has_negated_target(target)
        )
        if meta is None:
            return
        meta.applicable.un_negate(decoration)
        if meta.inheritable is not None:
            meta.inheritable.un_negate(decoration)

    def _resolve_target(
        self, decoration: Decoration, target: FileEntry, action: str, current: bool
    ) -> DecorationMeta | None:
        """Return the metadata an event handler should update, or None to skip the event.

        Events are skipped when the decoration stopped being tracked or when the
        decoration's state no longer matches the event, both of which happen when
        an earlier listener of the same dispatch mutated it.
        """
        if decoration not in self._decorations or not current:
            LOGGER.debug("Ignoring stale %s of %r on %r", action, decoration, target)
            return None
        meta = self.get_decoration_data(target)
        if meta is None:
            LOGGER.debug("Ignoring %s of %r on unresolvable node %r", action, decoration, target)
        return meta

    def _switch_parent(
        self,
        target: FileEntry,
        previous_parent: Optional[Directory],
        new_parent: Optional[Directory],
    ) -> None:
        meta = self._meta.get(target.node_id)
        if meta is None:
            # Built from the new parent chain on next access.
            return

        parent_meta = self.get_decoration_data(new_parent)
        if parent_meta is None or parent_meta.inheritable is None:
            if self._settings.reparent_fallback == "keep":
                LOGGER.debug("Keeping previous inheritance for %r; new parent unresolvable", target)
                return
            LOGGER.debug("Detaching %r from inherited decorations", target)
            new_base = None
        else:
            new_base = parent_meta.inheritable

        self._rebase(target.node_id, meta, new_base)

    def _rebase(
        self, node_id: int, meta: DecorationMeta, base: Optional[DecorationComposite]
    ) -> None:
        previous = meta.applicable.parent
        if previous is not None:
            self._dependents.get(previous.target_id, set()).discard(node_id)
        if base is not None:
            self._dependents.setdefault(base.target_id, set()).add(node_id)
        meta.applicable.change_parent(base)
        if meta.inheritable is not None:
            meta.inheritable.change_parent(base)

    def _forget_node(self, node: FileEntry) -> None:
        meta = self._meta.pop(node.node_id, None)
        if meta is None:
            return
        LOGGER.debug("Evicted decoration metadata for %r", node)
        base = meta.applicable.parent
        if base is not None:
            self._dependents.get(base.target_id, set()).discard(node.node_id)

        # Survivors still linked here were detached earlier under the "keep" fallback.
        for child_id in self._dependents.pop(node.node_id, ()):
            child = self._meta.get(child_id)
            if child is not None and child.applicable.parent is meta.inheritable:
                LOGGER.debug("Dropping inheritance from disposed %r for node %d", node, child_id)
                self._rebase(child_id, child, None)


__all__ = ["DecorationMeta", "DecorationsManager"]
