"""Decoration tokens and their target bookkeeping."""

from __future__ import annotations

from typing import Callable

from treedeco.events import Disposable, Emitter
from treedeco.tree import FileEntry

TargetListener = Callable[["Decoration", FileEntry], None]


class Decoration:
    """Identity-compared visual annotation applied to or negated on tree nodes.

    A decoration keeps two independent ordered target sets. Change events fire
    only on real transitions, so re-applying an applied target is silent.

    Attributes:
        name: Identifier rendered for nodes the decoration resolves on.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._applied: dict[int, FileEntry] = {}
        self._negated: dict[int, FileEntry] = {}
        self._added = Emitter()
        self._removed = Emitter()
        self._negated_events = Emitter()
        self._un_negated = Emitter()

    def __repr__(self) -> str:
        return f"Decoration({self.name!r})"

    @property
    def applied_targets(self) -> tuple[FileEntry, ...]:
        """Return the nodes the decoration is applied to, in insertion order."""
        return tuple(self._applied.values())

    @property
    def negated_targets(self) -> tuple[FileEntry, ...]:
        """Return the nodes the decoration is negated on, in insertion order."""
        return tuple(self._negated.values())

    def has_target(self, target: FileEntry) -> bool:
        return target.node_id in self._applied

    def has_negated_target(self, target: FileEntry) -> bool:
        return target.node_id in self._negated

    def add_target(self, target: FileEntry) -> bool:
        """Apply the decoration to ``target``; returns False if it already was."""
        if target.node_id in self._applied:
            return False
        self._applied[target.node_id] = target
        self._added.emit(self, target)
        return True

    def remove_target(self, target: FileEntry) -> bool:
        """Stop applying the decoration to ``target``; returns False if it was not applied."""
        if self._applied.pop(target.node_id, None) is None:
            return False
        self._removed.emit(self, target)
        return True

    def negate_target(self, target: FileEntry) -> bool:
        """Suppress the decoration on ``target`` and its descendants."""
        if target.node_id in self._negated:
            return False
        self._negated[target.node_id] = target
        self._negated_events.emit(self, target)
        return True

    def un_negate_target(self, target: FileEntry) -> bool:
        """Lift a suppression previously placed with :meth:`negate_target`."""
        if self._negated.pop(target.node_id, None) is None:
            return False
        self._un_negated.emit(self, target)
        return True

    def on_did_add_target(self, callback: TargetListener) -> Disposable:
        return self._added.subscribe(callback)

    def on_did_remove_target(self, callback: TargetListener) -> Disposable:
        return self._removed.subscribe(callback)

    def on_did_negate_target(self, callback: TargetListener) -> Disposable:
        return self._negated_events.subscribe(callback)

    def on_did_un_negate_target(self, callback: TargetListener) -> Disposable:
        return self._un_negated.subscribe(callback)


__all__ = ["Decoration", "TargetListener"]
