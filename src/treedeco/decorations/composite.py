"""Layered decoration sets with live inheritance.

A composite resolves to ``(base | applied) - negated`` where ``base`` is the
resolved tuple of its parent composite. A composite with empty overlays hands
back its parent's tuple object unchanged, so untouched nodes share state with
the closest diverged ancestor instead of copying it. Diverged composites cache
their result against the identity of the base tuple it was built from; any
change upstream produces a new base tuple and so a cache miss on the next read.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .models import Decoration

_EMPTY: tuple[Decoration, ...] = ()


class CompositeKind(str, Enum):
    """Role a composite plays for its node."""

    APPLICABLE = "applicable"
    INHERITABLE = "inheritable"


class DecorationComposite:
    """Resolved decoration state for one node and kind."""

    __slots__ = (
        "target_id",
        "kind",
        "_parent",
        "_applied",
        "_negated",
        "_cache",
        "_cache_base",
    )

    def __init__(
        self,
        target_id: int,
        kind: CompositeKind,
        parent: Optional["DecorationComposite"],
    ) -> None:
        self.target_id = target_id
        self.kind = kind
        self._parent = parent
        self._applied: dict[Decoration, None] = {}
        self._negated: dict[Decoration, None] = {}
        self._cache: Optional[tuple[Decoration, ...]] = None
        self._cache_base: Optional[tuple[Decoration, ...]] = None

    def __repr__(self) -> str:
        return (
            f"DecorationComposite(target_id={self.target_id}, kind={self.kind.value}, "
            f"applied={len(self._applied)}, negated={len(self._negated)})"
        )

    @property
    def parent(self) -> Optional["DecorationComposite"]:
        return self._parent

    @property
    def is_diverged(self) -> bool:
        """Return True when the composite carries local applies or negations."""
        return bool(self._applied or self._negated)

    @property
    def applied(self) -> tuple[Decoration, ...]:
        return tuple(self._applied)

    @property
    def negated(self) -> tuple[Decoration, ...]:
        return tuple(self._negated)

    def add(self, decoration: Decoration) -> None:
        if decoration not in self._applied:
            self._applied[decoration] = None
            self._cache = None

    def remove(self, decoration: Decoration) -> None:
        if decoration in self._applied:
            del self._applied[decoration]
            self._cache = None

    def negate(self, decoration: Decoration) -> None:
        if decoration not in self._negated:
            self._negated[decoration] = None
            self._cache = None

    def un_negate(self, decoration: Decoration) -> None:
        if decoration in self._negated:
            del self._negated[decoration]
            self._cache = None

    def change_parent(self, parent: Optional["DecorationComposite"]) -> None:
        """Inherit from ``parent`` from now on, keeping the local overlays.

        Raises:
            ValueError: If ``parent`` would make the chain cyclic.
        """
        ancestor = parent
        while ancestor is not None:
            if ancestor is self:
                raise ValueError("A composite cannot inherit from itself")
            ancestor = ancestor._parent
        self._parent = parent

    @property
    def decorations(self) -> tuple[Decoration, ...]:
        """Return the resolved decorations, inherited ones first."""
        chain: list[DecorationComposite] = []
        composite: Optional[DecorationComposite] = self
        while composite is not None:
            chain.append(composite)
            composite = composite._parent

        resolved = _EMPTY
        for composite in reversed(chain):
            resolved = composite._resolve_against(resolved)
        return resolved

    @property
    def composite_css_classlist(self) -> list[str]:
        """Return the de-duplicated identifiers of the resolved decorations."""
        return list(dict.fromkeys(decoration.name for decoration in self.decorations))

    def _resolve_against(self, base: tuple[Decoration, ...]) -> tuple[Decoration, ...]:
        if not self._applied and not self._negated:
            return base
        if self._cache is not None and self._cache_base is base:
            return self._cache

        merged = dict.fromkeys(base)
        merged.update(self._applied)
        for decoration in self._negated:
            merged.pop(decoration, None)
        resolved = tuple(merged)

        self._cache = resolved
        self._cache_base = base
        return resolved


__all__ = ["CompositeKind", "DecorationComposite"]
