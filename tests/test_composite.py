"""Tests for layered decoration composites."""

from __future__ import annotations

import pytest

from treedeco.decorations import CompositeKind, Decoration, DecorationComposite


def _chain(length: int) -> list[DecorationComposite]:
    """Return ``length`` inheritable composites, each parented to the previous one."""
    chain: list[DecorationComposite] = []
    parent = None
    for index in range(length):
        parent = DecorationComposite(index, CompositeKind.INHERITABLE, parent)
        chain.append(parent)
    return chain


def test_resolves_base_union_applied_minus_negated() -> None:
    inherited, local, hidden = Decoration("inherited"), Decoration("local"), Decoration("hidden")
    parent, child = _chain(2)
    parent.add(inherited)
    parent.add(hidden)
    child.add(local)
    child.negate(hidden)

    assert child.composite_css_classlist == ["inherited", "local"]
    assert child.decorations == (inherited, local)


def test_negation_beats_local_application() -> None:
    decoration = Decoration("badge")
    composite = DecorationComposite(1, CompositeKind.APPLICABLE, None)
    composite.add(decoration)
    composite.negate(decoration)

    assert composite.composite_css_classlist == []

    composite.un_negate(decoration)

    assert composite.composite_css_classlist == ["badge"]


def test_decoration_in_base_and_local_renders_once() -> None:
    decoration = Decoration("dup")
    parent, child = _chain(2)
    parent.add(decoration)
    child.add(decoration)

    assert child.composite_css_classlist == ["dup"]


def test_identifiers_are_deduplicated_across_distinct_decorations() -> None:
    composite = DecorationComposite(1, CompositeKind.APPLICABLE, None)
    composite.add(Decoration("same"))
    composite.add(Decoration("same"))

    assert composite.composite_css_classlist == ["same"]
    assert len(composite.decorations) == 2


def test_overlay_operations_are_idempotent() -> None:
    decoration = Decoration("x")
    composite = DecorationComposite(1, CompositeKind.APPLICABLE, None)

    composite.remove(decoration)
    composite.un_negate(decoration)
    composite.add(decoration)
    composite.add(decoration)
    composite.negate(decoration)
    composite.negate(decoration)

    assert composite.applied == (decoration,)
    assert composite.negated == (decoration,)


def test_undiverged_composites_share_the_parent_tuple() -> None:
    chain = _chain(50)
    chain[0].add(Decoration("top"))

    leaf = chain[-1]

    assert not leaf.is_diverged
    assert leaf.decorations is chain[0].decorations


def test_changes_upstream_are_visible_live() -> None:
    chain = _chain(5)
    leaf = chain[-1]
    leaf.add(Decoration("leaf"))
    assert leaf.composite_css_classlist == ["leaf"]

    late = Decoration("late")
    chain[1].add(late)

    assert leaf.composite_css_classlist == ["late", "leaf"]

    chain[3].negate(late)

    assert leaf.composite_css_classlist == ["leaf"]
    assert chain[2].composite_css_classlist == ["late"]


def test_diverged_composite_reuses_cached_result() -> None:
    parent, child = _chain(2)
    parent.add(Decoration("p"))
    child.add(Decoration("c"))

    assert child.decorations is child.decorations


def test_change_parent_keeps_overlays() -> None:
    old_parent = DecorationComposite(1, CompositeKind.INHERITABLE, None)
    new_parent = DecorationComposite(2, CompositeKind.INHERITABLE, None)
    old_parent.add(Decoration("old"))
    new_parent.add(Decoration("new"))
    child = DecorationComposite(3, CompositeKind.APPLICABLE, old_parent)
    child.add(Decoration("own"))
    first = child.decorations

    child.change_parent(new_parent)

    assert child.parent is new_parent
    assert child.composite_css_classlist == ["new", "own"]
    assert child.decorations is not first

    child.change_parent(None)

    assert child.composite_css_classlist == ["own"]


def test_change_parent_rejects_cycles() -> None:
    parent, child = _chain(2)

    with pytest.raises(ValueError):
        parent.change_parent(child)
    with pytest.raises(ValueError):
        child.change_parent(child)


def test_deep_chain_resolves_without_recursion() -> None:
    chain = _chain(5000)
    chain[0].add(Decoration("root"))
    chain[2500].add(Decoration("middle"))

    assert chain[-1].composite_css_classlist == ["root", "middle"]
