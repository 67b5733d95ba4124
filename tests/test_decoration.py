"""Tests for decoration target bookkeeping."""

from __future__ import annotations

from treedeco.decorations import Decoration
from treedeco.tree import Directory, FileEntry, Root


def _recorder(decoration: Decoration) -> list[tuple[str, str]]:
    """Subscribe to every target stream of ``decoration``.

    Args:
        decoration: Decoration to observe.

    Returns:
        list[tuple[str, str]]: Event log receiving ``(event, node name)`` pairs.
    """
    log: list[tuple[str, str]] = []
    decoration.on_did_add_target(lambda _, node: log.append(("add", node.name)))
    decoration.on_did_remove_target(lambda _, node: log.append(("remove", node.name)))
    decoration.on_did_negate_target(lambda _, node: log.append(("negate", node.name)))
    decoration.on_did_un_negate_target(lambda _, node: log.append(("un_negate", node.name)))
    return log


def test_events_fire_once_per_transition() -> None:
    root = Root()
    folder = Directory("folder", root)
    decoration = Decoration("modified")
    log = _recorder(decoration)

    assert decoration.add_target(folder) is True
    assert decoration.add_target(folder) is False
    assert decoration.negate_target(folder) is True
    assert decoration.negate_target(folder) is False
    assert decoration.un_negate_target(folder) is True
    assert decoration.un_negate_target(folder) is False
    assert decoration.remove_target(folder) is True
    assert decoration.remove_target(folder) is False

    assert log == [
        ("add", "folder"),
        ("negate", "folder"),
        ("un_negate", "folder"),
        ("remove", "folder"),
    ]


def test_target_sets_are_independent_and_ordered() -> None:
    root = Root()
    first = FileEntry("first.txt", root)
    second = FileEntry("second.txt", root)
    decoration = Decoration("staged")

    decoration.add_target(second)
    decoration.add_target(first)
    decoration.negate_target(first)

    assert decoration.applied_targets == (second, first)
    assert decoration.negated_targets == (first,)
    assert decoration.has_target(first) and decoration.has_negated_target(first)
    assert not decoration.has_negated_target(second)


def test_decorations_compare_by_identity() -> None:
    assert Decoration("same") != Decoration("same")
