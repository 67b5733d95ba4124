"""Tests for the synchronous event primitives."""

from __future__ import annotations

from treedeco.events import Disposable, DisposableGroup, Emitter


def test_disposable_runs_callback_once() -> None:
    calls: list[str] = []
    handle = Disposable(lambda: calls.append("released"))

    handle.dispose()
    handle.dispose()

    assert calls == ["released"]
    assert handle.disposed is True


def test_group_disposes_members_and_late_additions() -> None:
    calls: list[int] = []
    group = DisposableGroup([Disposable(lambda: calls.append(1))])
    group.add(Disposable(lambda: calls.append(2)))

    assert len(group) == 2

    group.dispose()
    late = group.add(Disposable(lambda: calls.append(3)))

    assert calls == [1, 2, 3]
    assert late.disposed is True
    assert len(group) == 0


def test_emitter_dispatches_in_subscription_order() -> None:
    emitter = Emitter()
    seen: list[tuple[str, int]] = []
    emitter.subscribe(lambda value: seen.append(("first", value)))
    emitter.subscribe(lambda value: seen.append(("second", value)))

    emitter.emit(7)

    assert seen == [("first", 7), ("second", 7)]


def test_emitter_unsubscribe_only_removes_that_subscription() -> None:
    emitter = Emitter()
    seen: list[int] = []

    def listener(value: int) -> None:
        seen.append(value)

    first = emitter.subscribe(listener)
    emitter.subscribe(listener)
    first.dispose()
    emitter.emit(1)

    assert seen == [1]
    assert emitter.listener_count == 1


def test_emitter_tolerates_unsubscribe_during_dispatch() -> None:
    """Listeners registered when emit starts all run even if one unsubscribes another."""
    emitter = Emitter()
    seen: list[str] = []
    handles: list[Disposable] = []

    def first(_: object) -> None:
        seen.append("first")
        handles[1].dispose()

    handles.append(emitter.subscribe(first))
    handles.append(emitter.subscribe(lambda _: seen.append("second")))

    emitter.emit(None)
    emitter.emit(None)

    assert seen == ["first", "second", "first"]


def test_emitter_clear() -> None:
    emitter = Emitter()
    emitter.subscribe(lambda: None)

    emitter.clear()

    assert emitter.listener_count == 0
