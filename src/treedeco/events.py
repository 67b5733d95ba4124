"""Minimal synchronous event primitives shared by trees and decorations."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional


class Disposable:
    """Handle that releases a resource exactly once."""

    def __init__(self, callback: Optional[Callable[[], None]] = None) -> None:
        self._callback = callback
        self._disposed = False

    @property
    def disposed(self) -> bool:
        """Return whether the handle has been released."""
        return self._disposed

    def dispose(self) -> None:
        """Run the release callback unless it already ran."""
        if self._disposed:
            return
        self._disposed = True
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class DisposableGroup(Disposable):
    """Collection of handles released together."""

    def __init__(self, disposables: Iterable[Disposable] = ()) -> None:
        super().__init__()
        self._members: list[Disposable] = list(disposables)

    def __len__(self) -> int:
        return len(self._members)

    def add(self, disposable: Disposable) -> Disposable:
        """Track ``disposable``, releasing it immediately if the group is already disposed.

        Args:
            disposable: Handle to track.

        Returns:
            Disposable: The same handle, for chaining.
        """
        if self.disposed:
            disposable.dispose()
        else:
            self._members.append(disposable)
        return disposable

    def dispose(self) -> None:
        if self.disposed:
            return
        super().dispose()
        members, self._members = self._members, []
        for member in members:
            member.dispose()


class Emitter:
    """Dispatch positional arguments to subscribed callbacks in subscription order."""

    def __init__(self) -> None:
        self._listeners: list[Callable[..., Any]] = []

    @property
    def listener_count(self) -> int:
        """Return the number of active subscriptions."""
        return len(self._listeners)

    def subscribe(self, callback: Callable[..., Any]) -> Disposable:
        """Register ``callback`` and return the handle that unregisters it.

        Subscribing the same callable twice yields two independent
        subscriptions.

        Args:
            callback: Callable invoked with the arguments passed to ``emit``.

        Returns:
            Disposable: Handle removing this subscription.
        """
        entry = _Listener(callback)
        self._listeners.append(entry)
        return Disposable(lambda: self._unsubscribe(entry))

    def emit(self, *args: Any) -> None:
        """Invoke every listener registered at the time of the call."""
        for listener in tuple(self._listeners):
            listener(*args)

    def clear(self) -> None:
        """Drop every subscription."""
        self._listeners.clear()

    def _unsubscribe(self, entry: "_Listener") -> None:
        for index, listener in enumerate(self._listeners):
            if listener is entry:
                del self._listeners[index]
                return


class _Listener:
    """Identity wrapper so equal bound methods stay distinct subscriptions."""

    __slots__ = ("callback",)

    def __init__(self, callback: Callable[..., Any]) -> None:
        self.callback = callback

    def __call__(self, *args: Any) -> Any:
        return self.callback(*args)


__all__ = ["Disposable", "DisposableGroup", "Emitter"]
