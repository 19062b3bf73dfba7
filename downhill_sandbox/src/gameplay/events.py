"""Synchronous observer registries owned by the components that emit them."""
from __future__ import annotations

from typing import Callable, List, Tuple

Callback = Callable[..., None]


class Signal:
    """Ordered subscriber list; emission iterates over a snapshot.

    Subscribers may connect or disconnect while an emission is in flight; the
    change applies from the next emission onward.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: List[Callback] = []

    def connect(self, callback: Callback) -> Callback:
        # //1.- Ignore duplicate registrations so lifecycles cannot double-deliver.
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return callback

    def disconnect(self, callback: Callback) -> bool:
        # //2.- Report whether anything was removed instead of raising on strangers.
        try:
            self._subscribers.remove(callback)
        except ValueError:
            return False
        return True

    def disconnect_all(self) -> None:
        self._subscribers.clear()

    def emit(self, *args: object) -> None:
        snapshot: Tuple[Callback, ...] = tuple(self._subscribers)
        for callback in snapshot:
            callback(*args)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, subscribers={len(self._subscribers)})"
