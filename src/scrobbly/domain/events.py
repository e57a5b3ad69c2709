"""Synchronous change notification for observable core state."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger

log = getLogger(__name__)

type Listener = Callable[[], None]


class ChangeNotifier:
    """Explicit listener list; listeners run in registration order."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it again."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        for listener in tuple(self._listeners):
            try:
                listener()
            except Exception:
                log.exception(f"Listener for {self.name} failed")

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = ["ChangeNotifier", "Listener"]
