"""Cooperative cancellation shared by population, workers and the controller."""

from __future__ import annotations

from threading import Event


class CancelToken:
    """Broadcast stop flag passed explicitly into every long-running call."""

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; return True early if cancelled."""

        if timeout <= 0:
            return self._event.is_set()
        return self._event.wait(timeout)


__all__ = ["CancelToken"]
