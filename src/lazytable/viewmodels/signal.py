"""Change notification for the table presentation model.

The controller and the views subscribe to ``ObservableProperty`` fields and
to the row cache channels, all of which are built on ``Signal``.  No Qt
objects are involved, so the windowing logic runs under plain asyncio.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal:
    """Ordered list of callbacks invoked with the emitted arguments.

    ``connect`` returns an unsubscribe callable, which is what the table
    controller and the Qt adapter keep to detach on ``dispose``.  A handler
    that raises is logged and skipped; the remaining handlers still run, so a
    broken view cannot stop the row cache from notifying the controller.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> Callable[[], None]:
        """Register *handler* and return a callable that unregisters it."""
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

        def _unsubscribe() -> None:
            try:
                self.disconnect(handler)
            except ValueError:
                pass

        return _unsubscribe

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty(Generic[T]):
    """Single-value holder with change notification.

    Unlike a classic property binding, assigning ``value`` *always* emits
    ``changed(new_value, old_value)``, even when the new value equals the old
    one.  Callers that want a notification for a structural change replace the
    value with a fresh copy instead of mutating it in place.
    """

    def __init__(self, initial_value: T = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        old_value = self._value
        self._value = new_value
        self.changed.emit(new_value, old_value)

    def get(self) -> T:
        return self._value

    def set(self, new_value: T) -> None:
        self.value = new_value

    def on_change(self, handler: Callable[[T, T], Any]) -> Callable[[], None]:
        """Subscribe *handler* and immediately replay the current value.

        The replay is delivered as ``handler(value, value)`` so that views can
        render the initial state with the same code path they use for updates.
        Returns a callable that removes the subscription again.
        """
        unsubscribe = self.changed.connect(handler)
        try:
            handler(self._value, self._value)
        except Exception as exc:
            _logger.error("Observable handler %r failed on replay: %s", handler, exc)
        return unsubscribe
