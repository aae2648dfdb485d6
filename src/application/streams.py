"""Live stream primitives shared by ports, adapters and controllers.

``Observable`` is a cold stream: each ``subscribe`` call starts its own
producer and receives values until the returned ``Subscription`` is
cancelled. ``LiveValue`` is a hot, replaying holder of a single current
value with replace semantics.

Values delivered after ``Subscription.cancel()`` are dropped, so a consumer
never observes output from a stream it has already left.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from src.infrastructure.logging.logger import get_app_logger


T = TypeVar("T")
R = TypeVar("R")

Listener = Callable[[T], None]
ErrorListener = Callable[[Exception], None]
Teardown = Callable[[], None]
Producer = Callable[[Listener, ErrorListener], Teardown | None]


class Subscription:
    """Handle returned by ``subscribe``; cancelling is idempotent."""

    def __init__(self) -> None:
        self._active = True
        self._teardown: Teardown | None = None
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        """Return True until the subscription is cancelled or fails."""
        return self._active

    def attach(self, teardown: Teardown | None) -> None:
        """Register the producer teardown, running it now if already cancelled."""
        if teardown is None:
            return
        with self._lock:
            if self._active:
                self._teardown = teardown
                return
        teardown()

    def cancel(self) -> None:
        """Stop deliveries and release the producer."""
        with self._lock:
            if not self._active:
                return
            self._active = False
            teardown = self._teardown
            self._teardown = None
        if teardown is not None:
            teardown()


class Observable(Generic[T]):
    """Cold stream of values built from a producer function.

    The producer receives ``emit`` and ``fail`` callbacks and returns an
    optional teardown callable invoked on cancellation.
    """

    def __init__(self, producer: Producer) -> None:
        self._producer = producer

    def subscribe(
        self,
        on_next: Listener,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        """Start receiving values.

        Args:
            on_next: Called with every emitted value.
            on_error: Called once with a stream-level failure, after which
                the subscription is inactive.

        Returns:
            Subscription: Handle used to stop deliveries.
        """
        subscription = Subscription()

        def _emit(value) -> None:
            if subscription.active:
                on_next(value)

        def _fail(exc: Exception) -> None:
            if not subscription.active:
                return
            subscription.cancel()
            if on_error is not None:
                on_error(exc)
            else:
                get_app_logger().error(f"Unhandled stream failure: {exc}")

        try:
            teardown = self._producer(_emit, _fail)
        except Exception:
            subscription.cancel()
            raise
        subscription.attach(teardown)
        return subscription

    def map(self, transform: Callable[[T], R]) -> "Observable[R]":
        """Return a stream emitting ``transform(value)`` for every value."""

        def _producer(emit: Listener, fail: ErrorListener) -> Teardown:
            inner = self.subscribe(lambda value: emit(transform(value)), fail)
            return inner.cancel

        return Observable(_producer)


class LiveValue(Observable[T]):
    """Hot holder of a current value.

    Subscribers receive the current value immediately, then every
    replacement. Deliveries are serialized under a re-entrant lock so each
    subscriber sees values in the order they were set.
    """

    def __init__(self, initial: T) -> None:
        super().__init__(self._produce)
        self._value = initial
        self._listeners: dict[int, Listener] = {}
        self._next_key = 0
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        """Return the current value."""
        return self._value

    def set(self, value: T) -> None:
        """Replace the current value and notify subscribers."""
        with self._lock:
            self._value = value
            listeners = list(self._listeners.values())
            for listener in listeners:
                listener(value)

    def update(self, transform: Callable[[T], T]) -> T:
        """Replace the value with ``transform(current)`` atomically."""
        with self._lock:
            new_value = transform(self._value)
            self.set(new_value)
            return new_value

    @property
    def subscriber_count(self) -> int:
        """Return the number of live subscribers."""
        return len(self._listeners)

    def _produce(self, emit: Listener, _fail: ErrorListener) -> Teardown:
        with self._lock:
            key = self._next_key
            self._next_key += 1
            self._listeners[key] = emit
            emit(self._value)

        def _teardown() -> None:
            with self._lock:
                self._listeners.pop(key, None)

        return _teardown


__all__ = ["Subscription", "Observable", "LiveValue"]
