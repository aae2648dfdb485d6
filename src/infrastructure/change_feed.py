"""In-process change notification for owner-scoped live snapshots."""

import threading
from collections.abc import Callable

from src.application.errors import FinanceTrackerError
from src.application.streams import Observable
from src.domain.models.transactions import Transaction
from src.infrastructure.logging.logger import get_app_logger


Refresh = Callable[[], None]
SnapshotLoader = Callable[[], list[Transaction]]


class OwnerChangeFeed:
    """Registry of snapshot listeners keyed by owner id.

    Stores call ``notify(owner_id)`` after every mutation; each listener
    registered for that owner reloads and re-emits its snapshot. A listener
    that raises is logged and skipped; the mutation that triggered the
    notification and the remaining listeners are unaffected.
    """

    def __init__(self, logger=None) -> None:
        self._logger = logger or get_app_logger()
        self._listeners: dict[str, dict[int, Refresh]] = {}
        self._next_key = 0
        self._lock = threading.Lock()

    def register(self, owner_id: str, refresh: Refresh) -> Refresh:
        """Register a listener and return its teardown callable."""
        with self._lock:
            key = self._next_key
            self._next_key += 1
            self._listeners.setdefault(owner_id, {})[key] = refresh

        def _unregister() -> None:
            with self._lock:
                owner_listeners = self._listeners.get(owner_id)
                if owner_listeners is None:
                    return
                owner_listeners.pop(key, None)
                if not owner_listeners:
                    self._listeners.pop(owner_id, None)

        return _unregister

    def notify(self, owner_id: str) -> None:
        """Ask every listener of the owner to re-emit."""
        with self._lock:
            listeners = list(self._listeners.get(owner_id, {}).values())
        for refresh in listeners:
            try:
                refresh()
            except Exception as exc:
                self._logger.error(
                    f"Change listener for owner {owner_id} failed: {exc}"
                )

    def listener_count(self, owner_id: str) -> int:
        """Return the number of live listeners for an owner."""
        with self._lock:
            return len(self._listeners.get(owner_id, {}))

    def live_snapshots(
        self,
        owner_id: str,
        load: SnapshotLoader,
    ) -> Observable[list[Transaction]]:
        """Return a stream emitting ``load()`` now and after every change.

        A ``FinanceTrackerError`` raised by ``load`` ends the stream with a
        failure instead of propagating into the mutating caller.
        """

        def _producer(emit, fail) -> Refresh:
            def _push() -> None:
                try:
                    snapshot = load()
                except FinanceTrackerError as exc:
                    fail(exc)
                    return
                emit(snapshot)

            teardown = self.register(owner_id, _push)
            _push()
            return teardown

        return Observable(_producer)


__all__ = ["OwnerChangeFeed"]
