"""
In-process live subscriptions to individual documents.

A listener registered for ``(collection, doc_id)`` is called with the new
snapshot (a dict, or None when the document is gone) every time a writer
publishes that document. ``subscribe`` returns the function that tears the
listener down.
"""
import itertools
import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Snapshot = Optional[dict]
Listener = Callable[[Snapshot], None]


class SubscriptionHub:
    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._listeners: Dict[Tuple[str, str], Dict[int, Listener]] = defaultdict(dict)

    def subscribe(self, collection: str, doc_id: str, listener: Listener) -> Callable[[], None]:
        key = (collection, doc_id)
        with self._lock:
            listener_id = next(self._ids)
            self._listeners[key][listener_id] = listener

        def unsubscribe():
            with self._lock:
                listeners = self._listeners.get(key)
                if listeners is None:
                    return
                listeners.pop(listener_id, None)
                if not listeners:
                    del self._listeners[key]

        return unsubscribe

    def publish(self, collection: str, doc_id: str, snapshot: Snapshot) -> int:
        """Deliver a snapshot to every listener of the document. Returns the listener count."""
        with self._lock:
            listeners = list(self._listeners.get((collection, doc_id), {}).values())

        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                # One broken listener must not fail the write that published
                logger.error(f"Subscription listener failed for {collection}/{doc_id}: {e}", exc_info=True)
        return len(listeners)

    def listener_count(self, collection: str, doc_id: str) -> int:
        with self._lock:
            return len(self._listeners.get((collection, doc_id), {}))


# Process-wide hub used by the application
hub = SubscriptionHub()
