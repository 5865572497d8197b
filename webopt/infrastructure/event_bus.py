import threading
from typing import Type, Callable, List, Dict, Any
from webopt.domain.events import Event

class EventBus:
    """Synchronous event bus; callbacks run on the publishing thread."""

    def __init__(self):
        self._subscribers: Dict[Type[Event], List[Callable[[Any], None]]] = {}
        self._lock = threading.RLock()

    def subscribe(self, event_type: Type[Event], callback: Callable[[Any], None]):
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(callback)

    def publish(self, event: Event):
        # Publishing is serialized so console lines from parallel jobs don't interleave
        with self._lock:
            for callback in list(self._subscribers.get(type(event), [])):
                callback(event)
