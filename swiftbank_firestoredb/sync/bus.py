from typing import Any, Callable, Dict, List, Union

from ..schemas.sync_events import SyncEventType
from ..utils.logger import logger

SyncCallback = Callable[[Any], Any]
SyncEvent = Union[SyncEventType, str]


def _event_key(event: SyncEvent) -> str:
    return event.value if isinstance(event, SyncEventType) else event


class SyncNotificationBus:
    """In-memory fan-out of sync events to registered callbacks."""

    def __init__(self):
        self._callbacks: Dict[str, List[SyncCallback]] = {}

    def on_sync(self, event: SyncEvent, callback: SyncCallback) -> None:
        callbacks = self._callbacks.setdefault(_event_key(event), [])
        if callback not in callbacks:
            callbacks.append(callback)

    def off_sync(self, event: SyncEvent, callback: SyncCallback) -> bool:
        callbacks = self._callbacks.get(_event_key(event), [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def notify_sync(self, event: SyncEvent, payload: Any) -> int:
        """Invoke every callback for ``event``; returns how many ran without raising."""
        key = _event_key(event)
        delivered = 0
        # copy: a callback may unregister itself
        for callback in list(self._callbacks.get(key, [])):
            try:
                callback(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"❌ Error in sync callback for {key}: {e}", exc_info=True)
        return delivered

    def listener_count(self, event: SyncEvent) -> int:
        return len(self._callbacks.get(_event_key(event), []))

    def clear(self) -> None:
        self._callbacks.clear()
