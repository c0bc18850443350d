import asyncio
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..schemas.query import QueryConstraint, apply_constraints
from ..utils.error_codes import ConfigError, NetworkError
from ..utils.identifiers import generate_listener_id
from ..utils.logger import logger
from .client import FirestoreClient

SnapshotCallback = Callable[..., Any]


def _document_to_dict(snapshot) -> Dict[str, Any]:
    return {**(snapshot.to_dict() or {}), "id": snapshot.id}


def _running_loop() -> asyncio.AbstractEventLoop:
    try:
        return asyncio.get_running_loop()
    except RuntimeError as e:
        raise ConfigError("Listeners require a running event loop") from e


class SubscriptionManager:
    """
    Registry of live Firestore listeners, keyed by an opaque listener id.

    Snapshots arrive on the watch client's background thread and are handed
    to the event loop that registered the listener, so callbacks always run
    on the loop and never before ``subscribe_*`` has returned. Callbacks are
    invoked as ``callback(data)`` on change and ``callback(None, error)`` on
    failure.
    """

    def __init__(self, firestore_client: FirestoreClient):
        self.firestore_client = firestore_client
        self._listeners: Dict[str, Any] = {}

    @property
    def active_listeners(self) -> List[str]:
        return list(self._listeners)

    def subscribe_to_document(self, collection_name: str, doc_id: str, callback: SnapshotCallback) -> str:
        watch_client = self.firestore_client.require_watch_client()
        loop = _running_loop()
        listener_id = generate_listener_id(collection_name, doc_id)

        def convert(doc_snapshots) -> Optional[Dict[str, Any]]:
            snapshot = next((snap for snap in doc_snapshots if snap.exists), None)
            return _document_to_dict(snapshot) if snapshot is not None else None

        on_snapshot = self._snapshot_handler(loop, listener_id, callback, convert)
        try:
            watch = watch_client.collection(collection_name).document(doc_id).on_snapshot(on_snapshot)
        except Exception as e:
            logger.error(f"❌ Error setting up document listener for {collection_name}/{doc_id}: {e}", exc_info=True)
            raise NetworkError("Failed to subscribe to document", {"cause": str(e)}) from e

        self._listeners[listener_id] = watch
        logger.debug(f"👂 Listening to {collection_name}/{doc_id} as {listener_id}")
        return listener_id

    def subscribe_to_collection(
        self, collection_name: str, constraints: Sequence[QueryConstraint], callback: SnapshotCallback
    ) -> str:
        watch_client = self.firestore_client.require_watch_client()
        loop = _running_loop()
        listener_id = generate_listener_id(collection_name)

        def convert(doc_snapshots) -> List[Dict[str, Any]]:
            return [_document_to_dict(snap) for snap in doc_snapshots if snap.exists]

        on_snapshot = self._snapshot_handler(loop, listener_id, callback, convert)
        try:
            query = apply_constraints(watch_client.collection(collection_name), constraints)
            watch = query.on_snapshot(on_snapshot)
        except Exception as e:
            logger.error(f"❌ Error setting up {collection_name} listener: {e}", exc_info=True)
            raise NetworkError(f"Failed to subscribe to {collection_name}", {"cause": str(e)}) from e

        self._listeners[listener_id] = watch
        logger.debug(f"👂 Listening to {collection_name} as {listener_id}")
        return listener_id

    def unsubscribe(self, listener_id: str) -> bool:
        watch = self._listeners.pop(listener_id, None)
        if watch is None:
            return False
        try:
            watch.unsubscribe()
        except Exception as e:
            logger.error(f"❌ Error detaching listener {listener_id}: {e}")
        return True

    def unsubscribe_all(self) -> int:
        listener_ids = list(self._listeners)
        for listener_id in listener_ids:
            self.unsubscribe(listener_id)
        if listener_ids:
            logger.info(f"🔌 Detached {len(listener_ids)} listeners")
        return len(listener_ids)

    def _snapshot_handler(self, loop: asyncio.AbstractEventLoop, listener_id: str, callback: SnapshotCallback, convert):
        def on_snapshot(doc_snapshots, changes, read_time):
            try:
                payload = convert(doc_snapshots)
                args = (payload,)
            except Exception as e:
                logger.error(f"❌ Error in listener {listener_id}: {e}")
                args = (None, NetworkError("Listener failed to read snapshot", {"cause": str(e)}))
            try:
                loop.call_soon_threadsafe(self._deliver, listener_id, callback, args)
            except RuntimeError:
                logger.warning(f"⚠️ Event loop closed, dropping snapshot for {listener_id}")

        return on_snapshot

    def _deliver(self, listener_id: str, callback: SnapshotCallback, args: tuple) -> None:
        # Snapshots queued before an unsubscribe are dropped.
        if listener_id not in self._listeners:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"❌ Listener callback {listener_id} raised: {e}", exc_info=True)
