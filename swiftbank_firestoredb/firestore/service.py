import copy
from typing import Any, Dict, List, Optional, Sequence, Union

from google.cloud import firestore
from pydantic import ValidationError as PydanticValidationError

from ..cache.ttl_cache import TTLCache
from ..schemas.batch import BatchOperation, BatchOperationType
from ..schemas.keys import FireStoreKeys
from ..schemas.query import QueryConstraint, apply_constraints
from ..utils.config import IS_PRODUCTION
from ..utils.error_codes import ValidationError, is_permission_error, translate_store_error
from ..utils.identifiers import generate_local_id
from ..utils.logger import logger
from ..utils.time_it import time_it
from ..utils.time_now import TimeManager
from .client import FirestoreClient
from .listeners import SnapshotCallback, SubscriptionManager
from .offline_store import OfflineDataProvider


class FirestoreService:
    """
    CRUD facade over Firestore with a TTL list cache and live listeners.

    Error policy:
      - ``list`` never raises; any failure is logged and yields ``[]``.
      - ``read`` falls back to the offline provider when Firestore is
        unconfigured, and outside production also when the read fails.
      - ``create`` returns an unpersisted ``local-`` document when Firestore
        is unconfigured; store failures raise.
      - ``update``, ``delete`` and ``batch_write`` always raise typed errors.
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        cache: Optional[TTLCache] = None,
        subscriptions: Optional[SubscriptionManager] = None,
        offline_store: Optional[OfflineDataProvider] = None,
        is_production: bool = IS_PRODUCTION,
    ):
        self.firestore_client = firestore_client
        self.cache = cache if cache is not None else TTLCache()
        self.subscriptions = subscriptions if subscriptions is not None else SubscriptionManager(firestore_client)
        self.offline_store = offline_store if offline_store is not None else OfflineDataProvider()
        self.is_production = is_production

    @property
    def is_available(self) -> bool:
        if not self.firestore_client.is_configured:
            logger.debug("🔄 Firestore not available, using fallback mode")
            return False
        return True

    def _collection(self, collection_name: str):
        return self.firestore_client.require_client().collection(collection_name)

    # ------------------------------------------------------------------ #
    #  ─── Generic CRUD ─────────────── #
    # ------------------------------------------------------------------ #
    async def create(self, collection_name: str, data: Dict[str, Any], doc_id: Optional[str] = None) -> Dict[str, Any]:
        if not self.is_available:
            logger.warning(f"⚠️ Fallback: document in {collection_name} created locally and not persisted")
            now = TimeManager.get_time_now()
            document = {**data, FireStoreKeys.createdAt: now, FireStoreKeys.updatedAt: now, "id": doc_id or generate_local_id()}
            self.offline_store.put_document(collection_name, document["id"], document)
            return document

        doc_data = {
            **data,
            FireStoreKeys.createdAt: firestore.SERVER_TIMESTAMP,
            FireStoreKeys.updatedAt: firestore.SERVER_TIMESTAMP,
        }
        try:
            collection = self._collection(collection_name)
            if doc_id:
                write_result = await collection.document(doc_id).set(doc_data)
                committed_at, new_id = write_result.update_time, doc_id
            else:
                committed_at, doc_ref = await collection.add(doc_data)
                new_id = doc_ref.id
        except Exception as e:
            logger.error(f"❌ Error creating document in {collection_name}: {e}", exc_info=True)
            raise translate_store_error(e, f"Failed to create document in {collection_name}") from e

        self.cache.invalidate(collection_name)
        logger.debug(f"✅ Created {collection_name}/{new_id}")
        return {**data, FireStoreKeys.createdAt: committed_at, FireStoreKeys.updatedAt: committed_at, "id": new_id}

    async def read(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        if not self.is_available:
            return self.offline_store.get_document(collection_name, doc_id)

        try:
            snapshot = await self._collection(collection_name).document(doc_id).get()
        except Exception as e:
            logger.error(f"❌ Error reading document {collection_name}/{doc_id}: {e}")
            if not self.is_production:
                logger.info("🔄 Falling back to offline data due to error")
                return self.offline_store.get_document(collection_name, doc_id)
            raise translate_store_error(e, f"Failed to fetch document {collection_name}/{doc_id}") from e

        if not snapshot.exists:
            return None
        return {**(snapshot.to_dict() or {}), "id": snapshot.id}

    async def update(self, collection_name: str, doc_id: str, updates: Dict[str, Any]) -> bool:
        update_data = {**updates, FireStoreKeys.updatedAt: firestore.SERVER_TIMESTAMP}
        try:
            await self._collection(collection_name).document(doc_id).update(update_data)
        except Exception as e:
            logger.error(f"❌ Error updating document {collection_name}/{doc_id}: {e}", exc_info=True)
            raise translate_store_error(e, f"Failed to update document {collection_name}/{doc_id}") from e

        self.cache.invalidate(collection_name)
        logger.debug(f"✅ Updated {collection_name}/{doc_id} fields={list(updates)}")
        return True

    async def delete(self, collection_name: str, doc_id: str) -> bool:
        try:
            await self._collection(collection_name).document(doc_id).delete()
        except Exception as e:
            logger.error(f"❌ Error deleting document {collection_name}/{doc_id}: {e}", exc_info=True)
            raise translate_store_error(e, f"Failed to delete document {collection_name}/{doc_id}") from e

        self.cache.invalidate(collection_name)
        return True

    @time_it
    async def list(self, collection_name: str, constraints: Sequence[QueryConstraint] = ()) -> List[Dict[str, Any]]:
        """Query a collection. Never raises: failures are logged and return an empty list."""
        if not self.is_available:
            logger.warning(f"⚠️ Fallback: Cannot list {collection_name}")
            return []

        cache_key = TTLCache.make_key(collection_name, None, constraints)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return copy.deepcopy(cached)

        try:
            results = await self._query(collection_name, constraints)
        except Exception as e:
            if is_permission_error(e):
                logger.warning(f"⚠️ Permissions blocked listing {collection_name}. Returning empty list.")
            else:
                logger.error(f"❌ Error listing documents from {collection_name}: {e}", exc_info=True)
            return []

        self.cache.set(cache_key, copy.deepcopy(results))
        return results

    async def _query(self, collection_name: str, constraints: Sequence[QueryConstraint]) -> List[Dict[str, Any]]:
        query = apply_constraints(self._collection(collection_name), constraints)
        return [{**(doc.to_dict() or {}), "id": doc.id} async for doc in query.stream()]

    # ------------------------------------------------------------------ #
    #  ─── Batch writes ─────────────── #
    # ------------------------------------------------------------------ #
    async def batch_write(self, operations: Sequence[Union[BatchOperation, Dict[str, Any]]]) -> bool:
        """Commit set/update/delete operations atomically."""
        try:
            parsed = [op if isinstance(op, BatchOperation) else BatchOperation.model_validate(op) for op in operations]
        except PydanticValidationError as e:
            raise ValidationError("Unknown or malformed batch operation", {"errors": e.errors()}) from e

        try:
            client = self.firestore_client.require_client()
            batch = client.batch()
            for op in parsed:
                collection = client.collection(op.collection)
                doc_ref = collection.document(op.id) if op.id else collection.document()
                if op.type == BatchOperationType.SET:
                    batch.set(doc_ref, {**op.data, FireStoreKeys.updatedAt: firestore.SERVER_TIMESTAMP})
                elif op.type == BatchOperationType.UPDATE:
                    batch.update(doc_ref, {**op.data, FireStoreKeys.updatedAt: firestore.SERVER_TIMESTAMP})
                else:
                    batch.delete(doc_ref)
            await batch.commit()
        except Exception as e:
            logger.error(f"❌ Batch write error: {e}", exc_info=True)
            raise translate_store_error(e, "Failed to execute batch operation") from e

        for collection_name in {op.collection for op in parsed}:
            self.cache.invalidate(collection_name)
        logger.debug(f"✅ Batch of {len(parsed)} operations committed")
        return True

    # ------------------------------------------------------------------ #
    #  ─── Real-time listeners ─────────────── #
    # ------------------------------------------------------------------ #
    def subscribe_to_document(self, collection_name: str, doc_id: str, callback: SnapshotCallback) -> str:
        return self.subscriptions.subscribe_to_document(collection_name, doc_id, callback)

    def subscribe_to_collection(
        self, collection_name: str, constraints: Sequence[QueryConstraint], callback: SnapshotCallback
    ) -> str:
        return self.subscriptions.subscribe_to_collection(collection_name, constraints, callback)

    def unsubscribe(self, listener_id: str) -> bool:
        return self.subscriptions.unsubscribe(listener_id)

    def unsubscribe_all(self) -> int:
        return self.subscriptions.unsubscribe_all()

    def health_check(self) -> Dict[str, Any]:
        return {
            "configured": self.firestore_client.is_configured,
            "offline": not self.firestore_client.is_configured,
            "production": self.is_production,
            "cached_entries": len(self.cache),
            "active_listeners": len(self.subscriptions.active_listeners),
        }
