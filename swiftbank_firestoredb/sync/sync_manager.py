from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..firestore.service import FirestoreService
from ..schemas.collection_names import DatabaseCollectionNames
from ..schemas.keys import FireStoreKeys
from ..schemas.query import QueryConstraint
from ..schemas.sync_events import SyncEventType
from ..utils.identifiers import generate_listener_id
from ..utils.logger import logger
from ..utils.time_now import TimeManager
from .bus import SyncNotificationBus

USERS_COLLECTION_NAME = DatabaseCollectionNames.USERS_COLLECTION_NAME.value
TRANSACTIONS_COLLECTION_NAME = DatabaseCollectionNames.TRANSACTIONS_COLLECTION_NAME.value

TRANSACTIONS_CACHE_KEY = "transactions"

DataCallback = Callable[..., Any]


def user_cache_key(user_id: str) -> str:
    return f"user_{user_id}"


class DataSyncManager:
    """
    Keeps dashboards consistent: live subscriptions feed an entity cache and
    every change, remote or local, is broadcast on the sync bus.

    Subscription callbacks follow the listener convention, ``callback(data)``
    on change and ``callback(None, error)`` on failure. Errors are passed
    through and never broadcast.
    """

    def __init__(self, service: FirestoreService, bus: Optional[SyncNotificationBus] = None):
        self.service = service
        self.bus = bus if bus is not None else SyncNotificationBus()
        self._entity_cache: Dict[str, Any] = {}
        # sync listener id -> service listener id
        self._listeners: Dict[str, str] = {}

    @property
    def active_listeners(self) -> List[str]:
        return list(self._listeners)

    def _register(self, service_listener_id: str, *parts: str) -> str:
        listener_id = generate_listener_id(*parts)
        self._listeners[listener_id] = service_listener_id
        return listener_id

    # ------------------------------------------------------------------ #
    #  ─── Subscriptions ─────────────── #
    # ------------------------------------------------------------------ #
    def subscribe_to_user_data(self, user_id: str, callback: DataCallback) -> str:
        def on_user(user_data: Optional[Dict[str, Any]], error: Optional[Exception] = None) -> None:
            if error is not None:
                logger.error(f"❌ Error in user data subscription for {user_id}: {error}")
                callback(None, error)
                return
            if user_data is None:
                return
            self._entity_cache[user_cache_key(user_id)] = user_data
            callback(user_data)
            self.bus.notify_sync(SyncEventType.USER_DATA_UPDATE, {"userId": user_id, "userData": user_data})

        service_listener_id = self.service.subscribe_to_document(USERS_COLLECTION_NAME, user_id, on_user)
        return self._register(service_listener_id, "user", user_id)

    def subscribe_to_all_users(self, callback: DataCallback) -> str:
        def on_users(users: Optional[List[Dict[str, Any]]], error: Optional[Exception] = None) -> None:
            if error is not None:
                logger.error(f"❌ Error in all users subscription: {error}")
                callback(None, error)
                return
            if users is None:
                return
            for user in users:
                self._entity_cache[user_cache_key(user["id"])] = user
            callback(users)
            self.bus.notify_sync(SyncEventType.ALL_USERS_UPDATE, {"users": users})

        service_listener_id = self.service.subscribe_to_collection(USERS_COLLECTION_NAME, [], on_users)
        return self._register(service_listener_id, "all_users")

    def subscribe_to_transactions(self, constraints: Sequence[QueryConstraint], callback: DataCallback) -> str:
        def on_transactions(transactions: Optional[List[Dict[str, Any]]], error: Optional[Exception] = None) -> None:
            if error is not None:
                logger.error(f"❌ Error in transactions subscription: {error}")
                callback(None, error)
                return
            if transactions is None:
                return
            self._entity_cache[TRANSACTIONS_CACHE_KEY] = transactions
            callback(transactions)
            self.bus.notify_sync(SyncEventType.TRANSACTIONS_UPDATE, {"transactions": transactions})

        service_listener_id = self.service.subscribe_to_collection(
            TRANSACTIONS_COLLECTION_NAME, constraints, on_transactions
        )
        return self._register(service_listener_id, "transactions")

    # ------------------------------------------------------------------ #
    #  ─── Writes with broadcast ─────────────── #
    # ------------------------------------------------------------------ #
    async def update_user_accounts(self, user_id: str, accounts: Union[List[Dict[str, Any]], Dict[str, Any]]) -> bool:
        await self.service.update(USERS_COLLECTION_NAME, user_id, {FireStoreKeys.accounts: accounts})
        logger.info(f"✅ User accounts updated successfully for {user_id}")
        self.bus.notify_sync(SyncEventType.USER_ACCOUNTS_UPDATE, {"userId": user_id, "accounts": accounts})
        return True

    async def update_user_profile(self, user_id: str, profile_updates: Dict[str, Any]) -> bool:
        await self.service.update(USERS_COLLECTION_NAME, user_id, profile_updates)
        logger.info(f"✅ User profile updated successfully for {user_id}")
        self.bus.notify_sync(SyncEventType.USER_PROFILE_UPDATE, {"userId": user_id, "profile": profile_updates})
        return True

    async def add_transaction(self, transaction_data: Dict[str, Any]) -> Dict[str, Any]:
        created = await self.service.create(TRANSACTIONS_COLLECTION_NAME, transaction_data)
        logger.info(f"✅ Transaction {created['id']} added")
        self.bus.notify_sync(SyncEventType.TRANSACTION_ADDED, {"transaction": {**transaction_data, "id": created["id"]}})
        return created

    # ------------------------------------------------------------------ #
    #  ─── Entity cache ─────────────── #
    # ------------------------------------------------------------------ #
    def get_cached(self, key: str) -> Optional[Any]:
        return self._entity_cache.get(key)

    def clear_cache(self, key: str) -> None:
        self._entity_cache.pop(key, None)

    def clear_all_cache(self) -> None:
        self._entity_cache.clear()

    # ------------------------------------------------------------------ #
    #  ─── Lifecycle ─────────────── #
    # ------------------------------------------------------------------ #
    def unsubscribe(self, listener_id: str) -> bool:
        service_listener_id = self._listeners.pop(listener_id, None)
        if service_listener_id is None:
            return False
        self.service.unsubscribe(service_listener_id)
        logger.debug(f"🔌 Unsubscribed from listener: {listener_id}")
        return True

    def unsubscribe_all(self) -> int:
        """Detach every listener and reset the entity cache and the bus."""
        listener_ids = list(self._listeners)
        for listener_id in listener_ids:
            self.unsubscribe(listener_id)
        self.clear_all_cache()
        self.bus.clear()
        logger.info(f"✅ {len(listener_ids)} listeners unsubscribed and cache cleared")
        return len(listener_ids)

    def force_refresh(self) -> int:
        logger.info("🔄 Force refreshing all data subscriptions...")
        self.clear_all_cache()
        return self.bus.notify_sync(SyncEventType.FORCE_REFRESH, {"timestamp": TimeManager.get_time_now()})

    # bus passthroughs for callers that only hold the manager
    def on_sync(self, event: Union[SyncEventType, str], callback: Callable[[Any], Any]) -> None:
        self.bus.on_sync(event, callback)

    def off_sync(self, event: Union[SyncEventType, str], callback: Callable[[Any], Any]) -> bool:
        return self.bus.off_sync(event, callback)
