from dataclasses import dataclass
from typing import Optional

from .cache.ttl_cache import TTLCache
from .firestore.accounts import FirestoreAccountsDB
from .firestore.bank_data import FirestoreBankDataDB
from .firestore.client import FirestoreClient
from .firestore.offline_store import OfflineDataProvider
from .firestore.service import FirestoreService
from .firestore.transactions import FirestoreTransactionsDB
from .firestore.users import FirestoreUsersDB
from .sync.bus import SyncNotificationBus
from .sync.sync_manager import DataSyncManager
from .utils.config import IS_PRODUCTION
from .utils.logger import logger


@dataclass
class SyncLayer:
    """Every component of the sync layer, wired to one shared service."""

    service: FirestoreService
    users: FirestoreUsersDB
    accounts: FirestoreAccountsDB
    transactions: FirestoreTransactionsDB
    bank_data: FirestoreBankDataDB
    bus: SyncNotificationBus
    sync_manager: DataSyncManager

    def close(self) -> None:
        self.sync_manager.unsubscribe_all()
        self.service.unsubscribe_all()
        self.service.cache.clear()


def build_sync_layer(
    firestore_client: Optional[FirestoreClient] = None,
    cache: Optional[TTLCache] = None,
    offline_store: Optional[OfflineDataProvider] = None,
    is_production: bool = IS_PRODUCTION,
) -> SyncLayer:
    firestore_client = firestore_client if firestore_client is not None else FirestoreClient.shared()
    service = FirestoreService(
        firestore_client,
        cache=cache,
        offline_store=offline_store,
        is_production=is_production,
    )
    users = FirestoreUsersDB(service)
    bus = SyncNotificationBus()
    layer = SyncLayer(
        service=service,
        users=users,
        accounts=FirestoreAccountsDB(service),
        transactions=FirestoreTransactionsDB(service, users),
        bank_data=FirestoreBankDataDB(service),
        bus=bus,
        sync_manager=DataSyncManager(service, bus),
    )
    logger.info(f"🚀 Sync layer ready (firestore configured: {firestore_client.is_configured})")
    return layer
