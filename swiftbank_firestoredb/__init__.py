"""
Client-side data synchronization layer for Swift Bank.

This package contains:
- Firestore CRUD facade with TTL list caching and offline fallback
- Live listener management bridged onto asyncio
- Accessors for users, accounts, transactions and bank reference data
- The sync notification bus and data sync manager
- Schemas, typed errors and shared utilities
"""

__version__ = "1.0.0"

from .cache.ttl_cache import TTLCache
from .container import SyncLayer, build_sync_layer

# Firestore
from .firestore.client import FirestoreClient
from .firestore.listeners import SubscriptionManager
from .firestore.offline_store import OfflineDataProvider
from .firestore.service import FirestoreService
from .firestore.users import FirestoreUsersDB
from .firestore.accounts import FirestoreAccountsDB
from .firestore.transactions import FirestoreTransactionsDB
from .firestore.bank_data import FirestoreBankDataDB

# Sync
from .sync.bus import SyncNotificationBus
from .sync.sync_manager import DataSyncManager

# Schemas
from .schemas.collection_names import DatabaseCollectionNames
from .schemas.keys import FireStoreKeys
from .schemas.query import limit, order_by, where
from .schemas.sync_events import SyncEventType

# Errors
from .utils.error_codes import (
    AuthError,
    ConfigError,
    CustomError,
    NetworkError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from .utils.standard_response import StandardResponse

__all__ = [
    "__version__",
    "TTLCache",
    "SyncLayer",
    "build_sync_layer",
    # Firestore
    "FirestoreClient",
    "SubscriptionManager",
    "OfflineDataProvider",
    "FirestoreService",
    "FirestoreUsersDB",
    "FirestoreAccountsDB",
    "FirestoreTransactionsDB",
    "FirestoreBankDataDB",
    # Sync
    "SyncNotificationBus",
    "DataSyncManager",
    # Schemas
    "DatabaseCollectionNames",
    "FireStoreKeys",
    "SyncEventType",
    "limit",
    "order_by",
    "where",
    # Errors
    "AuthError",
    "ConfigError",
    "CustomError",
    "NetworkError",
    "NotFoundError",
    "TransactionError",
    "ValidationError",
    "StandardResponse",
]
