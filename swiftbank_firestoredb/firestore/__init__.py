"""
Firestore database operations module.

This module contains all Firestore-related database operations including:
- Client initialization and connection management
- The CRUD facade with list caching and offline fallback
- Live listener management
- Accessors for users, accounts, transactions and bank reference data
"""

from .client import FirestoreClient
from .listeners import SubscriptionManager
from .offline_store import OfflineDataProvider
from .service import FirestoreService
from .users import FirestoreUsersDB
from .accounts import FirestoreAccountsDB
from .transactions import FirestoreTransactionsDB
from .bank_data import FirestoreBankDataDB

__all__ = [
    "FirestoreClient",
    "SubscriptionManager",
    "OfflineDataProvider",
    "FirestoreService",
    "FirestoreUsersDB",
    "FirestoreAccountsDB",
    "FirestoreTransactionsDB",
    "FirestoreBankDataDB",
]
