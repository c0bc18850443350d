"""
Database schemas and models module.

This module contains all database schemas, models, and data structures including:
- Collection names enumeration and document keys
- Query constraints
- Account, transaction and batch operation models
- Sync event types
"""

from .account import AccountCreate, AccountRecord, AccountSource, EmbeddedAccounts, StandaloneAccounts
from .batch import BatchOperation, BatchOperationType
from .collection_names import DatabaseCollectionNames
from .keys import FireStoreKeys
from .query import Limit, OrderBy, QueryConstraint, Where, limit, order_by, where
from .sync_events import SyncEventType
from .transaction import TransactionCreate

__all__ = [
    "AccountCreate",
    "AccountRecord",
    "AccountSource",
    "EmbeddedAccounts",
    "StandaloneAccounts",
    "BatchOperation",
    "BatchOperationType",
    "DatabaseCollectionNames",
    "FireStoreKeys",
    "Limit",
    "OrderBy",
    "QueryConstraint",
    "Where",
    "limit",
    "order_by",
    "where",
    "SyncEventType",
    "TransactionCreate",
]
