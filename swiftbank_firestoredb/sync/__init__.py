"""
Data synchronization module.

This module contains:
- The sync notification bus that fans events out to interested callers
- The data sync manager that turns live listeners into cached, broadcast updates
"""

from .bus import SyncNotificationBus
from .sync_manager import DataSyncManager

__all__ = [
    "SyncNotificationBus",
    "DataSyncManager",
]
