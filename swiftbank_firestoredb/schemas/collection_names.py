from enum import Enum


class DatabaseCollectionNames(Enum):
    USERS_COLLECTION_NAME = "users"
    ACCOUNTS_COLLECTION_NAME = "accounts"
    TRANSACTIONS_COLLECTION_NAME = "transactions"
    ACCOUNT_TYPES_COLLECTION_NAME = "accountTypes"
    BANKING_PRODUCTS_COLLECTION_NAME = "bankingProducts"
    BANKING_SERVICES_COLLECTION_NAME = "bankingServices"
    BANK_SETTINGS_COLLECTION_NAME = "bankSettings"
    ANNOUNCEMENTS_COLLECTION_NAME = "announcements"
    ADMIN_DATA_COLLECTION_NAME = "adminData"
    AUDIT_LOGS_COLLECTION_NAME = "auditLogs"
