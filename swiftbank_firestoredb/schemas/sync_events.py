from enum import Enum


class SyncEventType(str, Enum):
    USER_DATA_UPDATE = "userDataUpdate"
    ALL_USERS_UPDATE = "allUsersUpdate"
    TRANSACTIONS_UPDATE = "transactionsUpdate"
    USER_ACCOUNTS_UPDATE = "userAccountsUpdate"
    USER_PROFILE_UPDATE = "userProfileUpdate"
    TRANSACTION_ADDED = "transactionAdded"
    FORCE_REFRESH = "forceRefresh"
