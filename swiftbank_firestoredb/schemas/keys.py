from dataclasses import dataclass


@dataclass
class FireStoreKeys:
    id = "id"
    createdAt = "createdAt"
    updatedAt = "updatedAt"
    userId = "userId"
    customerUID = "customerUID"
    accounts = "accounts"
    accountId = "accountId"
    fromAccount = "fromAccount"
    toAccount = "toAccount"
    balance = "balance"
    lastActivity = "lastActivity"
    timestamp = "timestamp"
    status = "status"
    role = "role"
    active = "active"
    DESCENDING = "desc"
