import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Sequence, Union

from google.cloud import firestore
from pydantic import ValidationError as PydanticValidationError

from ..schemas.batch import BatchOperation, BatchOperationType
from ..schemas.collection_names import DatabaseCollectionNames
from ..schemas.keys import FireStoreKeys
from ..schemas.query import QueryConstraint, limit, order_by, where
from ..schemas.transaction import TransactionCreate
from ..utils.error_codes import CustomError, TransactionError, ValidationError
from ..utils.identifiers import generate_transaction_id
from ..utils.logger import logger
from ..utils.time_it import time_it
from .service import FirestoreService
from .users import FirestoreUsersDB

TRANSACTIONS_COLLECTION_NAME = DatabaseCollectionNames.TRANSACTIONS_COLLECTION_NAME.value
ACCOUNTS_COLLECTION_NAME = DatabaseCollectionNames.ACCOUNTS_COLLECTION_NAME.value
USERS_COLLECTION_NAME = DatabaseCollectionNames.USERS_COLLECTION_NAME.value

# Firestore caps the number of values in an "in" filter
IN_QUERY_CHUNK_SIZE = 10
ADMIN_USER_SCAN_LIMIT = 10
ADMIN_PER_USER_LIMIT = 20


def dedupe_by_id(documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the first occurrence of every id, preserving order."""
    seen = set()
    unique = []
    for document in documents:
        doc_id = document.get("id")
        if doc_id in seen:
            continue
        seen.add(doc_id)
        unique.append(document)
    return unique


def _timestamp_key(document: Dict[str, Any]) -> datetime:
    value = document.get(FireStoreKeys.timestamp)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            value = None
    if not isinstance(value, datetime):
        return datetime.min.replace(tzinfo=timezone.utc)
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def sort_newest_first(documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(documents, key=_timestamp_key, reverse=True)


def _chunks(values: Sequence[str], size: int) -> List[List[str]]:
    return [list(values[i : i + size]) for i in range(0, len(values), size)]


class FirestoreTransactionsDB:
    def __init__(self, service: FirestoreService, users_db: FirestoreUsersDB):
        self.service = service
        self.users_db = users_db

    async def _list_newest_first(self, filters: List[QueryConstraint], limit_count: int) -> List[Dict[str, Any]]:
        """
        Query transactions newest first.

        An ordered query comes back empty when its composite index is missing
        (``list`` swallows the error), so an empty result is retried without
        ordering and sorted in memory.
        """
        ordered = await self.service.list(
            TRANSACTIONS_COLLECTION_NAME,
            [*filters, order_by(FireStoreKeys.timestamp, FireStoreKeys.DESCENDING), limit(limit_count)],
        )
        if ordered:
            return ordered
        unordered = await self.service.list(TRANSACTIONS_COLLECTION_NAME, [*filters, limit(limit_count)])
        return sort_newest_first(unordered)

    # ------------------------------------------------------------------ #
    #  ─── Reads with fallback chains ─────────────── #
    # ------------------------------------------------------------------ #
    @time_it
    async def get_user_transactions(self, user_id: str, limit_count: int = 50) -> List[Dict[str, Any]]:
        try:
            transactions = await self._list_newest_first([where(FireStoreKeys.userId, "==", user_id)], limit_count)
            strategy = "userId"

            if not transactions:
                strategy = "account id patterns"
                for account_id in (f"{user_id}_primary", f"{user_id}_account_0"):
                    transactions.extend(
                        await self._list_newest_first([where(FireStoreKeys.accountId, "==", account_id)], limit_count)
                    )
                transactions = sort_newest_first(transactions)

            if not transactions:
                strategy = "profile accounts"
                transactions = await self._transactions_for_user_accounts(user_id, limit_count)

            unique_transactions = dedupe_by_id(transactions)[:limit_count]
            logger.debug(f"📋 {len(unique_transactions)} transactions for user {user_id} via {strategy}")
            return unique_transactions
        except Exception as e:
            logger.error(f"❌ Failed to fetch transactions for user {user_id}: {e}", exc_info=True)
            return []

    async def _transactions_for_user_accounts(self, user_id: str, limit_count: int) -> List[Dict[str, Any]]:
        accounts = await self.users_db.get_accounts_for_user(user_id)
        account_ids = [account.id for account in accounts if account.id]
        if not account_ids:
            return []

        queries = []
        for chunk in _chunks(account_ids, IN_QUERY_CHUNK_SIZE):
            queries.append(self._list_newest_first([where(FireStoreKeys.fromAccount, "in", chunk)], limit_count))
            queries.append(self._list_newest_first([where(FireStoreKeys.toAccount, "in", chunk)], limit_count))

        results = await asyncio.gather(*queries)
        return sort_newest_first(transaction for result in results for transaction in result)

    @time_it
    async def get_all_transactions_for_admin(self, limit_count: int = 100) -> List[Dict[str, Any]]:
        try:
            transactions = await self._list_newest_first([], limit_count)

            if not transactions:
                logger.info("📊 No transactions from collection query, aggregating per user")
                users = await self.service.list(USERS_COLLECTION_NAME, [])
                for user in users[:ADMIN_USER_SCAN_LIMIT]:
                    transactions.extend(await self.get_user_transactions(user["id"], ADMIN_PER_USER_LIMIT))

            unique_transactions = dedupe_by_id(transactions)[:limit_count]
            logger.info(f"📋 Admin: {len(unique_transactions)} unique transactions")
            return unique_transactions
        except Exception as e:
            logger.error(f"❌ Admin: failed to fetch all transactions: {e}", exc_info=True)
            return []

    async def get_account_transactions(self, account_id: str, limit_count: int = 20) -> List[Dict[str, Any]]:
        sent, received = await asyncio.gather(
            self._list_newest_first([where(FireStoreKeys.fromAccount, "==", account_id)], limit_count),
            self._list_newest_first([where(FireStoreKeys.toAccount, "==", account_id)], limit_count),
        )
        return sort_newest_first(dedupe_by_id([*sent, *received]))

    # ------------------------------------------------------------------ #
    #  ─── Writes ─────────────── #
    # ------------------------------------------------------------------ #
    async def create_transaction(self, transaction: Union[TransactionCreate, Dict[str, Any]]) -> Dict[str, Any]:
        """Record a transaction and move the balances in a single batch commit."""
        try:
            transaction = (
                transaction if isinstance(transaction, TransactionCreate) else TransactionCreate.model_validate(transaction)
            )
        except PydanticValidationError as e:
            raise ValidationError("Invalid transaction data", {"errors": e.errors()}) from e

        transaction_id = generate_transaction_id()
        transaction_data = {
            **transaction.model_dump(exclude_none=True),
            FireStoreKeys.status: "pending",
            FireStoreKeys.timestamp: firestore.SERVER_TIMESTAMP,
        }
        operations = [
            BatchOperation(
                type=BatchOperationType.SET, collection=TRANSACTIONS_COLLECTION_NAME, id=transaction_id, data=transaction_data
            )
        ]
        for account_id, delta in ((transaction.fromAccount, -transaction.amount), (transaction.toAccount, transaction.amount)):
            if not account_id:
                continue
            operations.append(
                BatchOperation(
                    type=BatchOperationType.UPDATE,
                    collection=ACCOUNTS_COLLECTION_NAME,
                    id=account_id,
                    data={
                        FireStoreKeys.balance: firestore.Increment(delta),
                        FireStoreKeys.lastActivity: firestore.SERVER_TIMESTAMP,
                    },
                )
            )

        try:
            await self.service.batch_write(operations)
        except CustomError as e:
            logger.error(f"❌ Transaction {transaction_id} failed: {e.message}")
            raise TransactionError(
                "Failed to process transaction", {"cause": e.message, "cause_kind": e.kind.value}
            ) from e

        logger.info(f"✅ Transaction {transaction_id} committed")
        try:
            stored = await self.service.read(TRANSACTIONS_COLLECTION_NAME, transaction_id)
        except CustomError as e:
            logger.warning(f"⚠️ Transaction {transaction_id} committed but could not be read back: {e.message}")
            stored = None
        if stored is not None:
            return stored
        return {**{k: v for k, v in transaction_data.items() if k != FireStoreKeys.timestamp}, "id": transaction_id}

    async def update_transaction_status(self, transaction_id: str, status: str) -> bool:
        return await self.service.update(TRANSACTIONS_COLLECTION_NAME, transaction_id, {FireStoreKeys.status: status})
