from typing import Any, Dict, List, Sequence

from ..schemas.collection_names import DatabaseCollectionNames
from ..schemas.keys import FireStoreKeys
from ..schemas.query import QueryConstraint, limit, order_by, where
from ..utils.logger import logger
from ..utils.standard_response import StandardResponse
from .service import FirestoreService

AUDIT_LOG_LIMIT = 50


class FirestoreBankDataDB:
    """Read-only bank reference data. Every accessor answers with a ``StandardResponse``."""

    def __init__(self, service: FirestoreService):
        self.service = service

    def _handle_error(self, error: Exception, operation: str) -> StandardResponse:
        logger.error(f"❌ Error {operation}: {str(error)}")
        return StandardResponse.from_error(error)

    async def _list(
        self, collection: DatabaseCollectionNames, constraints: Sequence[QueryConstraint] = ()
    ) -> List[Dict[str, Any]]:
        return await self.service.list(collection.value, constraints)

    async def _list_response(
        self, collection: DatabaseCollectionNames, label: str, constraints: Sequence[QueryConstraint] = ()
    ) -> StandardResponse:
        try:
            documents = await self._list(collection, constraints)
            return StandardResponse.success(data=documents, message=f"{len(documents)} {label} retrieved")
        except Exception as e:
            return self._handle_error(e, f"getting {label}")

    async def _first_document_response(self, collection: DatabaseCollectionNames, label: str) -> StandardResponse:
        try:
            documents = await self._list(collection)
            return StandardResponse.success(data=documents[0] if documents else {}, message=f"{label} retrieved")
        except Exception as e:
            return self._handle_error(e, f"getting {label}")

    async def get_account_types(self) -> StandardResponse:
        return await self._list_response(DatabaseCollectionNames.ACCOUNT_TYPES_COLLECTION_NAME, "account types")

    async def get_banking_products(self) -> StandardResponse:
        return await self._list_response(DatabaseCollectionNames.BANKING_PRODUCTS_COLLECTION_NAME, "banking products")

    async def get_banking_services(self) -> StandardResponse:
        return await self._list_response(DatabaseCollectionNames.BANKING_SERVICES_COLLECTION_NAME, "banking services")

    async def get_bank_settings(self) -> StandardResponse:
        return await self._first_document_response(DatabaseCollectionNames.BANK_SETTINGS_COLLECTION_NAME, "bank settings")

    async def get_announcements(self) -> StandardResponse:
        return await self._list_response(
            DatabaseCollectionNames.ANNOUNCEMENTS_COLLECTION_NAME,
            "announcements",
            [where(FireStoreKeys.active, "==", True), order_by(FireStoreKeys.createdAt, FireStoreKeys.DESCENDING)],
        )

    async def get_admin_data(self) -> StandardResponse:
        return await self._first_document_response(DatabaseCollectionNames.ADMIN_DATA_COLLECTION_NAME, "admin data")

    async def get_audit_logs(self, limit_count: int = AUDIT_LOG_LIMIT) -> StandardResponse:
        return await self._list_response(
            DatabaseCollectionNames.AUDIT_LOGS_COLLECTION_NAME,
            "audit logs",
            [order_by(FireStoreKeys.timestamp, FireStoreKeys.DESCENDING), limit(limit_count)],
        )
