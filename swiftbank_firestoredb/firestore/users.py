from typing import Any, Dict, List, Optional

from typing_extensions import deprecated

from ..schemas.account import AccountRecord, AccountSource, EmbeddedAccounts, StandaloneAccounts, to_account_records
from ..schemas.collection_names import DatabaseCollectionNames
from ..schemas.keys import FireStoreKeys
from ..schemas.query import order_by, where
from ..utils.logger import logger
from .service import FirestoreService

USERS_COLLECTION_NAME = DatabaseCollectionNames.USERS_COLLECTION_NAME.value
ACCOUNTS_COLLECTION_NAME = DatabaseCollectionNames.ACCOUNTS_COLLECTION_NAME.value


class FirestoreUsersDB:
    def __init__(self, service: FirestoreService):
        self.service = service

    async def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.service.read(USERS_COLLECTION_NAME, user_id)

    async def create_user_profile(self, user_id: str, user_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.service.create(USERS_COLLECTION_NAME, user_data, user_id)

    async def update_user_profile(self, user_id: str, updates: Dict[str, Any]) -> bool:
        return await self.service.update(USERS_COLLECTION_NAME, user_id, updates)

    async def delete_user_profile(self, user_id: str) -> bool:
        return await self.service.delete(USERS_COLLECTION_NAME, user_id)

    async def get_all_user_profiles(self) -> List[Dict[str, Any]]:
        return await self.service.list(USERS_COLLECTION_NAME, [order_by(FireStoreKeys.createdAt, "desc")])

    async def get_users_by_role(self, role: str) -> List[Dict[str, Any]]:
        return await self.service.list(
            USERS_COLLECTION_NAME,
            [where(FireStoreKeys.role, "==", role), order_by(FireStoreKeys.createdAt, "desc")],
        )

    async def update_user_name_fields(self, user_id: str, first_name: str, last_name: str) -> bool:
        updates = {
            "firstName": first_name,
            "lastName": last_name,
            # older screens still read the combined field
            "name": f"{first_name} {last_name}",
        }
        logger.debug(f"📝 Updating name fields for user {user_id}")
        return await self.update_user_profile(user_id, updates)

    @deprecated("Accounts live on the user document; use get_accounts_for_user instead")
    async def get_user_accounts(self, user_id: str) -> List[Dict[str, Any]]:
        logger.warning("⚠️ get_user_accounts is deprecated. Use get_accounts_for_user instead.")
        return []

    # ------------------------------------------------------------------ #
    #  ─── Accounts with shape fallback ─────────────── #
    # ------------------------------------------------------------------ #
    async def resolve_account_source(self, user_id: str) -> AccountSource:
        """
        Pick where this user's accounts live.

        Embedded accounts on the profile win. Only when there are none is the
        accounts collection queried, by ``userId`` first and by ``customerUID``
        only if that finds nothing.
        """
        profile = None
        try:
            profile = await self.get_user_profile(user_id)
        except Exception as e:
            logger.warning(f"⚠️ Could not load profile for {user_id}, trying accounts collection: {e}")

        embedded = (profile or {}).get(FireStoreKeys.accounts)
        if isinstance(embedded, list) and embedded:
            return EmbeddedAccounts(records=[account for account in embedded if isinstance(account, dict)])

        by_user_id = await self.service.list(ACCOUNTS_COLLECTION_NAME, [where(FireStoreKeys.userId, "==", user_id)])
        by_customer_uid = []
        if not by_user_id:
            by_customer_uid = await self.service.list(
                ACCOUNTS_COLLECTION_NAME, [where(FireStoreKeys.customerUID, "==", user_id)]
            )

        unique_documents = {document["id"]: document for document in [*by_user_id, *by_customer_uid]}
        return StandaloneAccounts(documents=list(unique_documents.values()))

    async def get_accounts_for_user(self, user_id: str) -> List[AccountRecord]:
        try:
            source = await self.resolve_account_source(user_id)
            records = to_account_records(source, user_id)
            logger.debug(f"🏦 {len(records)} accounts for user {user_id} from {type(source).__name__}")
            return records
        except Exception as e:
            logger.warning(f"⚠️ get_accounts_for_user failed for {user_id}: {e}")
            return []
