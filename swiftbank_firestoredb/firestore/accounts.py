from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..schemas.account import AccountCreate
from ..schemas.collection_names import DatabaseCollectionNames
from ..schemas.keys import FireStoreKeys
from ..utils.error_codes import ValidationError
from ..utils.identifiers import generate_account_number
from ..utils.logger import logger
from .service import FirestoreService

ACCOUNTS_COLLECTION_NAME = DatabaseCollectionNames.ACCOUNTS_COLLECTION_NAME.value


class FirestoreAccountsDB:
    def __init__(self, service: FirestoreService):
        self.service = service

    async def create_account(self, user_id: str, account: Union[AccountCreate, Dict[str, Any]]) -> Dict[str, Any]:
        try:
            account = account if isinstance(account, AccountCreate) else AccountCreate.model_validate(account)
        except PydanticValidationError as e:
            logger.warning(f"⚠️ Rejected account for user {user_id}: {e.error_count()} validation errors")
            raise ValidationError("Invalid account data", {"errors": e.errors()}) from e

        account_data = {
            **account.model_dump(exclude={"initialBalance"}),
            FireStoreKeys.userId: user_id,
            "accountNumber": generate_account_number(),
            FireStoreKeys.status: "active",
            FireStoreKeys.balance: account.initialBalance,
            "currency": "USD",
            FireStoreKeys.active: True,
        }
        created = await self.service.create(ACCOUNTS_COLLECTION_NAME, account_data)
        logger.info(f"✅ Account {created['id']} created for user {user_id}")
        return created

    async def get_account_by_id(self, account_id: str) -> Optional[Dict[str, Any]]:
        return await self.service.read(ACCOUNTS_COLLECTION_NAME, account_id)

    async def update_account_balance(self, account_id: str, new_balance: float) -> bool:
        return await self.service.update(ACCOUNTS_COLLECTION_NAME, account_id, {FireStoreKeys.balance: new_balance})
