import random
import time
from uuid import uuid4

LOCAL_ID_PREFIX = "local-"


def generate_local_id() -> str:
    """Id for a document that was never persisted (offline mode)."""
    return f"{LOCAL_ID_PREFIX}{uuid4().hex}"


def is_local_id(doc_id: str) -> bool:
    return doc_id.startswith(LOCAL_ID_PREFIX)


def generate_listener_id(*parts: str) -> str:
    prefix = "_".join(part for part in parts if part)
    return f"{prefix}_{uuid4().hex}"


def generate_account_number() -> str:
    return str(random.randint(1_000_000_000, 9_999_999_999))


def generate_transaction_id() -> str:
    return f"txn_{int(time.time() * 1000)}_{uuid4().hex[:9]}"
