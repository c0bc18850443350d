"""
Shared pytest fixtures for the sync layer test suite.

Types:
    - Fakes: the in-memory Firestore standing in for both the async and watch clients
    - Components: services and accessors wired to the fake
    - Data: seeded users, accounts and transactions
"""

import pytest

from swiftbank_firestoredb.cache.ttl_cache import TTLCache
from swiftbank_firestoredb.container import build_sync_layer
from swiftbank_firestoredb.firestore.accounts import FirestoreAccountsDB
from swiftbank_firestoredb.firestore.bank_data import FirestoreBankDataDB
from swiftbank_firestoredb.firestore.client import FirestoreClient
from swiftbank_firestoredb.firestore.offline_store import OfflineDataProvider
from swiftbank_firestoredb.firestore.service import FirestoreService
from swiftbank_firestoredb.firestore.transactions import FirestoreTransactionsDB
from swiftbank_firestoredb.firestore.users import FirestoreUsersDB
from tests.mocks.firestore_mock import FakeFirestore, at


# ==============================================================================
# FAKES
# ==============================================================================

@pytest.fixture
def fake_firestore() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def firestore_client(fake_firestore) -> FirestoreClient:
    """Configured client backed by the in-memory fake."""
    return FirestoreClient(project_id="swiftbank-test", client=fake_firestore, watch_client=fake_firestore)


@pytest.fixture
def offline_client() -> FirestoreClient:
    """Client with no project configured: the layer runs in offline mode."""
    return FirestoreClient(project_id="")


# ==============================================================================
# COMPONENTS
# ==============================================================================

@pytest.fixture
def service(firestore_client) -> FirestoreService:
    return FirestoreService(firestore_client, cache=TTLCache(ttl_seconds=300), is_production=False)


@pytest.fixture
def offline_service(offline_client) -> FirestoreService:
    return FirestoreService(offline_client, offline_store=OfflineDataProvider(), is_production=False)


@pytest.fixture
def users_db(service) -> FirestoreUsersDB:
    return FirestoreUsersDB(service)


@pytest.fixture
def accounts_db(service) -> FirestoreAccountsDB:
    return FirestoreAccountsDB(service)


@pytest.fixture
def transactions_db(service, users_db) -> FirestoreTransactionsDB:
    return FirestoreTransactionsDB(service, users_db)


@pytest.fixture
def bank_data_db(service) -> FirestoreBankDataDB:
    return FirestoreBankDataDB(service)


@pytest.fixture
def sync_layer(firestore_client):
    layer = build_sync_layer(firestore_client=firestore_client, is_production=False)
    yield layer
    layer.close()


# ==============================================================================
# DATA
# ==============================================================================

@pytest.fixture
def seeded_bank(fake_firestore) -> FakeFirestore:
    """Two customers, one with embedded accounts and one with standalone account documents."""
    fake_firestore.seed(
        "users",
        "alice",
        {
            "firstName": "Alice",
            "role": "customer",
            "createdAt": at(-100),
            "accounts": [
                {"id": "alice_primary", "accountType": "checking", "balance": 1200},
                {"accountNumber": "5550001111", "type": "savings", "balance": "300.5"},
            ],
        },
    )
    fake_firestore.seed("users", "bob", {"firstName": "Bob", "role": "customer", "createdAt": at(-50)})
    fake_firestore.seed("users", "root", {"firstName": "Root", "role": "admin", "createdAt": at(-10)})
    fake_firestore.seed("accounts", "bob_checking", {"userId": "bob", "accountType": "checking", "balance": 50})
    fake_firestore.seed("accounts", "bob_savings", {"userId": "bob", "accountType": "savings", "balance": 900})
    return fake_firestore
