import pytest
from google.api_core import exceptions as gcp_exceptions

from swiftbank_firestoredb.schemas.account import EmbeddedAccounts, StandaloneAccounts


class TestProfiles:
    @pytest.mark.asyncio
    async def test_create_and_get_profile(self, users_db, fake_firestore):
        created = await users_db.create_user_profile("dana", {"firstName": "Dana", "role": "customer"})

        assert created["id"] == "dana"
        profile = await users_db.get_user_profile("dana")
        assert profile["firstName"] == "Dana"
        assert profile["createdAt"] == created["createdAt"]

    @pytest.mark.asyncio
    async def test_users_by_role_newest_first(self, users_db, seeded_bank):
        customers = await users_db.get_users_by_role("customer")

        assert [user["id"] for user in customers] == ["bob", "alice"]

    @pytest.mark.asyncio
    async def test_all_profiles_newest_first(self, users_db, seeded_bank):
        assert [user["id"] for user in await users_db.get_all_user_profiles()] == ["root", "bob", "alice"]

    @pytest.mark.asyncio
    async def test_update_name_fields_writes_combined_name(self, users_db, seeded_bank):
        await users_db.update_user_name_fields("bob", "Robert", "Stone")

        stored = seeded_bank.stored("users", "bob")
        assert stored["firstName"] == "Robert"
        assert stored["lastName"] == "Stone"
        assert stored["name"] == "Robert Stone"

    @pytest.mark.asyncio
    async def test_delete_profile(self, users_db, seeded_bank):
        assert await users_db.delete_user_profile("bob") is True
        assert await users_db.get_user_profile("bob") is None

    @pytest.mark.asyncio
    async def test_deprecated_get_user_accounts(self, users_db):
        with pytest.warns(DeprecationWarning):
            assert await users_db.get_user_accounts("alice") == []


class TestAccountsForUser:
    @pytest.mark.asyncio
    async def test_embedded_accounts_win_without_querying_collection(self, users_db, seeded_bank):
        seeded_bank.seed("accounts", "stray", {"userId": "alice", "balance": 1})

        records = await users_db.get_accounts_for_user("alice")

        assert [record.id for record in records] == ["alice_primary", "5550001111"]
        assert records[1].accountType == "savings"
        assert records[1].balance == pytest.approx(300.5)
        assert seeded_bank.stream_calls_for("accounts") == []

    @pytest.mark.asyncio
    async def test_standalone_accounts_by_user_id(self, users_db, seeded_bank):
        source = await users_db.resolve_account_source("bob")

        assert isinstance(source, StandaloneAccounts)
        records = await users_db.get_accounts_for_user("bob")
        assert sorted(record.id for record in records) == ["bob_checking", "bob_savings"]
        assert all(record.userId == "bob" for record in records)

    @pytest.mark.asyncio
    async def test_customer_uid_only_queried_when_user_id_finds_nothing(self, users_db, seeded_bank):
        await users_db.get_accounts_for_user("bob")

        queried_fields = [query.filters[0][0] for query in seeded_bank.stream_calls_for("accounts")]
        assert queried_fields == ["userId"]

    @pytest.mark.asyncio
    async def test_customer_uid_fallback(self, users_db, fake_firestore):
        fake_firestore.seed("users", "carol", {"firstName": "Carol"})
        fake_firestore.seed("accounts", "legacy_1", {"customerUID": "carol", "balance": 10})

        records = await users_db.get_accounts_for_user("carol")

        assert [record.id for record in records] == ["legacy_1"]
        assert records[0].userId == "carol"

    @pytest.mark.asyncio
    async def test_empty_embedded_array_falls_back(self, users_db, fake_firestore):
        fake_firestore.seed("users", "erin", {"accounts": []})
        fake_firestore.seed("accounts", "erin_1", {"userId": "erin"})

        source = await users_db.resolve_account_source("erin")

        assert isinstance(source, StandaloneAccounts)
        assert [doc["id"] for doc in source.documents] == ["erin_1"]

    @pytest.mark.asyncio
    async def test_duplicate_documents_collapse_by_id(self, users_db, service, mocker):
        overlapping = {"id": "shared", "userId": "frank", "customerUID": "frank"}
        mocker.patch.object(service, "read", return_value=None)
        list_mock = mocker.patch.object(
            service, "list", side_effect=[[overlapping, {**overlapping}], [{**overlapping}, {"id": "other"}]]
        )

        source = await users_db.resolve_account_source("frank")

        assert isinstance(source, StandaloneAccounts)
        assert [doc["id"] for doc in source.documents] == ["shared"]
        assert list_mock.call_count == 1

    @pytest.mark.asyncio
    async def test_profile_read_failure_still_resolves(self, users_db, fake_firestore):
        fake_firestore.seed("accounts", "gina_1", {"userId": "gina"})
        fake_firestore.fail("get", gcp_exceptions.ServiceUnavailable("down"), collection_name="users")

        records = await users_db.get_accounts_for_user("gina")

        assert [record.id for record in records] == ["gina_1"]

    @pytest.mark.asyncio
    async def test_never_raises(self, users_db, mocker):
        mocker.patch.object(users_db, "resolve_account_source", side_effect=RuntimeError("boom"))

        assert await users_db.get_accounts_for_user("anyone") == []

    @pytest.mark.asyncio
    async def test_embedded_source_type(self, users_db, seeded_bank):
        assert isinstance(await users_db.resolve_account_source("alice"), EmbeddedAccounts)
