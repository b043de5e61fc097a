"""
Tests for AccessPolicy.

Seeded store (see ``stores.seed_items``):
    1 -> owner 1, FLAG, private
    2 -> owner 2, "Nothing to see here", private
    3 -> owner 1, "Public note", public
    4 -> owner 1, "FAKE_FLAG{dummy_flag}", private

Identities: 1 stewie (admin), 2 admin (admiin), 3 user1 (user).
"""
import pytest

from navigator_vault.exceptions import (
    InvalidArguments,
    InvalidCredentials,
    ItemNotFound,
    NotAuthenticated,
    UnknownOperation,
)
from navigator_vault.models import AuthPayload, Role, VaultItem
from navigator_vault.policy import Operation

from conftest import ADMIN_PASSWORD, FLAG


def _ids(items):
    return [item.id for item in items]


# --- login ---

class TestLogin:

    def test_misspelled_admin_login(self, policy, tokens, anonymous):
        """admin/admin logs in with role admiin, not admin."""
        payload = policy.execute(
            "login", {"username": "admin", "password": "admin"}, anonymous
        )
        assert isinstance(payload, AuthPayload)
        assert payload.user.id == 2
        assert payload.user.role is Role.ADMIIN
        assert payload.user.role != "admin"
        claims = tokens.verify(payload.token)
        assert claims.user_id == 2
        assert claims.role == "admiin"

    def test_real_admin_login(self, policy, anonymous):
        payload = policy.execute(
            Operation.LOGIN,
            {"username": "stewie", "password": ADMIN_PASSWORD},
            anonymous,
        )
        assert payload.user.role is Role.ADMIN

    def test_wrong_password_issues_no_token(self, policy, anonymous, monkeypatch):
        issued = []
        monkeypatch.setattr(policy.tokens, "issue", issued.append)
        with pytest.raises(InvalidCredentials) as exc:
            policy.execute(
                "login", {"username": "user1", "password": "wrongpass"}, anonymous
            )
        assert exc.value.message == "Invalid credentials"
        assert issued == []

    @pytest.mark.parametrize(
        "username,password",
        [("User1", "admin123"), ("user1", "ADMIN123"), ("nobody", "admin123")],
    )
    def test_exact_match_only(self, policy, anonymous, username, password):
        with pytest.raises(InvalidCredentials):
            policy.execute(
                "login", {"username": username, "password": password}, anonymous
            )

    def test_login_ignores_existing_session(self, policy, context_for):
        payload = policy.execute(
            "login", {"username": "user1", "password": "admin123"}, context_for(1)
        )
        assert payload.user.id == 3

    def test_secret_is_not_dumped(self, policy, anonymous):
        payload = policy.execute(
            "login", {"username": "user1", "password": "admin123"}, anonymous
        )
        assert "secret" not in payload.user.model_dump()


# --- vaultItems ---

class TestVaultItems:

    def test_requires_session(self, policy, anonymous):
        with pytest.raises(NotAuthenticated):
            policy.execute("vaultItems", {}, anonymous)

    def test_admin_role_sees_everything(self, policy, items, context_for):
        policy.execute(
            "createVaultItem",
            {"content": "user1 private", "isPublic": False},
            context_for(3),
        )
        result = policy.execute("vaultItems", {}, context_for(1))
        assert _ids(result) == [1, 2, 3, 4, 5]
        assert result == items.all()

    def test_misspelled_admin_gets_no_bypass(self, policy, context_for):
        result = policy.execute("vaultItems", None, context_for(2))
        assert _ids(result) == [2, 3]

    def test_user_sees_own_and_public(self, policy, context_for):
        assert _ids(policy.execute("vaultItems", {}, context_for(3))) == [3]
        created = policy.execute(
            "createVaultItem", {"content": "mine", "isPublic": False}, context_for(3)
        )
        assert _ids(policy.execute("vaultItems", {}, context_for(3))) == [3, created.id]

    @pytest.mark.parametrize("user_id", [2, 3])
    def test_non_admin_never_sees_foreign_private(self, policy, context_for, user_id):
        for item in policy.execute("vaultItems", {}, context_for(user_id)):
            assert item.owner_id == user_id or item.is_public


# --- publicVaultItems ---

class TestPublicVaultItems:

    def test_anonymous(self, policy, anonymous):
        assert _ids(policy.execute("publicVaultItems", {}, anonymous)) == [3]

    def test_same_for_every_context(self, policy, anonymous, context_for):
        expected = policy.execute("publicVaultItems", {}, anonymous)
        for user_id in (1, 2, 3):
            assert policy.execute("publicVaultItems", {}, context_for(user_id)) == expected


# --- searchVault ---

class TestSearchVault:

    def test_anonymous_sees_only_public(self, policy, anonymous):
        assert policy.execute("searchVault", {"searchTerm": "FLAG"}, anonymous) == []
        assert _ids(
            policy.execute("searchVault", {"searchTerm": "note"}, anonymous)
        ) == [3]

    def test_owner_finds_own_private(self, policy, context_for):
        result = policy.execute("searchVault", {"searchTerm": "FLAG"}, context_for(1))
        assert _ids(result) == [1, 4]
        assert result[0].content == FLAG

    def test_admin_role_gets_no_bypass(self, policy, context_for):
        policy.execute(
            "createVaultItem",
            {"content": "user1 secret", "isPublic": False},
            context_for(3),
        )
        assert policy.execute(
            "searchVault", {"searchTerm": "secret"}, context_for(1)
        ) == []
        assert policy.execute(
            "searchVault", {"searchTerm": "Nothing"}, context_for(1)
        ) == []

    def test_substring_is_case_sensitive(self, policy, context_for):
        assert _ids(
            policy.execute("searchVault", {"searchTerm": "Nothing"}, context_for(2))
        ) == [2]
        assert policy.execute(
            "searchVault", {"searchTerm": "nothing"}, context_for(2)
        ) == []

    def test_empty_term_matches_all_visible(self, policy, context_for):
        assert _ids(
            policy.execute("searchVault", {"searchTerm": ""}, context_for(3))
        ) == [3]

    @pytest.mark.parametrize("user_id", [1, 2, 3])
    def test_never_leaks_foreign_private(self, policy, context_for, user_id):
        result = policy.execute("searchVault", {"searchTerm": ""}, context_for(user_id))
        for item in result:
            assert item.is_public or item.owner_id == user_id


# --- createVaultItem ---

class TestCreateVaultItem:

    def test_requires_session(self, policy, items, anonymous):
        before = len(items)
        with pytest.raises(NotAuthenticated):
            policy.execute(
                "createVaultItem", {"content": "x", "isPublic": True}, anonymous
            )
        assert len(items) == before

    def test_creates_owned_item(self, policy, items, context_for):
        item = policy.execute(
            "createVaultItem", {"content": "hello", "isPublic": True}, context_for(3)
        )
        assert isinstance(item, VaultItem)
        assert item.id == 5
        assert item.owner_id == 3
        assert item.content == "hello"
        assert item.is_public is True
        assert items.find(5) is item

    def test_ids_follow_count(self, policy, context_for):
        first = policy.execute(
            "createVaultItem", {"content": "a", "isPublic": False}, context_for(2)
        )
        second = policy.execute(
            "createVaultItem", {"content": "b", "isPublic": False}, context_for(3)
        )
        assert (first.id, second.id) == (5, 6)

    def test_count_based_ids_can_collide(self, policy, items, context_for):
        """Ids are count + 1, so an out-of-sequence id can be reused."""
        items.append(VaultItem(id=6, owner_id=1, content="sixth", is_public=False))
        created = policy.execute(
            "createVaultItem", {"content": "dup", "isPublic": False}, context_for(3)
        )
        assert created.id == 6
        assert [item.id for item in items].count(6) == 2

    @pytest.mark.parametrize(
        "variables",
        [
            {"content": "x"},
            {"isPublic": True},
            {"content": 1, "isPublic": True},
            {"content": "x", "isPublic": "yes"},
        ],
    )
    def test_bad_arguments(self, policy, items, context_for, variables):
        with pytest.raises(InvalidArguments):
            policy.execute("createVaultItem", variables, context_for(3))
        assert len(items) == 4


# --- makeVaultItemPublic ---

class TestMakeVaultItemPublic:

    def test_requires_session(self, policy, items, anonymous):
        with pytest.raises(NotAuthenticated):
            policy.execute("makeVaultItemPublic", {"id": "2"}, anonymous)
        assert items.find(2).is_public is False

    def test_publishes_foreign_item(self, policy, items, context_for, anonymous):
        """Any authenticated identity can publish any item."""
        item = policy.execute("makeVaultItemPublic", {"id": "2"}, context_for(3))
        assert item.id == 2
        assert item.owner_id == 2
        assert item.is_public is True
        assert items.find(2).is_public is True
        assert 2 in _ids(policy.execute("publicVaultItems", {}, anonymous))

    def test_flag_can_be_published(self, policy, context_for, anonymous):
        policy.execute("makeVaultItemPublic", {"id": 1}, context_for(2))
        result = policy.execute("searchVault", {"searchTerm": "FLAG{"}, anonymous)
        assert _ids(result) == [1]

    def test_already_public(self, policy, context_for):
        item = policy.execute("makeVaultItemPublic", {"id": 3}, context_for(3))
        assert item.is_public is True

    def test_missing_item(self, policy, context_for):
        with pytest.raises(ItemNotFound) as exc:
            policy.execute("makeVaultItemPublic", {"id": "99"}, context_for(3))
        assert exc.value.message == "Item not found"

    @pytest.mark.parametrize(
        "variables",
        [{}, {"id": "abc"}, {"id": None}, {"id": True}, {"id": False}, {"id": [1]}],
    )
    def test_bad_id(self, policy, context_for, variables):
        with pytest.raises(InvalidArguments):
            policy.execute("makeVaultItemPublic", variables, context_for(3))

    def test_boolean_id_publishes_nothing(self, policy, items, context_for):
        with pytest.raises(InvalidArguments):
            policy.execute("makeVaultItemPublic", {"id": True}, context_for(3))
        assert items.find(1).is_public is False

    @pytest.mark.parametrize("value", [2, "2", " 2 "])
    def test_id_accepts_int_or_numeric_string(self, policy, context_for, value):
        item = policy.execute("makeVaultItemPublic", {"id": value}, context_for(3))
        assert item.id == 2


# --- dispatch ---

class TestExecute:

    def test_unknown_operation(self, policy, anonymous):
        with pytest.raises(UnknownOperation) as exc:
            policy.execute("deleteVaultItem", {"id": 1}, anonymous)
        assert "deleteVaultItem" in exc.value.message

    def test_every_operation_has_a_handler(self, policy, anonymous):
        for op in Operation:
            assert op in policy._handlers

    def test_mutations(self):
        assert {op for op in Operation if op.is_mutation} == {
            Operation.CREATE_VAULT_ITEM,
            Operation.MAKE_VAULT_ITEM_PUBLIC,
        }

    def test_extra_arguments_ignored(self, policy, anonymous):
        result = policy.execute("publicVaultItems", {"unused": 1}, anonymous)
        assert _ids(result) == [3]

    def test_invalid_arguments_name_the_field(self, policy, anonymous):
        with pytest.raises(InvalidArguments) as exc:
            policy.execute("searchVault", {}, anonymous)
        assert "searchTerm" in exc.value.message
