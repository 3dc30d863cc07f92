"""Tests for the Supabase user repository."""

import uuid
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from modules.users.exceptions import DuplicateUserError
from modules.users.models import Address, Gender
from modules.users.repository import UserRepository

USER_ID = str(uuid.uuid4())


def create_mock_user_data(user_id: str = USER_ID, **overrides) -> dict:
    """Helper to create a users row as Supabase returns it."""
    now = datetime.now(timezone.utc).isoformat()
    row = {
        "id": user_id,
        "email": "jane@example.com",
        "password_hash": "$2b$10$abcdefghijklmnopqrstuv",
        "first_name": "Jane",
        "last_name": "Doe",
        "phone_number": "+911234567890",
        "date_of_birth": "1990-05-17",
        "gender": "female",
        "address": None,
        "bio": None,
        "profile_picture": None,
        "social_links": None,
        "is_active": True,
        "is_verified": False,
        "role": "user",
        "created_at": now,
        "updated_at": now,
        "last_login_at": None,
    }
    row.update(overrides)
    return row


def unique_violation(constraint: str) -> APIError:
    return APIError(
        {
            "message": f'duplicate key value violates unique constraint "{constraint}"',
            "code": "23505",
            "details": None,
            "hint": None,
        }
    )


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def repo(mock_db):
    return UserRepository(mock_db)


class TestFind:
    def test_find_by_id(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        user = repo.find_by_id(USER_ID)

        assert user.id == USER_ID
        assert user.gender == Gender.FEMALE
        assert user.date_of_birth == date(1990, 5, 17)
        assert user.address == Address()
        mock_db.table.assert_called_with("users")

    def test_find_by_id_not_found(self, repo, mock_db):
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = []
        assert repo.find_by_id(USER_ID) is None

    def test_find_by_non_uuid_never_queries(self, repo, mock_db):
        assert repo.find_by_id("admin") is None
        mock_db.table.assert_not_called()

    def test_find_one_with_exclusion(self, repo, mock_db):
        query = mock_db.table.return_value.select.return_value
        query.eq.return_value.neq.return_value.limit.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        other_id = str(uuid.uuid4())
        user = repo.find_one({"email": "jane@example.com"}, exclude_id=other_id)

        assert user.email == "jane@example.com"
        query.eq.assert_called_with("email", "jane@example.com")
        query.eq.return_value.neq.assert_called_with("id", other_id)

    def test_custom_table_name(self, mock_db):
        repo = UserRepository(mock_db, table="accounts")
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = []
        repo.find_by_id(USER_ID)
        mock_db.table.assert_called_with("accounts")


class TestListUsers:
    def test_search_uses_ilike_over_names_and_email(self, repo, mock_db):
        query = mock_db.table.return_value.select.return_value
        query.or_.return_value.order.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        users = repo.list_users(search="jan")

        assert len(users) == 1
        filter_arg = query.or_.call_args[0][0]
        assert "first_name.ilike.*jan*" in filter_arg
        assert "last_name.ilike.*jan*" in filter_arg
        assert "email.ilike.*jan*" in filter_arg
        query.or_.return_value.order.assert_called_with("created_at", desc=True)

    def test_search_strips_filter_syntax(self, repo, mock_db):
        query = mock_db.table.return_value.select.return_value
        query.or_.return_value.order.return_value.execute.return_value.data = []

        repo.list_users(search="a,b)")

        assert "a,b)" not in query.or_.call_args[0][0]

    def test_status_filter(self, repo, mock_db):
        query = mock_db.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value.data = []

        repo.list_users(is_active=False)

        query.eq.assert_called_with("is_active", False)


class TestCreate:
    def test_serializes_models_and_sets_timestamps(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        repo.create(
            {
                "email": "jane@example.com",
                "password_hash": "hash",
                "first_name": "Jane",
                "last_name": "Doe",
                "gender": Gender.FEMALE,
                "date_of_birth": date(1990, 5, 17),
                "address": Address(city="Pune"),
            }
        )

        row = mock_db.table.return_value.insert.call_args[0][0]
        assert row["gender"] == "female"
        assert row["date_of_birth"] == "1990-05-17"
        assert row["address"]["city"] == "Pune"
        assert "created_at" in row and "updated_at" in row

    def test_duplicate_email_maps_to_domain_error(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = unique_violation(
            "users_email_key"
        )
        with pytest.raises(DuplicateUserError) as exc_info:
            repo.create({"email": "jane@example.com"})
        assert exc_info.value.field == "email"

    def test_duplicate_phone_maps_to_domain_error(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = unique_violation(
            "users_phone_number_key"
        )
        with pytest.raises(DuplicateUserError) as exc_info:
            repo.create({"email": "jane@example.com"})
        assert exc_info.value.field == "phone_number"

    def test_other_database_errors_propagate(self, repo, mock_db):
        error = APIError({"message": "boom", "code": "XX000", "details": None, "hint": None})
        mock_db.table.return_value.insert.return_value.execute.side_effect = error
        with pytest.raises(APIError):
            repo.create({"email": "jane@example.com"})


class TestUpdateAndDelete:
    def test_update_by_id(self, repo, mock_db):
        chain = mock_db.table.return_value.update.return_value.eq.return_value
        chain.execute.return_value.data = [create_mock_user_data(bio="hi")]

        user = repo.update_by_id(USER_ID, {"bio": "hi"})

        assert user.bio == "hi"
        patch = mock_db.table.return_value.update.call_args[0][0]
        assert patch["bio"] == "hi"
        assert "updated_at" in patch

    def test_update_missing_returns_none(self, repo, mock_db):
        chain = mock_db.table.return_value.update.return_value.eq.return_value
        chain.execute.return_value.data = []
        assert repo.update_by_id(USER_ID, {"bio": "hi"}) is None

    def test_update_duplicate_phone(self, repo, mock_db):
        chain = mock_db.table.return_value.update.return_value.eq.return_value
        chain.execute.side_effect = unique_violation("users_phone_number_key")
        with pytest.raises(DuplicateUserError):
            repo.update_by_id(USER_ID, {"phone_number": "+15551234567"})

    def test_delete_by_id(self, repo, mock_db):
        chain = mock_db.table.return_value.delete.return_value.eq.return_value
        chain.execute.return_value.data = [create_mock_user_data()]
        assert repo.delete_by_id(USER_ID) is True

    def test_delete_missing(self, repo, mock_db):
        chain = mock_db.table.return_value.delete.return_value.eq.return_value
        chain.execute.return_value.data = []
        assert repo.delete_by_id(USER_ID) is False

    def test_update_many_counts_rows(self, repo, mock_db):
        ids = [str(uuid.uuid4()), str(uuid.uuid4())]
        chain = mock_db.table.return_value.update.return_value.in_.return_value
        chain.execute.return_value.data = [create_mock_user_data(i) for i in ids]

        assert repo.update_many(ids + ["admin"], {"is_active": False}) == 2
        mock_db.table.return_value.update.return_value.in_.assert_called_with("id", ids)

    def test_delete_many_with_no_valid_ids(self, repo, mock_db):
        assert repo.delete_many(["admin", "nope"]) == 0
        mock_db.table.assert_not_called()
