"""
User repository for database access.

Encapsulates all Supabase queries and data mapping for the ``users`` table.
Uniqueness of email and phone number is enforced by unique indexes in the
database (see migrations/001_create_users.sql); a violated index surfaces
here as DuplicateUserError.
"""

import logging
import uuid
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional

from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import Client

from shared.repository import BaseRepository
from .exceptions import DuplicateUserError
from .models import UserRecord

logger = logging.getLogger(__name__)

# PostgreSQL error code for unique_violation
UNIQUE_VIOLATION = "23505"

# Characters with meaning inside a PostgREST or_() filter
_FILTER_SPECIAL_CHARS = str.maketrans("", "", ",()%*\\")


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _serialize(data: dict[str, Any]) -> dict[str, Any]:
    """Convert model values into JSON-compatible column values."""
    row: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, date):
            value = value.isoformat()
        row[key] = value
    return row


class UserRepository(BaseRepository[UserRecord]):
    """
    Repository for user records.

    Note: This repository does NOT perform authorization checks or input
    validation. The service layer is responsible for both.
    """

    def __init__(self, db: Client, table: str = "users") -> None:
        super().__init__(db)
        self._table = table

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def find_one(
        self,
        filters: dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> Optional[UserRecord]:
        query = self._db.table(self._table).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        if exclude_id and _is_uuid(exclude_id):
            query = query.neq("id", exclude_id)
        result = query.limit(1).execute()

        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        # Non-UUID ids (e.g. the admin sentinel) can never match a row
        if not _is_uuid(user_id):
            return None
        result = self._db.table(self._table).select("*").eq("id", user_id).execute()

        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def list_users(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> list[UserRecord]:
        query = self._db.table(self._table).select("*")
        if search:
            term = search.translate(_FILTER_SPECIAL_CHARS).strip()
            if term:
                query = query.or_(
                    f"first_name.ilike.*{term}*,"
                    f"last_name.ilike.*{term}*,"
                    f"email.ilike.*{term}*"
                )
        if is_active is not None:
            query = query.eq("is_active", is_active)
        result = query.order("created_at", desc=True).execute()

        return [self._map_to_user(row) for row in result.data or []]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, record: dict[str, Any]) -> UserRecord:
        now = self._now()
        data = {**_serialize(record), "created_at": now, "updated_at": now}

        try:
            result = self._db.table(self._table).insert(data).execute()
        except APIError as e:
            duplicate = self._duplicate_from(e)
            if duplicate is None:
                raise
            raise duplicate from e

        return self._map_to_user(result.data[0])

    def update_by_id(self, user_id: str, patch: dict[str, Any]) -> Optional[UserRecord]:
        if not _is_uuid(user_id):
            return None
        data = {**_serialize(patch), "updated_at": self._now()}

        try:
            result = (
                self._db.table(self._table)
                .update(data)
                .eq("id", user_id)
                .execute()
            )
        except APIError as e:
            duplicate = self._duplicate_from(e)
            if duplicate is None:
                raise
            raise duplicate from e

        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def delete_by_id(self, user_id: str) -> bool:
        if not _is_uuid(user_id):
            return False
        result = self._db.table(self._table).delete().eq("id", user_id).execute()
        return bool(result.data)

    def update_many(self, user_ids: Iterable[str], patch: dict[str, Any]) -> int:
        ids = [i for i in user_ids if _is_uuid(i)]
        if not ids:
            return 0
        data = {**_serialize(patch), "updated_at": self._now()}
        result = self._db.table(self._table).update(data).in_("id", ids).execute()
        return len(result.data or [])

    def delete_many(self, user_ids: Iterable[str]) -> int:
        ids = [i for i in user_ids if _is_uuid(i)]
        if not ids:
            return 0
        result = self._db.table(self._table).delete().in_("id", ids).execute()
        return len(result.data or [])

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_user(self, data: dict[str, Any]) -> UserRecord:
        row = dict(data)
        # jsonb columns come back as null when never set
        row["address"] = row.get("address") or {}
        row["social_links"] = row.get("social_links") or {}
        return UserRecord.model_validate(row)

    def _duplicate_from(self, error: APIError) -> Optional[DuplicateUserError]:
        """Map a unique-index violation to DuplicateUserError."""
        if error.code != UNIQUE_VIOLATION:
            return None
        text = f"{error.message or ''} {error.details or ''}".lower()
        if "phone" in text:
            logger.info("Rejected write: duplicate phone number")
            return DuplicateUserError("phone_number", "Phone number already registered")
        logger.info("Rejected write: duplicate email")
        return DuplicateUserError("email", "Email already exists")
