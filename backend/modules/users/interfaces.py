"""
Users module interfaces.

Services depend on IUserRepository rather than the Supabase implementation,
so tests can run against an in-memory store with the same contract.
"""

from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from .models import UserRecord


@runtime_checkable
class IUserRepository(Protocol):
    """
    Credential store contract.

    Implementations must enforce uniqueness of ``email`` and of non-null
    ``phone_number`` atomically, raising DuplicateUserError when a write
    would violate either.
    """

    def find_one(
        self,
        filters: dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> Optional[UserRecord]:
        """Return the first record matching every filter, or None."""
        ...

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...

    def create(self, record: dict[str, Any]) -> UserRecord:
        """Insert a record; id and timestamps are assigned by the store."""
        ...

    def update_by_id(self, user_id: str, patch: dict[str, Any]) -> Optional[UserRecord]:
        """Apply ``patch`` and refresh ``updated_at``. None if absent."""
        ...

    def delete_by_id(self, user_id: str) -> bool:
        ...

    def list_users(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> list[UserRecord]:
        """Newest first, optionally filtered by a name/email search."""
        ...

    def update_many(self, user_ids: Iterable[str], patch: dict[str, Any]) -> int:
        ...

    def delete_many(self, user_ids: Iterable[str]) -> int:
        ...
