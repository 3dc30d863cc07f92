"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import threading
import uuid
from datetime import datetime, timezone, timedelta
from typing import Any, Iterable, Optional

import jwt  # PyJWT
import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_auth_service, get_user_service, reset_container
from modules.auth.admin import AdminPrincipalResolver
from modules.auth.passwords import PasswordHasher
from modules.auth.service import AuthService
from modules.auth.tokens import TokenService
from modules.media.exceptions import UploadError
from modules.media.models import MediaFile, MediaUpload, Transformation
from modules.users.exceptions import DuplicateUserError
from modules.users.models import UserRecord
from modules.users.service import UserService
from shared.config import AuthConfig


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_ADMIN_EMAIL = "admin@example.com"
TEST_ADMIN_PASSWORD = "admin-password"

# A PNG signature is enough for the upload checks
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def create_test_token(
    user_id: str = "test-user-123",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
    **claims: Any,
) -> str:
    """
    Create a session token the way TokenService does.

    Args:
        user_id: Principal id for ``sub``
        expired: If True, creates an expired token
        secret: Signing secret
        claims: Extra claims (admin tokens carry email and role)

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    if expired:
        now = now - timedelta(days=31)
    payload = {
        **claims,
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=30)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class InMemoryUserRepository:
    """
    IUserRepository backed by a dict.

    Uniqueness of email and non-null phone number is checked under a lock
    at write time, like the database's unique indexes.
    """

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _check_unique(self, data: dict[str, Any], exclude_id: Optional[str] = None) -> None:
        for row in self._rows.values():
            if row["id"] == exclude_id:
                continue
            if "email" in data and row["email"] == data["email"]:
                raise DuplicateUserError("email", "Email already exists")
            phone = data.get("phone_number")
            if phone and row.get("phone_number") == phone:
                raise DuplicateUserError("phone_number", "Phone number already registered")

    def find_one(self, filters: dict[str, Any], exclude_id: Optional[str] = None) -> Optional[UserRecord]:
        for row in self._rows.values():
            if row["id"] == exclude_id:
                continue
            if all(row.get(k) == v for k, v in filters.items()):
                return UserRecord.model_validate(row)
        return None

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        row = self._rows.get(user_id)
        return UserRecord.model_validate(row) if row else None

    def create(self, record: dict[str, Any]) -> UserRecord:
        with self._lock:
            self._check_unique(record)
            now = datetime.now(timezone.utc)
            row = {**record, "id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
            self._rows[row["id"]] = row
            return UserRecord.model_validate(row)

    def update_by_id(self, user_id: str, patch: dict[str, Any]) -> Optional[UserRecord]:
        with self._lock:
            row = self._rows.get(user_id)
            if row is None:
                return None
            self._check_unique(patch, exclude_id=user_id)
            row.update(patch)
            row["updated_at"] = datetime.now(timezone.utc)
            return UserRecord.model_validate(row)

    def delete_by_id(self, user_id: str) -> bool:
        with self._lock:
            return self._rows.pop(user_id, None) is not None

    def list_users(self, search: Optional[str] = None, is_active: Optional[bool] = None) -> list[UserRecord]:
        rows = list(self._rows.values())
        if search:
            term = search.lower()
            rows = [
                r for r in rows
                if any(term in str(r.get(k, "")).lower() for k in ("first_name", "last_name", "email"))
            ]
        if is_active is not None:
            rows = [r for r in rows if r.get("is_active", True) == is_active]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [UserRecord.model_validate(r) for r in rows]

    def update_many(self, user_ids: Iterable[str], patch: dict[str, Any]) -> int:
        return sum(1 for i in user_ids if self.update_by_id(i, patch) is not None)

    def delete_many(self, user_ids: Iterable[str]) -> int:
        return sum(1 for i in user_ids if self.delete_by_id(i))


class FakeMediaService:
    """IMediaService that records uploads instead of calling Cloudinary."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.uploads: list[tuple[MediaFile, str, Optional[Transformation]]] = []
        self.deleted: list[str] = []

    async def upload(
        self, file: MediaFile, folder: str, transformation: Optional[Transformation] = None
    ) -> MediaUpload:
        if self.fail:
            raise UploadError(original_error="simulated failure")
        self.uploads.append((file, folder, transformation))
        public_id = f"{folder}/upload-{len(self.uploads)}"
        return MediaUpload(url=f"https://res.example.com/{public_id}.png", public_id=public_id)

    async def delete(self, public_id: str) -> None:
        self.deleted.append(public_id)


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(
        jwt_secret=TEST_JWT_SECRET,
        admin_email=TEST_ADMIN_EMAIL,
        admin_password=TEST_ADMIN_PASSWORD,
        bcrypt_rounds=4,
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def media() -> FakeMediaService:
    return FakeMediaService()


@pytest.fixture
def hasher(auth_config) -> PasswordHasher:
    return PasswordHasher(rounds=auth_config.bcrypt_rounds)


@pytest.fixture
def token_service(auth_config) -> TokenService:
    return TokenService(auth_config)


@pytest.fixture
def auth_service(user_repository, token_service, hasher, auth_config, media) -> AuthService:
    return AuthService(
        repository=user_repository,
        tokens=token_service,
        hasher=hasher,
        admin=AdminPrincipalResolver(auth_config),
        media=media,
    )


@pytest.fixture
def user_service(user_repository, media) -> UserService:
    return UserService(repository=user_repository, media=media)


@pytest.fixture
def make_user(user_repository, hasher):
    """Factory that stores a user directly, bypassing signup."""

    def _make(
        email: str = "jane@example.com",
        password: str = "secret1",
        first_name: str = "Jane",
        last_name: str = "Doe",
        **fields: Any,
    ) -> UserRecord:
        return user_repository.create(
            {
                "email": email,
                "password_hash": hasher.hash(password),
                "first_name": first_name,
                "last_name": last_name,
                **fields,
            }
        )

    return _make


@pytest.fixture
def app(auth_service, user_service):
    """App wired to the in-memory store."""
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_token(token_service, auth_config) -> str:
    return token_service.issue_admin_token(
        AdminPrincipalResolver(auth_config).principal()
    )
