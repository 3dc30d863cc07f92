"""
Shared infrastructure for the Userbase backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Response envelope helpers

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import AuthConfig, Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    UserbaseError,
    NotFoundError,
    ValidationError,
    DuplicateError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ExternalServiceError,
)
from .models import success_response, error_response

__all__ = [
    "AuthConfig",
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "UserbaseError",
    "NotFoundError",
    "ValidationError",
    "DuplicateError",
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "ExternalServiceError",
    "success_response",
    "error_response",
]
