"""
Userbase API package.

Provides the FastAPI application for user registration, authentication
and administration.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
