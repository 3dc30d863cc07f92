"""
Response envelope helpers shared across modules.

Every API response body has the shape ``{success, message?, data?, errors?}``
so clients can branch on ``success`` alone. Module-specific models stay in
their respective module directories.
"""

from typing import Any, Optional


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> dict[str, Any]:
    """Build a success envelope, omitting empty keys."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_response(
    message: str,
    errors: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Build a failure envelope."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
