"""
Identity field validation and normalization.

Each ``normalize_*`` function returns the cleaned value or raises
ValueError with a client-facing message. validate_identity_fields() runs
every check that applies to its input and raises a single ValidationError
listing all failures, so a client can fix the whole form in one round trip.

Uniqueness of email and phone number is not checked here; it needs the
credential store and is done by the services.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from email_validator import EmailNotValidError, validate_email

from shared.exceptions import ValidationError
from modules.users.models import PHONE_NUMBER_PATTERN, Gender

MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 50
MAX_BIO_LENGTH = 500

_NON_PHONE_CHARS = re.compile(r"[^\d+]")

REQUIRED_MESSAGES = {
    "email": "Email is required",
    "password": "Password is required",
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "phone_number": "Phone number is required",
}


def normalize_email(raw: str) -> str:
    """Trim, lower-case and check the shape of an email address."""
    email = (raw or "").strip().lower()
    if not email:
        raise ValueError(REQUIRED_MESSAGES["email"])
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please enter a valid email")
    return email


def normalize_phone_number(raw: str) -> str:
    """
    Reduce a phone number to ``+`` and digits and check its format.

    "+91 (123) 456-7890" becomes "+911234567890".
    """
    number = _NON_PHONE_CHARS.sub("", raw or "")
    if not number.startswith("+"):
        raise ValueError(
            "Phone number must start with country code (e.g., +91 for India)"
        )
    if not PHONE_NUMBER_PATTERN.match(number):
        raise ValueError(
            "Invalid phone number format. Please include country code "
            "(e.g., +911234567890)"
        )
    return number


def check_password(raw: str) -> str:
    """Enforce the minimum length. Passwords are never trimmed."""
    if not raw:
        raise ValueError(REQUIRED_MESSAGES["password"])
    if len(raw) < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return raw


def normalize_date_of_birth(
    raw: Union[str, date, datetime],
    now: Optional[datetime] = None,
) -> date:
    """Parse a date of birth and reject dates in the future."""
    now = now or datetime.now(timezone.utc)

    if isinstance(raw, datetime):
        moment = raw
    elif isinstance(raw, date):
        moment = datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    else:
        text = str(raw).strip()
        try:
            if len(text) == 10:
                parsed = date.fromisoformat(text)
                moment = datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)
            else:
                moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Date of birth must be a valid date")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if moment > now:
        raise ValueError("Date of birth cannot be in the future")
    return moment.date()


def _name_checker(label: str) -> Callable[[str], str]:
    def check(raw: str) -> str:
        name = (raw or "").strip()
        if not name:
            raise ValueError(f"{label} is required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValueError(f"{label} cannot exceed {MAX_NAME_LENGTH} characters")
        return name

    return check


def check_bio(raw: str) -> str:
    if len(raw) > MAX_BIO_LENGTH:
        raise ValueError(f"Bio cannot exceed {MAX_BIO_LENGTH} characters")
    return raw


def normalize_gender(raw: str) -> Gender:
    try:
        return Gender(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(g.value for g in Gender)
        raise ValueError(f"Gender must be one of: {allowed}")


_CHECKS: dict[str, Callable[[Any], Any]] = {
    "email": normalize_email,
    "password": check_password,
    "first_name": _name_checker("First name"),
    "last_name": _name_checker("Last name"),
    "phone_number": normalize_phone_number,
    "date_of_birth": normalize_date_of_birth,
    "gender": normalize_gender,
    "bio": check_bio,
}

# Fields where an empty value means "clear it" rather than "invalid"
CLEARABLE_FIELDS = {"phone_number", "date_of_birth", "bio"}


def validate_identity_fields(
    data: Mapping[str, Any],
    required: Iterable[str] = (),
) -> dict[str, Any]:
    """
    Validate and normalize identity fields.

    Only keys present in ``data`` are checked (plus any ``required`` key,
    which must be present and non-empty). Keys this module does not know
    are passed through untouched.

    Args:
        data: Raw field values keyed by snake_case field name
        required: Field names that must be supplied

    Returns:
        A new dict with normalized values

    Raises:
        ValidationError: With one message per invalid field
    """
    required = list(dict.fromkeys(required))
    normalized: dict[str, Any] = {}
    errors: list[str] = []

    for field in required:
        if data.get(field) in (None, ""):
            errors.append(REQUIRED_MESSAGES.get(field, f"{field} is required"))

    for field, value in data.items():
        check = _CHECKS.get(field)
        if check is None:
            normalized[field] = value
            continue
        if value is None or (value == "" and field in CLEARABLE_FIELDS):
            if field in CLEARABLE_FIELDS and field not in required:
                normalized[field] = None
            continue
        if value == "" and field in required:
            # Already reported as missing
            continue
        try:
            normalized[field] = check(value)
        except ValueError as e:
            errors.append(str(e))

    if errors:
        raise ValidationError("Validation failed", errors=errors)
    return normalized
