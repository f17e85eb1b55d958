"""
auth/validation.py -- Structural checks on submitted credentials.

Pure function, no I/O. Every field is checked; the caller decides whether to
report all errors or only the first. At most one error is reported per field.
"""

from __future__ import annotations

from auth.models import Credentials, FieldError

# Lengths at or below these values are rejected.
USERNAME_MIN_EXCLUSIVE = 2
PASSWORD_MIN_EXCLUSIVE = 3

USERNAME_TOO_SHORT = "Username must be longer than 2 chars"
PASSWORD_TOO_SHORT = "Password must be longer than 3 chars"
USERNAME_NOT_TEXT = "Username contains invalid characters"
PASSWORD_NOT_TEXT = "Password contains invalid characters"


def is_utf8_encodable(value: str) -> bool:
    # Lone surrogates (e.g. "\ud800") are valid str but cannot be stored or hashed.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_credentials(credentials: Credentials) -> list[FieldError]:
    """Return field errors for credentials, username first. Empty list means valid."""
    errors: list[FieldError] = []
    if len(credentials.username) <= USERNAME_MIN_EXCLUSIVE:
        errors.append(FieldError(field="username", message=USERNAME_TOO_SHORT))
    elif not is_utf8_encodable(credentials.username):
        errors.append(FieldError(field="username", message=USERNAME_NOT_TEXT))
    if len(credentials.password) <= PASSWORD_MIN_EXCLUSIVE:
        errors.append(FieldError(field="password", message=PASSWORD_TOO_SHORT))
    elif not is_utf8_encodable(credentials.password):
        errors.append(FieldError(field="password", message=PASSWORD_NOT_TEXT))
    return errors
