"""
auth/service.py -- Register and login flows.

AuthService wires the Validator, the CredentialHasher, and a UserRepository
together and shapes every outcome into an AuthResult. It holds no mutable
state of its own, so one instance is shared by every request.

Error handling:
  Field-level problems (bad input, taken username, unknown user, wrong
  password) come back as AuthResult.errors -- data, not exceptions.
  StorageError other than DuplicateUsernameError is NOT a field error; it
  propagates so the transport layer can report a system failure.

Known caveat: "That username doesn't exist" and "Incorrect password" differ,
so a caller can tell whether a username is registered.
"""

from __future__ import annotations

import logging
from typing import Protocol

from auth.exceptions import DuplicateUsernameError, StorageError
from auth.hashing import CredentialHasher
from auth.models import AuthResult, Credentials, FieldError, User
from auth.validation import is_utf8_encodable, validate_credentials

logger = logging.getLogger("forumauth.auth")

USERNAME_TAKEN = "Username already taken"
USERNAME_NOT_FOUND = "That username doesn't exist"
INCORRECT_PASSWORD = "Incorrect password"


class UserRepository(Protocol):
    """Storage operations AuthService depends on. UserStore is the production implementation."""

    def create(self, username: str, password_hash: str) -> User: ...

    def find_by_username(self, username: str) -> User | None: ...

    def update_password_hash(self, user_id: int, password_hash: str) -> bool: ...


class AuthService:
    def __init__(self, repository: UserRepository, hasher: CredentialHasher) -> None:
        self._repository = repository
        self._hasher = hasher

    def register(self, username: str, password: str) -> AuthResult:
        """Create a user from a username/password pair.

        Only the first failing validation rule is reported, and nothing is
        hashed or stored when validation fails. Raises StorageError for
        storage failures other than a duplicate username.
        """
        errors = validate_credentials(Credentials(username=username, password=password))
        if errors:
            return AuthResult.failure(errors[0])

        password_hash = self._hasher.hash(password)
        try:
            user = self._repository.create(username, password_hash)
        except DuplicateUsernameError:
            logger.info("Registration rejected: username %s already taken", username)
            return AuthResult.failure(FieldError(field="username", message=USERNAME_TAKEN))

        logger.info("Registered user id=%s", user.id)
        return AuthResult.success(user)

    def login(self, username: str, password: str) -> AuthResult:
        """Check a username/password pair against the stored digest."""
        # A username that cannot be encoded was never stored.
        user = self._repository.find_by_username(username) if is_utf8_encodable(username) else None
        if user is None:
            return AuthResult.failure(FieldError(field="username", message=USERNAME_NOT_FOUND))

        if not self._hasher.verify(user.password_hash, password):
            logger.info("Login failed for user id=%s: incorrect password", user.id)
            return AuthResult.failure(FieldError(field="password", message=INCORRECT_PASSWORD))

        if self._hasher.needs_rehash(user.password_hash):
            user = self._rehash(user, password)

        return AuthResult.success(user)

    def _rehash(self, user: User, password: str) -> User:
        """Upgrade a digest made with outdated cost parameters and return the stored user.

        Failure never blocks the login; the user is then returned unchanged.
        """
        new_hash = self._hasher.hash(password)
        try:
            self._repository.update_password_hash(user.id, new_hash)
            # Re-read so the returned user carries the new updated_at.
            refreshed = self._repository.find_by_username(user.username)
        except StorageError:
            logger.exception("Could not store or reload upgraded password hash for user id=%s", user.id)
            return user
        logger.info("Upgraded password hash parameters for user id=%s", user.id)
        return refreshed or user
