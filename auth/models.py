"""
auth/models.py -- Domain dataclasses for credentials, users, and auth results.

Pattern: Data class (pure data containers). The store and service do the work;
these classes own the shape. AuthResult is the one exception with a little
logic -- its two constructors enforce that a result carries a user OR errors,
never both.

Serialization is explicit: User.to_public_dict() is the only place a User is
turned into caller-facing data, and it never includes password_hash.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Credentials:
    """Raw username/password pair as submitted by a caller. Never persisted as-is."""

    username: str
    password: str = field(repr=False)


@dataclass
class User:
    """A registered user.

    id, created_at and updated_at are assigned by the store. password_hash is
    an argon2 PHC string; it is excluded from repr so it cannot leak through
    log lines or tracebacks that format the object.
    """

    username: str
    password_hash: str = field(repr=False)
    id: int | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, bumped by store on every mutation

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class FieldError:
    """One validation or business-rule failure tied to a named input field."""

    field: str
    message: str


@dataclass
class AuthResult:
    """Outcome of register() or login(): a user on success, field errors otherwise.

    Build instances with success() / failure() rather than the constructor so
    the user-xor-errors invariant always holds.
    """

    user: User | None = None
    errors: list[FieldError] = field(default_factory=list)

    @classmethod
    def success(cls, user: User) -> AuthResult:
        return cls(user=user, errors=[])

    @classmethod
    def failure(cls, *errors: FieldError) -> AuthResult:
        if not errors:
            raise ValueError("AuthResult.failure() requires at least one FieldError")
        return cls(user=None, errors=list(errors))

    @property
    def ok(self) -> bool:
        return self.user is not None
