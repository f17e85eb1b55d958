"""
API request and response models for forum-auth REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. The mapping from domain to transport
lives in the from_* factory methods below, not in route handlers.

Separation of concerns: auth/ models = domain truth; api/ models = API contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import AuthResult, FieldError, User

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class UsernamePasswordInput(BaseModel):
    """Request body for POST /api/v1/auth/register and /api/v1/auth/login.

    Only upper bounds are enforced here. Minimum lengths are business rules
    reported as field errors by auth.validation, not as 422 responses.
    Whitespace is NOT stripped -- the submitted value is the credential.
    """

    username: str = Field(max_length=255)
    password: str = Field(max_length=1024)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class FieldErrorModel(BaseModel):
    """One field-scoped error."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str

    @classmethod
    def from_domain(cls, error: FieldError) -> "FieldErrorModel":
        return cls(field=error.field, message=error.message)


class UserModel(BaseModel):
    """Public view of a user. There is deliberately no password_hash field."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, user: User) -> "UserModel":
        return cls(**user.to_public_dict())


class UserResponse(BaseModel):
    """Response body for register and login.

    Exactly one of errors / user is populated; the other is null.
    """

    model_config = ConfigDict(frozen=True)

    errors: Optional[list[FieldErrorModel]] = None
    user: Optional[UserModel] = None

    @classmethod
    def from_result(cls, result: AuthResult) -> "UserResponse":
        if result.ok:
            return cls(user=UserModel.from_domain(result.user))
        return cls(errors=[FieldErrorModel.from_domain(e) for e in result.errors])


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
