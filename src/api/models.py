"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Only shape is checked here; email and name rules live in the domain value
objects so there is one source of truth.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.user import User


class RegisterUserRequest(BaseModel):
    """Request model for user registration."""

    email: str = Field(..., min_length=1, description="Email address (normalized server-side)")
    name: str = Field(..., min_length=1, description="Display name, 2-50 letters")


class UpdateEmailRequest(BaseModel):
    """Request model for changing a user's email."""

    email: str = Field(..., min_length=1)


class UpdateNameRequest(BaseModel):
    """Request model for changing a user's display name."""

    name: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Serialized User, same shape as User.to_dict()."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 timestamp")
    updated_at: str = Field(..., alias="updatedAt", description="ISO-8601 timestamp")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(**user.to_dict())


class UserListResponse(BaseModel):
    """Response model for listing users."""

    users: list[UserResponse]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
