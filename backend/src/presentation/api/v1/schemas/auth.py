"""
Authentication Request/Response Schemas
Pydantic v2 models with strict validation
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from domain.entities import User
from domain.value_objects import Handle


class SignupRequest(BaseModel):
    """Sign-up request"""

    handle: str = Field(..., min_length=3, max_length=30, examples=["jane_doe"])
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("handle")
    @classmethod
    def validate_handle(cls, v: str) -> str:
        """Same rules as the Handle value object"""
        return str(Handle(v))


class LoginRequest(BaseModel):
    """Login request"""

    handle: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public view of a user; never carries the password hash"""

    id: str
    handle: str
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id),
            handle=str(user.handle),
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class AuthResponse(BaseModel):
    """Token issued at sign-up and login"""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
