"""Auth Schemas — signup, login and the authenticated user view.

Invariants:
    - Emails are validated (EmailStr) and lower-cased before lookup or storage
    - password: 8-128 chars; confirm_password, when sent, must match
    - Password material never appears in a response model
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator,
)

from tutor_network.core.domain_types import UserType


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    confirm_password: str | None = None
    full_name: str = Field(min_length=1, max_length=200)
    user_type: UserType = UserType.STUDENT

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty or whitespace")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match.")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseModel):
    """Public view of an account."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: str
    username: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    contact_info: str | None = None
    user_type: UserType
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
