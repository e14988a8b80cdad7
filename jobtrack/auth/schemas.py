"""Authentication request/response schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=255)
    name: str = Field("", max_length=255)


class UserResponse(BaseModel):
    id: UUID
    email: str
    name: str | None = ""
    is_active: bool

    model_config = {"from_attributes": True}
