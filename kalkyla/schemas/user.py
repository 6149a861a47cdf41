"""User request/response schemas - API contract and validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from kalkyla.db.models.enums import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=255)
    # bcrypt accepts max 72 bytes; validate here for a clear 422
    password: str = Field(..., min_length=8, max_length=72)
    role: UserRole = UserRole.CLOSER
    org_id: int | None = None


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(None, min_length=2, max_length=255)
    role: UserRole | None = None
    # Applied only when at least 8 characters; blank keeps the current password
    password: str | None = Field(None, max_length=72)
    is_active: bool | None = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    org_id: int | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
