"""Auth request/response schemas."""

from pydantic import BaseModel, EmailStr, Field, model_validator

from kalkyla.db.models.enums import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class MeResponse(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    org_id: int | None
    org_slug: str | None
    permissions: list[str] = []


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: MeResponse


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=72)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Lösenorden matchar inte")
        return self


class ResetTokenStatus(BaseModel):
    valid: bool
    reason: str | None = None


class PasswordStrengthRequest(BaseModel):
    password: str = Field(..., max_length=72)


class PasswordStrengthResponse(BaseModel):
    valid: bool
    errors: list[str]
