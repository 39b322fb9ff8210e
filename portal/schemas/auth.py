"""Auth API schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from portal.shared.utils.phone import looks_like_phone, normalize_phone_number


class SignupRequest(BaseModel):
    """Request body for public signup. New accounts get the customer role."""

    phone_number: str = Field(..., min_length=7, max_length=32)
    password: str = Field(..., min_length=6, max_length=128)
    username: str | None = Field(default=None, min_length=1, max_length=128)
    email: EmailStr | None = None

    @field_validator("phone_number")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        return normalize_phone_number(v)


class LoginRequest(BaseModel):
    """Request body for login with a phone number or username."""

    login: str = Field(..., min_length=1, max_length=128, description="Phone number or username")
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("login")
    @classmethod
    def normalize_login(cls, v: str) -> str:
        v = v.strip()
        if looks_like_phone(v):
            try:
                return normalize_phone_number(v)
            except ValueError:
                return v
        return v


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
