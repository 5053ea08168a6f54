from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, constr, field_validator

from src.domain.entities.user import Role

# ---------------------------------------------------------------------------
# Shared / primitive types ---------------------------------------------------
# ---------------------------------------------------------------------------

UsernameStr = constr(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    name: str = Field(..., min_length=1, max_length=100, examples=["John Doe"])
    username: UsernameStr = Field(..., examples=["john_doe"])
    email: EmailStr = Field(..., examples=["john@example.com"])
    password: str = Field(..., min_length=8, max_length=72, examples=["Str0ngP@ssw0rd"])
    role: Role = Field(default=Role.USER, examples=["user"])
    address: str = Field(default="", max_length=255)
    phone_number: str = Field(default="", max_length=32)

    @field_validator("role")
    @classmethod
    def only_user_role(cls, v: Role) -> Role:
        # Admins are provisioned out of band, never through self-registration.
        if v != Role.USER:
            raise ValueError("self-registration is limited to the user role")
        return v


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``."""

    username: UsernameStr = Field(..., examples=["john_doe"])
    password: str = Field(..., min_length=1, examples=["Str0ngP@ssw0rd"])


class RefreshRequest(BaseModel):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(
        ..., min_length=1, max_length=256, examples=["4f1c2a9e-8d0b-4f7e-9a53-2b6c1e7d9f00"]
    )


class LogoutRequest(BaseModel):
    """Optional payload accepted by ``POST /auth/logout``."""

    refresh_token: Optional[str] = Field(
        default=None, max_length=256, examples=["4f1c2a9e-8d0b-4f7e-9a53-2b6c1e7d9f00"]
    )


class ValidateTokenRequest(BaseModel):
    """Payload expected by ``POST /auth/validate``."""

    token: str = Field(..., min_length=1, examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."])
