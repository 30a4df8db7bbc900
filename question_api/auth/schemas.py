"""Pydantic schemas for auth requests and responses."""

from pydantic import EmailStr, Field

from question_api.utils.responses import CamelModel, UTCDateTime


# --- Requests ---

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=2)
    company_name: str = Field(min_length=2)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


# --- Responses ---

class CompanyResponse(CamelModel):
    id: str
    name: str
    created_at: UTCDateTime


class UserResponse(CamelModel):
    """Public view of a user; the password hash is never part of it."""

    id: str
    email: str
    name: str
    role: str
    company_id: str
    is_active: bool
    created_at: UTCDateTime


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str


class AuthResponse(CamelModel):
    user: UserResponse
    company: CompanyResponse
    tokens: TokenResponse


class IdentityResponse(CamelModel):
    user_id: str
    email: str
    role: str
    company_id: str
