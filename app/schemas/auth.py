"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel, Field

from app.schemas.user import UserRead


class LoginRequest(BaseModel):
    """Username/password login."""
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=72)


class TokenResponse(BaseModel):
    """Bearer token plus the authenticated user."""
    access_token: str
    token_type: str = "bearer"
    user: UserRead
