"""Request/response models for authentication endpoints."""

from pydantic import BaseModel, Field

from studyhub.models.user import PublicUser, UserData


class RegisterRequest(BaseModel):
    """Request model for account registration."""
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Plain-text password (min 6 characters)")


class LoginRequest(BaseModel):
    """Request model for email/password login."""
    email: str
    password: str


class AuthResponse(BaseModel):
    """Response model for authentication: token, user, and the stored dashboard data."""
    token: str
    token_type: str = "bearer"
    user: PublicUser
    data: UserData


class MeResponse(BaseModel):
    user: PublicUser
