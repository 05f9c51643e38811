"""
Pydantic schemas for authentication and the current-user state.
"""
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class Role(str, enum.Enum):
    """Resolved once per session from the profile's admin flag."""
    STANDARD = "standard"
    ADMIN = "admin"


class UserState(BaseModel):
    """
    Identity fields merged with the profile document.

    Built from ``{**identity_fields, **profile_fields}``, so profile values
    win whenever both sides carry the same key.
    """
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    photo_url: Optional[str] = Field(None, alias="photoURL")
    provider_id: Optional[str] = Field(None, alias="providerId")
    username: Optional[str] = None
    is_admin: bool = Field(False, alias="isAdmin")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    role: Role = Role.STANDARD

    class Config:
        populate_by_name = True

    @property
    def name(self) -> str:
        """Best human-readable name: username, then display name, then email."""
        return self.username or self.display_name or self.email or self.uid


class SignupRequest(BaseModel):
    """Request schema for user signup."""
    username: str = Field(..., max_length=200, description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="At least 8 characters including a number")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username is required.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8 or not any(ch.isdigit() for ch in v):
            raise ValueError("Password must be at least 8 characters and contain a number.")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be 72 characters or fewer.")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "email": "alice@example.com",
                "password": "pw123456"
            }
        }


class GoogleSignInRequest(BaseModel):
    id_token: str = Field(..., min_length=1, description="Google ID token from the client")
    remember: bool = Field(True, description="Keep the session after the browser closes")


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left as they are."""
    display_name: Optional[str] = Field(None, alias="displayName", max_length=200)
    photo_url: Optional[str] = Field(None, alias="photoURL")

    class Config:
        populate_by_name = True

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Display name is required.")
        return v.strip() if v is not None else v


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    persistence: str
    user: Optional[UserState] = None


class MessageResponse(BaseModel):
    message: str
