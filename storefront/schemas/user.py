# storefront/schemas/user.py
from datetime import datetime

from sqlmodel import SQLModel

# Request bodies keep every field optional: the services answer missing
# fields with 400 MISSING_FIELDS instead of a framework validation error.


class RegisterRequest(SQLModel):
    """Payload for POST /auth/register."""

    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(SQLModel):
    """Payload for POST /auth/login."""

    email: str | None = None
    password: str | None = None


class ProfileUpdate(SQLModel):
    """
    Payload for PUT /user/{userId}.

    Full overwrite: any field left out is stored as "".
    """

    name: str | None = None
    username: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None


class UserPublic(SQLModel):
    """Public identity returned by profile fetch, verify, login and refresh."""

    id: int
    name: str
    email: str


class UserAccount(UserPublic):
    """Full user row minus the password hash (returned by authenticate)."""

    username: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    created_at: datetime | None = None


class TokenClaims(SQLModel):
    """Verified JWT payload."""

    id: int
    email: str


# Field names below follow the JSON wire format.


class RegisterResponse(SQLModel):
    message: str
    userId: int


class AuthResponse(SQLModel):
    token: str
    user: UserPublic


class VerifyResponse(SQLModel):
    user: UserPublic


class MessageResponse(SQLModel):
    message: str
