# storefront/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered account plus its editable profile.

    Identity:
      - id: integer generated on insert

    The bcrypt hash lives in `password_hash` and is only read by
    `UserRepository.authenticate`; every other read path selects
    the public columns.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)

    name: str = Field(description="Display name")

    email: str = Field(
        unique=True,
        index=True,
        description="Login email, stored trimmed; case-sensitive",
    )

    password_hash: str = Field(description="bcrypt hash, never returned")

    # Profile fields, blanked to "" by profile updates that omit them
    username: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
