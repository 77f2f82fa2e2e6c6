# storefront/models/contact.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Contact(SQLModel, table=True):
    """Contact-form message. Rows are only ever inserted."""

    __tablename__ = "contacts"

    id: int | None = Field(default=None, primary_key=True)
    name: str
    email: str
    message: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
