# storefront/schemas/contact.py
from sqlmodel import SQLModel


class ContactCreate(SQLModel):
    """Payload for POST /contact."""

    name: str | None = None
    email: str | None = None
    message: str | None = None


class ContactResponse(SQLModel):
    message: str
    contactId: int
