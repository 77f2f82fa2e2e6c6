# storefront/repositories/contact_repo.py
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.errors import StoreError, ValidationError
from storefront.models.contact import Contact
from storefront.repositories.utils import clean_text


class ContactRepository:
    """Append-only store for contact-form messages."""

    def save(self, session: Session, name: str, email: str, message: str) -> int:
        """
        Insert a message (trimmed) and return its id.

        Raises:
            ValidationError: any field missing or blank after trimming.
        """
        name, email, message = clean_text(name), clean_text(email), clean_text(message)
        if not name or not email or not message:
            raise ValidationError("Name, email, and message cannot be empty")

        contact = Contact(name=name, email=email, message=message)
        try:
            session.add(contact)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        session.refresh(contact)
        return contact.id
