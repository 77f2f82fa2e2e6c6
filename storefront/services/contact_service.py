# storefront/services/contact_service.py
import logging

from sqlmodel import Session

from storefront.core.errors import ApiError, StoreError, ValidationError
from storefront.repositories.contact_repo import ContactRepository
from storefront.schemas.contact import ContactCreate, ContactResponse

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, repo: ContactRepository):
        self.repo = repo

    def submit(self, session: Session, payload: ContactCreate) -> ContactResponse:
        if not payload.name or not payload.email or not payload.message:
            raise ApiError(400, "All fields are required", "MISSING_FIELDS")

        try:
            contact_id = self.repo.save(session, payload.name, payload.email, payload.message)
        except ValidationError as exc:
            raise ApiError(400, "All fields are required", "MISSING_FIELDS") from exc
        except StoreError as exc:
            logger.error("Contact form error: %s", exc)
            raise ApiError(500, "Failed to save contact message", "DB_ERROR") from exc

        return ContactResponse(message="Message received successfully", contactId=contact_id)
