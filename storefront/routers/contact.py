# storefront/routers/contact.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.repositories.contact_repo import ContactRepository
from storefront.schemas.contact import ContactCreate, ContactResponse
from storefront.services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["Contact"])

service = ContactService(ContactRepository())


@router.post("", response_model=ContactResponse, dependencies=[Depends(require_auth)])
def submit_contact(payload: ContactCreate, session: Session = Depends(get_session)):
    """Store a contact-form message."""
    return service.submit(session, payload)
