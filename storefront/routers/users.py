# storefront/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import MessageResponse, ProfileUpdate, UserPublic
from storefront.services.user_service import UserService

router = APIRouter(
    prefix="/user",
    tags=["Users"],
    dependencies=[Depends(require_auth)],
)

repo = UserRepository()
service = UserService(repo)


# userId is taken as text so a non-numeric id answers 400, not 422.
@router.get("/{user_id}", response_model=UserPublic)
def get_profile(user_id: str, session: Session = Depends(get_session)):
    """
    Get a user's public profile: {id, name, email}.
    """
    return service.get_profile(session, user_id)


@router.put("/{user_id}", response_model=MessageResponse)
def update_profile(
    user_id: str,
    payload: ProfileUpdate | None = None,
    session: Session = Depends(get_session),
):
    """
    Overwrite name, username, bio, location and website.

    Fields missing from the body are stored as empty strings.
    """
    return service.update_profile(session, user_id, payload or ProfileUpdate())
