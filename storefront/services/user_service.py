# storefront/services/user_service.py
import logging

from sqlmodel import Session

from storefront.core.errors import ApiError, InvalidArgument, StoreError
from storefront.repositories.user_repo import UserRepository
from storefront.repositories.utils import require_positive_id
from storefront.schemas.user import MessageResponse, ProfileUpdate, UserPublic

logger = logging.getLogger(__name__)


def _parse_user_id(raw) -> int:
    try:
        return require_positive_id(raw)
    except InvalidArgument as exc:
        logger.info("Invalid user ID in request: %r", raw)
        raise ApiError(400, "Invalid user ID", "INVALID_USER_ID") from exc


class UserService:
    """
    Profile fetch and update.

    Note: any authenticated caller may read or overwrite any profile;
    the token's user is not compared with the path id.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get_profile(self, session: Session, raw_user_id) -> UserPublic:
        """
        Return {id, name, email}.

        Unlike the other endpoints, a store failure here forwards the raw
        error text in `details`.
        """
        user_id = _parse_user_id(raw_user_id)
        try:
            user = self.repo.get_by_id(session, user_id)
        except StoreError as exc:
            logger.error("Error fetching user profile: %s", exc)
            raise ApiError(500, "Database error", "DB_ERROR", details=str(exc)) from exc

        if user is None:
            raise ApiError(404, "User not found", "USER_NOT_FOUND")
        return user

    def update_profile(
        self, session: Session, raw_user_id, payload: ProfileUpdate
    ) -> MessageResponse:
        """
        Overwrite name, username, bio, location and website.
        Omitted fields are blanked.
        """
        user_id = _parse_user_id(raw_user_id)
        try:
            changed = self.repo.update_profile(session, user_id, payload)
        except StoreError as exc:
            logger.error("Failed to update profile: %s", exc)
            raise ApiError(500, "Database update failed", "DB_ERROR") from exc

        if not changed:
            raise ApiError(404, "User not found", "USER_NOT_FOUND")
        return MessageResponse(message="Profile updated successfully")
