# storefront/repositories/user_repo.py
import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from storefront.core.errors import (
    DuplicateEmailError,
    PasswordTooLongError,
    StoreError,
    ValidationError,
)
from storefront.core.security import (
    DEFAULT_ROUNDS,
    MAX_PASSWORD_BYTES,
    hash_password,
    password_too_long,
    verify_password,
)
from storefront.models.user import User
from storefront.repositories.utils import clean_text, require_positive_id
from storefront.schemas.user import ProfileUpdate, UserAccount, UserPublic

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "username", "bio", "location", "website")


class UserRepository:
    """
    Credential store: data access layer for User.

    Responsibilities:
      - hashing and verifying passwords
      - email uniqueness (enforced by the unique index, surfaced as
        DuplicateEmailError)
      - no FastAPI, no HTTP
    """

    # ----- Registration / authentication -----

    def register(
        self,
        session: Session,
        name: str,
        email: str,
        password: str,
        rounds: int = DEFAULT_ROUNDS,
    ) -> int:
        """
        Insert a new user and return its id.

        Raises:
            ValidationError: a field is missing or blank after trimming.
            PasswordTooLongError: password is over MAX_PASSWORD_BYTES bytes.
            DuplicateEmailError: email already registered.
            StoreError: any other database failure.
        """
        name, email = clean_text(name), clean_text(email)
        if not name or not email or not clean_text(password):
            raise ValidationError("Name, email, and password cannot be empty")

        if password_too_long(password):
            raise PasswordTooLongError(
                f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes"
            )
        password_hash = hash_password(password, rounds)

        user = User(name=name, email=email, password_hash=password_hash)
        try:
            session.add(user)
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if "email" in str(exc.orig).lower():
                raise DuplicateEmailError("Email already exists") from exc
            raise StoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc

        session.refresh(user)
        logger.info("User registered with id %s", user.id)
        return user.id

    def authenticate(
        self, session: Session, email: str, password: str
    ) -> UserAccount | None:
        """
        Check credentials.

        Returns:
            The user (without password hash) on match, otherwise None.
            An unknown email is "no match", not an error.
        """
        email = clean_text(email)
        if not email or not isinstance(password, str):
            return None

        user = self._get_row_by_email(session, email)
        if user is None:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return UserAccount.model_validate(user, from_attributes=True)

    # ----- Reads -----

    def get_by_id(self, session: Session, user_id) -> UserPublic | None:
        """Return {id, name, email} for a user, or None if not found."""
        user_id = require_positive_id(user_id)
        stmt = select(User.id, User.name, User.email).where(User.id == user_id)
        try:
            row = session.exec(stmt).first()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        if row is None:
            return None
        return UserPublic(id=row.id, name=row.name, email=row.email)

    def get_by_email(self, session: Session, email: str) -> UserAccount | None:
        """Return a user by trimmed email (no password hash), or None."""
        email = clean_text(email)
        if not email:
            raise ValidationError("Email cannot be empty")
        user = self._get_row_by_email(session, email)
        if user is None:
            return None
        return UserAccount.model_validate(user, from_attributes=True)

    def _get_row_by_email(self, session: Session, email: str) -> User | None:
        try:
            return session.exec(select(User).where(User.email == email)).first()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    # ----- Writes -----

    def update_profile(
        self, session: Session, user_id, fields: ProfileUpdate | None
    ) -> bool:
        """
        Overwrite the editable profile columns.

        Every call writes all five columns: a field that is absent is
        stored as "" (no partial update).

        Returns:
            True if a row was changed, False if the user does not exist.
        """
        user_id = require_positive_id(user_id)
        fields = fields or ProfileUpdate()
        values = {name: clean_text(getattr(fields, name)) for name in PROFILE_FIELDS}

        stmt = update(User).where(User.id == user_id).values(**values)
        try:
            result = session.exec(stmt)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        return result.rowcount > 0

    def delete(self, session: Session, user_id) -> bool:
        """Delete a user. Outstanding refresh tokens stop resolving."""
        user_id = require_positive_id(user_id)
        try:
            result = session.exec(delete(User).where(User.id == user_id))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        return result.rowcount > 0
