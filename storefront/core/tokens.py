# storefront/core/tokens.py
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.core.errors import InvalidArgument, InvalidToken
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import TokenClaims, UserPublic


class TokenService:
    """
    Issues and verifies HS256 JWTs.

    - access tokens : {id, email}, ACCESS_TOKEN_SECRET, short expiry
    - refresh tokens: {id, email}, REFRESH_TOKEN_SECRET, long expiry

    Stateless: there is no token registry, so a refresh token stays valid
    until it expires or its user row disappears.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        user_repo: UserRepository | None = None,
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.user_repo = user_repo or UserRepository()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.ACCESS_TOKEN_SECRET,
            refresh_secret=settings.REFRESH_TOKEN_SECRET,
            algorithm=settings.JWT_ALG,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    # ---- issuing ----

    def issue_access(self, user) -> str:
        return self._sign(user, self.access_secret, self.access_ttl)

    def issue_refresh(self, user) -> str:
        return self._sign(user, self.refresh_secret, self.refresh_ttl)

    def _sign(self, user, secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "id": user.id,
            "email": user.email,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    # ---- verification ----

    def verify_access(self, token: str) -> TokenClaims:
        """
        Check signature and expiry against the access secret.

        Raises:
            InvalidToken: bad signature, expired, malformed or missing claims.
        """
        payload = self._decode(token, self.access_secret)
        return self._claims(payload)

    def verify_refresh(self, session: Session, token: str) -> UserPublic:
        """
        Check a refresh token, then re-resolve its user.

        A signature-valid token whose user no longer exists is rejected;
        that is the only way a refresh token dies before expiry.

        Raises:
            InvalidToken: bad signature/expiry, no id claim, or unknown user.
            StoreError: the user lookup failed.
        """
        payload = self._decode(token, self.refresh_secret)
        claims = self._claims(payload, "Invalid refresh token format")

        try:
            user = self.user_repo.get_by_id(session, claims.id)
        except InvalidArgument as exc:
            raise InvalidToken("Invalid refresh token format") from exc
        if user is None:
            raise InvalidToken("Invalid refresh token - user not found")
        return user

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        if not token:
            raise InvalidToken("Token required")
        try:
            return jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken("Invalid or expired token") from exc

    @staticmethod
    def _claims(payload: dict[str, Any], message: str = "Invalid token payload") -> TokenClaims:
        user_id = payload.get("id")
        email = payload.get("email")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise InvalidToken(message)
        if not isinstance(email, str):
            raise InvalidToken(message)
        return TokenClaims(id=user_id, email=email)
