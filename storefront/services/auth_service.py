# storefront/services/auth_service.py
import logging

from sqlmodel import Session

from storefront.core.errors import (
    ApiError,
    DuplicateEmailError,
    InvalidToken,
    PasswordTooLongError,
    StoreError,
    ValidationError,
)
from storefront.core.security import DEFAULT_ROUNDS
from storefront.core.tokens import TokenService
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenClaims,
    UserPublic,
    VerifyResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration, login, token refresh and token verification.

    Responsibilities:
      - check required fields before touching the store
      - issue access + refresh tokens
      - map domain errors to ApiError (status + stable code)
    """

    def __init__(
        self,
        repo: UserRepository,
        tokens: TokenService,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self.repo = repo
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, session: Session, payload: RegisterRequest) -> RegisterResponse:
        logger.info("Registration attempt for %s", payload.email)
        if not payload.name or not payload.email or not payload.password:
            raise ApiError(400, "Name, email, and password are required.", "MISSING_FIELDS")

        try:
            user_id = self.repo.register(
                session,
                payload.name,
                payload.email,
                payload.password,
                rounds=self.bcrypt_rounds,
            )
        except PasswordTooLongError as exc:
            raise ApiError(400, str(exc), "PASSWORD_TOO_LONG") from exc
        except ValidationError as exc:
            raise ApiError(400, str(exc), "MISSING_FIELDS") from exc
        except DuplicateEmailError as exc:
            raise ApiError(409, "Email already registered", "EMAIL_EXISTS") from exc
        except StoreError as exc:
            logger.error("Registration error: %s", exc)
            raise ApiError(500, "Registration failed", "DB_ERROR") from exc

        return RegisterResponse(message="User registered successfully", userId=user_id)

    def login(self, session: Session, payload: LoginRequest) -> tuple[AuthResponse, str]:
        """
        Check credentials and mint a token pair.

        Returns:
            (response body with the access token, refresh token for the cookie)
        """
        if not payload.email or not payload.password:
            raise ApiError(400, "Email and password are required", "MISSING_FIELDS")

        try:
            account = self.repo.authenticate(session, payload.email, payload.password)
        except StoreError as exc:
            logger.error("Authentication error: %s", exc)
            raise ApiError(500, "Authentication failed", "AUTH_ERROR") from exc

        if account is None:
            logger.info("Invalid credentials for %s", payload.email)
            raise ApiError(401, "Invalid email or password", "INVALID_CREDENTIALS")

        user = UserPublic(id=account.id, name=account.name, email=account.email)
        logger.info("User %s authenticated", user.id)
        return self._token_pair(user)

    def refresh(self, session: Session, refresh_token: str | None) -> tuple[AuthResponse, str]:
        """
        Exchange a refresh token for a new access token and a new refresh
        token. The old refresh token is not invalidated.
        """
        if not refresh_token:
            raise ApiError(401, "No refresh token", "MISSING_REFRESH_TOKEN")

        try:
            user = self.tokens.verify_refresh(session, refresh_token)
        except InvalidToken as exc:
            logger.info("Refresh token rejected: %s", exc)
            raise ApiError(403, str(exc), "INVALID_REFRESH_TOKEN") from exc
        except StoreError as exc:
            logger.error("Error fetching user for refresh token: %s", exc)
            raise ApiError(500, "Server error during token refresh", "DB_ERROR") from exc

        return self._token_pair(user)

    def verify(self, session: Session, claims: TokenClaims) -> VerifyResponse:
        try:
            user = self.repo.get_by_id(session, claims.id)
        except StoreError as exc:
            logger.error("Error fetching user: %s", exc)
            raise ApiError(500, "Internal server error", "DB_ERROR") from exc

        if user is None:
            raise ApiError(401, "User not found", "USER_NOT_FOUND")
        return VerifyResponse(user=user)

    def _token_pair(self, user: UserPublic) -> tuple[AuthResponse, str]:
        access = self.tokens.issue_access(user)
        refresh = self.tokens.issue_refresh(user)
        return AuthResponse(token=access, user=user), refresh
