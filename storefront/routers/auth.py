# storefront/routers/auth.py
from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from sqlmodel import Session

from storefront.core.auth import get_token_service, require_auth
from storefront.core.config import Settings
from storefront.core.tokens import TokenService
from storefront.database import get_session
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenClaims,
    VerifyResponse,
)
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()

REFRESH_COOKIE = "refreshToken"


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(
    settings: Settings = Depends(get_settings_from_app),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(repo, tokens, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    """httpOnly refresh cookie; Secure only in production."""
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account.

    409 EMAIL_EXISTS if the email is taken.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_session),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_from_app),
):
    """
    Check credentials.

    Returns the access token in the body and sets the refresh token
    as an httpOnly `refreshToken` cookie.
    """
    body, refresh_token = service.login(session, payload)
    set_refresh_cookie(response, refresh_token, settings)
    return body


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    response: Response,
    refresh_token: str | None = Cookie(default=None, alias=REFRESH_COOKIE),
    session: Session = Depends(get_session),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_from_app),
):
    """
    Mint a new access token from the refresh cookie.

    The cookie is rotated on every call; the previous refresh token is
    not revoked.
    """
    body, new_refresh_token = service.refresh(session, refresh_token)
    set_refresh_cookie(response, new_refresh_token, settings)
    return body


@router.get("/verify", response_model=VerifyResponse)
def verify(
    session: Session = Depends(get_session),
    claims: TokenClaims = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """Return the user behind a valid access token."""
    return service.verify(session, claims)
