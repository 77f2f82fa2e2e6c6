# storefront/core/auth.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from storefront.core.errors import ApiError, InvalidToken
from storefront.core.tokens import TokenService
from storefront.schemas.user import TokenClaims

logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise the
#   framework's default 403, so we can answer with our own error body.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """Token service built at startup and stored on app.state."""
    return request.app.state.tokens


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Enforce a valid access token.

    Flow:
      1. No `Authorization: Bearer <token>` header => 401 MISSING_TOKEN.
      2. Bad signature / expired / malformed       => 403 INVALID_TOKEN.
      3. Otherwise return the {id, email} claims.

    The user row is NOT looked up here; routes that need it do so.
    """
    if credentials is None or not credentials.credentials:
        raise ApiError(401, "Authorization token required", "MISSING_TOKEN")

    try:
        return tokens.verify_access(credentials.credentials)
    except InvalidToken as exc:
        logger.info("Access token rejected: %s", exc)
        raise ApiError(403, "Invalid or expired token", "INVALID_TOKEN") from exc
