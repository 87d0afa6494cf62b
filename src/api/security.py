"""Bearer-token authentication dependencies.

FastAPI resolves these as a chain: the token service and repository are
injected, ``authenticate_request`` runs the checks, and the resolved user is
attached to ``request.state`` for the route handler. Every failure ends the
request with the same 401; the specific reason only goes to the logs.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param

from api.dependencies import get_token_service, get_user_repo
from domain.model.errors import AuthenticationError, ExpiredTokenError, MalformedTokenError
from domain.model.user import User
from port.user_repository import UserRepository
from services.token_service import TokenService

logger = logging.getLogger(__name__)

AUTHENTICATION_FAILED = "Authentication failed"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise AuthenticationError("No token provided")

    scheme, token = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Invalid token format")
    return token


def authenticate_request(
    authorization: Optional[str],
    token_service: TokenService,
    user_repo: UserRepository,
) -> User:
    """Resolve the user behind an Authorization header value.

    Raises:
        AuthenticationError: with an operator-facing reason
    """
    token = extract_bearer_token(authorization)

    try:
        user_id = token_service.verify(token)
    except ExpiredTokenError as e:
        raise AuthenticationError("Token expired") from e
    except MalformedTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}") from e

    user = user_repo.get_by_id(user_id)
    if not user:
        raise AuthenticationError(f"User not found: {user_id}")
    return user


def get_current_user_required(
    request: Request,
    authorization: Optional[str] = Header(None),
    token_service: TokenService = Depends(get_token_service),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Get current authenticated user (required). Raises 401 if not authenticated."""
    try:
        user = authenticate_request(authorization, token_service, user_repo)
    except AuthenticationError as e:
        logger.warning(
            "Authentication failed",
            extra={"reason": e.reason, "path": request.url.path},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTHENTICATION_FAILED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = user
    return user
