"""Account routes (register, login, profile, avatar upload)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from api.config import get_settings
from api.dependencies import get_avatar_storage, get_token_service, get_user_repo
from api.models import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)
from api.security import get_current_user_required
from domain.model.errors import (
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    UploadRejectedError,
    ValidationError,
)
from domain.model.user import User
from port.avatar_storage import AvatarStorage
from port.user_repository import UserRepository
from services import account_service, auth_service
from services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

SERVER_ERROR = "Server error"


def _bad_request(e: DomainError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _server_error(operation: str, user_id: str | None = None) -> HTTPException:
    logger.exception(f"{operation} failed", extra={"userId": user_id})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    token_service: TokenService = Depends(get_token_service),
):
    """Register a new user and return a session token.

    Raises:
        HTTPException: 400 if a field is missing or the email is taken
    """
    try:
        user = auth_service.register(repo, request.name, request.email, request.password)
    except (ValidationError, DuplicateError) as e:
        raise _bad_request(e)
    except DomainError:
        raise _server_error("Register")

    token = token_service.issue(user.id)
    logger.info("User registered", extra={"userId": user.id, "email": user.email})
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    token_service: TokenService = Depends(get_token_service),
):
    """Login user and return a session token.

    Raises:
        HTTPException: 400 with the same message for unknown email and wrong password,
            500 if the store fails
    """
    try:
        user = auth_service.authenticate(repo, request.email, request.password)
    except (ValidationError, InvalidCredentialsError) as e:
        raise _bad_request(e)
    except DomainError:
        raise _server_error("Login")

    token = token_service.issue(user.id)
    logger.info("User logged in", extra={"userId": user.id})
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.get("/profile", response_model=UserEnvelope)
async def get_profile(current_user: User = Depends(get_current_user_required)):
    """Return the authenticated user."""
    return UserEnvelope(user=UserResponse.from_domain(current_user))


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Partially update name and/or email.

    Raises:
        HTTPException: 400 if the new email belongs to another user
    """
    try:
        user = account_service.update_profile(repo, current_user, name=request.name, email=request.email)
    except DuplicateError as e:
        raise _bad_request(e)
    except DomainError:
        raise _server_error("Update profile", current_user.id)

    return UserEnvelope(user=UserResponse.from_domain(user))


@router.post("/upload", response_model=UserEnvelope)
async def upload_avatar(
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
    storage: AvatarStorage = Depends(get_avatar_storage),
):
    """Replace the user's avatar with an uploaded JPEG/PNG image.

    Raises:
        HTTPException: 400 if no file was sent or it is too large / not an image
    """
    max_bytes = get_settings().max_avatar_bytes
    filename = content_type = data = None
    if avatar is not None:
        filename, content_type = avatar.filename, avatar.content_type
        # One byte past the limit is enough to reject without buffering everything
        data = await avatar.read(max_bytes + 1)

    try:
        user = account_service.upload_avatar(
            repo, storage, current_user, filename, content_type, data, max_bytes=max_bytes,
        )
    except (ValidationError, UploadRejectedError) as e:
        raise _bad_request(e)
    except (DomainError, OSError):
        raise _server_error("Upload", current_user.id)

    return UserEnvelope(user=UserResponse.from_domain(user))
