"""
Auth API endpoints.

Login, registration, self-service profile, password reset and profile
image upload. Errors raised by the service are mapped to HTTP
responses by the app-level exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from api.dependencies import get_auth_service, get_image_uploader
from api.middleware.auth import get_current_user
from api.models.errors import ErrorResponse
from shared.models import AuthenticatedUser

from .exceptions import InvalidInputError
from .interfaces import IAuthService, IImageUploader
from .models import (
    AuthResponse,
    ImageUploadResponse,
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdateRequest,
    PublicUser,
    RegisterRequest,
)

router = APIRouter()


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Exchange email and secret for a bearer token."""
    return await service.login(request)


@router.post(
    "/register",
    response_model=AuthResponse,
    responses={409: {"model": ErrorResponse}},
)
async def register(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Create an account and log it in.

    A correct ``inviteToken`` grants the admin role.
    """
    return await service.register(request)


@router.get("/profile", response_model=PublicUser)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> PublicUser:
    return await service.get_profile(user.id)


@router.put(
    "/profile",
    response_model=PublicUser,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_profile(
    request: ProfileUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> PublicUser:
    """Update the caller's own name, email, secret or image."""
    return await service.update_profile(user.id, request)


@router.post("/password-reset/request", status_code=202)
async def request_password_reset(
    request: PasswordResetRequest,
    service: IAuthService = Depends(get_auth_service),
) -> dict:
    """
    Send a reset link if the account exists.

    Always answers 202 so the response does not reveal whether the
    email is registered.
    """
    await service.request_password_reset(request.email)
    return {}


@router.post(
    "/password-reset/confirm",
    responses={400: {"model": ErrorResponse}},
)
async def confirm_password_reset(
    request: PasswordResetConfirm,
    service: IAuthService = Depends(get_auth_service),
) -> dict:
    await service.confirm_password_reset(request.token, request.new_secret)
    return {}


@router.post(
    "/upload-image",
    response_model=ImageUploadResponse,
    responses={400: {"model": ErrorResponse}},
)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    uploader: IImageUploader = Depends(get_image_uploader),
) -> ImageUploadResponse:
    """
    Store a profile image and return its URL.

    Open to anonymous callers so the image can be chosen before
    registering; the URL is then sent as ``profileImageRef``.
    """
    if image is None or not image.filename:
        raise InvalidInputError("No file uploaded", field="image")
    data = await image.read()
    image_url = await uploader.upload(image.filename, data)
    return ImageUploadResponse(message="Image uploaded successfully", image_url=image_url)
