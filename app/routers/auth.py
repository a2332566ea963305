"""
Authentication API endpoints for signup, login and account management.
Tokens are returned as authtoken and read back from the auth-token header.
"""

from fastapi import APIRouter, Depends, status
from app.models.user import User
from app.services.auth import AuthService
from app.schemas.auth import LoginRequest, AuthPayload
from app.schemas.user import UserCreate, UserUpdate, UserResponse, PasswordChangeRequest
from app.schemas.common import DataResponse, MessageOnlyResponse
from app.schemas.error import get_error_responses, get_auth_error_responses
from app.utils.dependencies import get_auth_service, get_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/createUser",
    response_model=DataResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create a landlord or tenant account and return a token for it",
    responses=get_error_responses(400, 409, 500)
)
async def create_user(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
) -> DataResponse[AuthPayload]:
    """
    Register a new account.

    Args:
        user_data: Name, email, phone number, password and role
        auth_service: Authentication service

    Returns:
        Token and profile of the new account

    Raises:
        DuplicateResourceError: If the email or phone number is taken
    """
    user, token = await auth_service.register(user_data)
    user_response = await auth_service.build_user_response(user)
    return DataResponse(data=AuthPayload(authtoken=token, user=user_response))


@router.post(
    "/login",
    response_model=DataResponse[AuthPayload],
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate with email and password",
    responses=get_error_responses(400, 401, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> DataResponse[AuthPayload]:
    """
    Authenticate user and return a token.

    Raises:
        InvalidCredentialsError: If the email or password is wrong
    """
    user, token = await auth_service.login(login_data.email, login_data.password)
    user_response = await auth_service.build_user_response(user)
    return DataResponse(data=AuthPayload(authtoken=token, user=user_response))


@router.get(
    "/getuser",
    response_model=DataResponse[UserResponse],
    summary="Get current user",
    description="Profile of the signed-in user, including saved property IDs",
    responses=get_auth_error_responses()
)
@router.post(
    "/getuser",
    response_model=DataResponse[UserResponse],
    summary="Get current user",
    description="Profile of the signed-in user, including saved property IDs",
    responses=get_auth_error_responses()
)
async def get_user(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> DataResponse[UserResponse]:
    """Return the caller's profile."""
    return DataResponse(data=await auth_service.build_user_response(current_user))


@router.put(
    "/updateuser",
    response_model=DataResponse[UserResponse],
    summary="Update profile",
    description="Change name, email or phone number of the signed-in user",
    responses=get_error_responses(400, 401, 409, 500)
)
async def update_user(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> DataResponse[UserResponse]:
    """
    Update the caller's profile.

    Args:
        update_data: Any subset of name, email and phoneNo
        current_user: Signed-in user
        auth_service: Authentication service

    Returns:
        Updated profile
    """
    user = await auth_service.update_profile(current_user, update_data)
    return DataResponse(
        message="Profile updated successfully",
        data=await auth_service.build_user_response(user)
    )


@router.put(
    "/change-password",
    response_model=MessageOnlyResponse,
    summary="Change password",
    responses=get_auth_error_responses()
)
async def change_password(
    request: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageOnlyResponse:
    """Replace the caller's password after verifying the old one."""
    await auth_service.change_password(current_user, request)
    return MessageOnlyResponse(message="Password changed successfully")


@router.delete(
    "/delete-account",
    response_model=MessageOnlyResponse,
    summary="Delete account",
    description="Delete the signed-in user with their properties, messages, favorites and review",
    responses=get_auth_error_responses()
)
async def delete_account(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageOnlyResponse:
    """Delete the caller's account."""
    await auth_service.delete_account(current_user)
    return MessageOnlyResponse(message="Account deleted successfully")
