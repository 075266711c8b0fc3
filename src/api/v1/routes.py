"""
API v1 routes.

Defines REST endpoints for user registration and profile management.
Domain errors are translated to HTTP status codes here and nowhere else.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.dependencies import get_registration_service
from src.api.models import (
    ErrorResponse,
    RegisterUserRequest,
    UpdateEmailRequest,
    UpdateNameRequest,
    UserListResponse,
    UserResponse,
)
from src.domain.exceptions import (
    AntiSpamUnavailable,
    DomainError,
    EmailAlreadyRegistered,
    EmailBlocked,
    EmailDomainNotAllowed,
    InvalidFormat,
    UserNotFound,
)
from src.domain.registration import UserRegistrationService

router = APIRouter(tags=["v1"])

# (status, detail); None detail means the exception message is safe to echo
_ERROR_MAP: dict[type[DomainError], tuple[int, str | None]] = {
    InvalidFormat: (422, None),
    EmailBlocked: (status.HTTP_403_FORBIDDEN, "Email address rejected"),
    EmailDomainNotAllowed: (status.HTTP_403_FORBIDDEN, "Email domain not allowed"),
    EmailAlreadyRegistered: (status.HTTP_409_CONFLICT, "Email already registered"),
    UserNotFound: (status.HTTP_404_NOT_FOUND, "User not found"),
    AntiSpamUnavailable: (status.HTTP_503_SERVICE_UNAVAILABLE, "Email validation unavailable"),
}

_EMAIL_ERRORS = {
    403: {"model": ErrorResponse, "description": "Email blocked or domain not allowed"},
    409: {"model": ErrorResponse, "description": "Email already registered"},
    422: {"description": "Validation error"},
    503: {"model": ErrorResponse, "description": "Anti-spam service unavailable"},
}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


def _http_error(error: DomainError) -> HTTPException:
    for error_type, (status_code, detail) in _ERROR_MAP.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=detail or str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal error",
    )


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_EMAIL_ERRORS,
    summary="Register a new user",
    description="Validate the email (syntax, anti-spam, allowlist, uniqueness) "
    "and the display name, then create the user.",
)
async def register_user(
    request_data: RegisterUserRequest,
    service: UserRegistrationService = Depends(get_registration_service),
) -> UserResponse:
    """
    Register a new user.

    - **email**: Email address (trimmed and lowercased)
    - **name**: Display name (2-50 letters, spaces, hyphens, apostrophes)
    """
    try:
        user = await service.register(request_data.email, request_data.name)
    except DomainError as e:
        raise _http_error(e) from None
    return UserResponse.from_user(user)


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List users",
)
async def list_users(
    service: UserRegistrationService = Depends(get_registration_service),
) -> UserListResponse:
    try:
        users = service.list_users()
    except DomainError as e:
        raise _http_error(e) from None
    return UserListResponse(users=[UserResponse.from_user(u) for u in users])


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses=_NOT_FOUND,
    summary="Get a user",
)
async def get_user(
    user_id: str,
    service: UserRegistrationService = Depends(get_registration_service),
) -> UserResponse:
    try:
        user = service.get_user(user_id)
    except DomainError as e:
        raise _http_error(e) from None
    return UserResponse.from_user(user)


@router.patch(
    "/users/{user_id}/email",
    response_model=UserResponse,
    responses={**_EMAIL_ERRORS, **_NOT_FOUND},
    summary="Change a user's email",
)
async def change_email(
    user_id: str,
    request_data: UpdateEmailRequest,
    service: UserRegistrationService = Depends(get_registration_service),
) -> UserResponse:
    try:
        user = await service.change_email(user_id, request_data.email)
    except DomainError as e:
        raise _http_error(e) from None
    return UserResponse.from_user(user)


@router.patch(
    "/users/{user_id}/name",
    response_model=UserResponse,
    responses=_NOT_FOUND,
    summary="Change a user's display name",
)
async def change_name(
    user_id: str,
    request_data: UpdateNameRequest,
    service: UserRegistrationService = Depends(get_registration_service),
) -> UserResponse:
    try:
        user = service.change_name(user_id, request_data.name)
    except DomainError as e:
        raise _http_error(e) from None
    return UserResponse.from_user(user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    service: UserRegistrationService = Depends(get_registration_service),
) -> Response:
    try:
        service.remove_user(user_id)
    except DomainError as e:
        raise _http_error(e) from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)
