"""Auth API: customer signup and login.

Both are public and rate limited. Signed-up users hold the platform
customer role; login accepts a phone number or a username.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from portal.api.v1.dependencies import (
    AuthSecurity,
    get_auth_security,
    get_user_read_service,
    get_user_service,
)
from portal.application.services import UserService
from portal.core.limiter import limit_auth
from portal.schemas.auth import LoginRequest, SignupRequest, TokenResponse
from portal.schemas.user import UserResponse

router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=201)
@limit_auth
async def signup(
    request: Request,
    body: SignupRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Register a customer account."""
    user = await user_service.signup(
        phone_number=body.phone_number,
        password=body.password,
        username=body.username,
        email=body.email,
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    user_service: Annotated[UserService, Depends(get_user_read_service)],
    auth_security: Annotated[AuthSecurity, Depends(get_auth_security)],
):
    """Authenticate and return a bearer token whose subject is the user id."""
    user = await user_service.authenticate(body.login, body.password)
    return TokenResponse(access_token=auth_security.create_access_token(user.id))
