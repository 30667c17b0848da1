"""
Authentication Endpoints
/api/v1/auth/* routes
"""
from fastapi import APIRouter, Depends, status
from loguru import logger

from presentation.api.v1.schemas.auth import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from presentation.api.v1.container import get_auth_service
from presentation.api.v1.dependencies import get_current_user
from presentation.api.v1.rate_limit import enforce_auth_rate_limit
from application.services.auth.interfaces import IAuthService
from domain.entities import User


router = APIRouter()


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_auth_rate_limit)],
)
async def signup(
    body: SignupRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    """Create an account and return a bearer token"""
    user = await auth_service.signup(body.handle, body.password)
    logger.info(f"Signup complete for {user.handle}")
    return AuthResponse(
        access_token=auth_service.issue_token(user),
        user=UserResponse.from_entity(user),
    )


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(enforce_auth_rate_limit)])
async def login(
    body: LoginRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    """Exchange handle and password for a bearer token"""
    user = await auth_service.login(body.handle, body.password)
    return AuthResponse(
        access_token=auth_service.issue_token(user),
        user=UserResponse.from_entity(user),
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Current authenticated user"""
    return UserResponse.from_entity(current_user)
