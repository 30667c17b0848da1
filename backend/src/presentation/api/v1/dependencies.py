"""
FastAPI Dependencies
Current user and cron authentication
"""
import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status, Header

from core.config import Settings
from core.exceptions import AuthenticationException
from domain.entities import User
from application.services.auth.interfaces import IAuthService
from .container import get_app_settings, get_auth_service


def _unauthorized(detail: str, bearer: bool = True) -> HTTPException:
    headers = {"WWW-Authenticate": "Bearer"} if bearer else None
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers=headers)


def _bearer_token(authorization: Optional[str]) -> str:
    """Token part of an ``Authorization: Bearer <token>`` header"""
    if not authorization:
        raise _unauthorized("Missing authorization header")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise _unauthorized("Invalid authorization header format")
    return token


async def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: IAuthService = Depends(get_auth_service)
) -> User:
    """
    Resolve the signed-in user from the bearer token

    Usage:
        @router.get("/companies")
        async def list_companies(user: User = Depends(get_current_user)):
            ...
    """
    token = _bearer_token(authorization)
    try:
        return await auth_service.verify_access_token(token)
    except AuthenticationException:
        raise _unauthorized("Invalid or expired token")


async def verify_cron_secret(
    x_cron_secret: Optional[str] = Header(None, alias="X-Cron-Secret"),
    config: Settings = Depends(get_app_settings),
) -> None:
    """Guard for the external cron trigger; hidden entirely when no secret is configured"""
    if not config.CRON_SECRET:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    if not x_cron_secret or not hmac.compare_digest(x_cron_secret, config.CRON_SECRET):
        raise _unauthorized("Invalid cron secret", bearer=False)
