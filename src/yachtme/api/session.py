"""Staff sign-in, sign-out and identity endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..storage.base import AuthSession, CatalogGateway, GatewayError
from .dependencies import get_gateway
from .limits import limiter
from .middleware.auth import UserPayload, get_current_user, is_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = "Credenziali non valide"


class LoginRequest(BaseModel):
    email: str
    password: str


class LogoutResponse(BaseModel):
    status: str


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    is_admin: bool


@router.post("/login", response_model=AuthSession)
@limiter.limit("10/minute")
async def login(
    request: Request,
    body: LoginRequest,
    gateway: CatalogGateway = Depends(get_gateway),
):
    """Exchange email and password for Supabase session tokens."""
    try:
        session = await gateway.sign_in(body.email, body.password)
    except GatewayError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info("User signed in: %s", session.user.email or session.user.id)
    return session


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    user: UserPayload = Depends(get_current_user),
    gateway: CatalogGateway = Depends(get_gateway),
):
    await gateway.sign_out(user.token)
    logger.info("User signed out: %s", user.email or user.sub)
    return LogoutResponse(status="ok")


@router.get("/me", response_model=MeResponse)
async def me(
    user: UserPayload = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    return MeResponse(id=user.sub, email=user.email, is_admin=is_admin(user, settings) is not None)
