"""Supabase JWT authentication and admin authorization using PyJWT."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient
from pydantic import BaseModel, Field

from ...config import Settings, get_settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class UserPayload(BaseModel):
    """Decoded JWT user payload."""

    sub: str  # User ID
    email: Optional[str] = None
    role: Optional[str] = None
    aud: Optional[str] = None
    app_metadata: Dict[str, Any] = Field(default_factory=dict)
    token: Optional[str] = Field(default=None, exclude=True)


class AdminIdentity(BaseModel):
    """Authenticated staff member for the lifetime of one admin request."""

    user: UserPayload
    via: str  # "role" or "allow-list"


def is_admin(user: UserPayload, settings: Settings) -> Optional[str]:
    """Return how the user qualifies as admin, or None.

    A user is admin when the provider-managed ``app_metadata.role`` is
    ``admin`` or their email is in the ADMIN_EMAILS allow-list.
    """
    if user.app_metadata.get("role") == ADMIN_ROLE:
        return "role"
    if user.email and user.email.lower() in settings.admin_email_list:
        return "allow-list"
    return None


# Global JWKS client instance with caching
_jwks_client: Optional[PyJWKClient] = None


def get_jwks_client() -> PyJWKClient:
    """Get or create global JWKS client with caching."""
    global _jwks_client
    if _jwks_client is None:
        settings = get_settings()
        # e.g. https://<project>.supabase.co/auth/v1/.well-known/jwks.json
        base_url = settings.supabase_url.rstrip("/")
        jwks_url = f"{base_url}/auth/v1/.well-known/jwks.json"
        logger.info("Initializing JWKS client with URL: %s", jwks_url)
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True, lifespan=3600)
    return _jwks_client


_bearer_scheme = HTTPBearer(auto_error=False)


def _verify_jwt(token: str) -> Optional[UserPayload]:
    """Verify JWT using Supabase's JWKS (ES256) or JWT secret (HS256)."""
    settings = get_settings()
    try:
        header = jwt.get_unverified_header(token)
        alg = header.get("alg")

        if alg == "ES256":
            signing_key = get_jwks_client().get_signing_key_from_jwt(token)
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=["ES256"],
                audience="authenticated",
            )
        elif alg == "HS256":
            jwt_secret = settings.supabase_jwt_secret
            if not jwt_secret:
                logger.warning("HS256 token but no JWT secret configured")
                return None

            payload = jwt.decode(
                token,
                jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        else:
            logger.warning("Unsupported JWT algorithm: %s", alg)
            return None

        logger.debug("JWT verified for user: %s", payload.get("email", payload.get("sub")))
        return UserPayload(
            sub=payload.get("sub", ""),
            email=payload.get("email"),
            role=payload.get("role"),
            aud=payload.get("aud"),
            app_metadata=payload.get("app_metadata") or {},
            token=token,
        )
    except jwt.ExpiredSignatureError:
        logger.warning("JWT token has expired")
        return None
    except jwt.InvalidAudienceError:
        logger.warning("JWT audience claim is invalid")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning("JWT verification failed: %s", str(e))
        return None
    except Exception as e:
        logger.error("Unexpected error during JWT verification: %s", str(e))
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> UserPayload:
    """Dependency to get the current authenticated user."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = _verify_jwt(credentials.credentials)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def require_admin(
    user: UserPayload = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> AdminIdentity:
    """Dependency for the back office: authenticated AND admin."""
    via = is_admin(user, settings)
    if via is None:
        logger.warning("Non-admin user %s denied admin access", user.email or user.sub)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return AdminIdentity(user=user, via=via)
