"""
Authentication service.
Verifies Supabase JWTs, resolves the current user and guards routes by role.
"""

import logging
from typing import Any, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from portal.config import settings
from portal.dependencies import get_db
from portal.domain.enums import UserRole
from portal.ports.database_port import DatabasePort

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer()


def _verify_token(token: str) -> str:
    """
    Verify the Supabase JWT and return the user_id (sub claim).

    Signature (HS256 with the project JWT secret), expiry and audience are
    all checked; 30 seconds of clock drift is tolerated.
    """
    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience,
            options={
                "verify_iat": False,        # disabled — clock skew causes false rejections
            },
            leeway=30,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {e}",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user ID (sub claim)",
        )
    return user_id


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: DatabasePort = Depends(get_db),
) -> dict[str, Any]:
    """
    FastAPI dependency that verifies the JWT locally, then fetches the
    full user row from the database.
    """
    user_id = _verify_token(credentials.credentials)

    # Only real users have rows in public.users
    user = await db.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if user.get("is_active") is False:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )
    return user


def require_roles(*roles: UserRole) -> Callable[..., Any]:
    """Dependency factory: the current user must hold one of ``roles``."""
    allowed = {r.value for r in roles}

    async def _guard(
        current_user: dict[str, Any] = Depends(get_current_user),
    ) -> dict[str, Any]:
        if current_user.get("role") not in allowed:
            logger.warning(
                f"UNAUTHORIZED_ACCESS: user {current_user.get('id')} with role "
                f"{current_user.get('role')} tried a {'/'.join(sorted(allowed))}-only route"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this resource",
            )
        return current_user

    return _guard
