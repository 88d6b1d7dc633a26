"""Optional bearer-token authentication.

When ``auth_enabled`` is off (the default) every request passes through.
When on, requests need ``Authorization: Bearer <jwt>`` signed with
``jwt_secret``. Verified claims are bound to the structlog context so they
show up in request logs; the catalog services never look at them.
"""

from typing import Annotated, Any

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from catalog_api.config import Settings, get_settings
from catalog_api.exceptions import AuthenticationError, PermissionDeniedError

bearer_scheme = HTTPBearer(auto_error=False)


def verify_token(token: str, settings: Settings) -> dict[str, Any]:
    """Decode and verify a JWT, returning its claims.

    Raises:
        PermissionDeniedError: bad signature, expired, or malformed token.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise PermissionDeniedError("Forbidden") from exc


async def authenticate(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any] | None:
    """Router-level dependency guarding the catalog endpoints."""
    if not settings.auth_enabled:
        return None
    if credentials is None:
        raise AuthenticationError("Unauthorized")

    claims = verify_token(credentials.credentials, settings)
    structlog.contextvars.bind_contextvars(user=claims.get("email") or claims.get("sub"))
    return claims
