"""
Access-token handling.

Tokens are HS256 JWTs carrying ``sub`` (user id) and ``role``. Issuing them
belongs to the identity provider; ``create_access_token`` exists for local
development and the test-suite.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError

from .core.config import settings
from .core.enums import PrincipalRole
from .core.exceptions import UnauthorizedException
from .principal import UserPrincipal

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT access token."""
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.jwt_secret_key),
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; expects ``sub`` and ``role``
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    encoded_jwt = cast(
        str,
        jwt.encode(
            to_encode,
            _secret_value(settings.jwt_secret_key),
            algorithm=settings.jwt_algorithm,
        ),
    )
    logger.debug(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def principal_from_token(token: str) -> UserPrincipal:
    """
    Turn a bearer token into a principal.

    Raises:
        UnauthorizedException: Token is invalid, expired or lacks claims
    """
    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation error: {str(e)}")
        raise UnauthorizedException("Could not validate credentials", code="INVALID_TOKEN")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        logger.warning("Token payload missing 'sub' field")
        raise UnauthorizedException("Could not validate credentials", code="INVALID_TOKEN")

    try:
        role = PrincipalRole(payload.get("role"))
    except ValueError:
        logger.warning(f"Token carries unknown role: {payload.get('role')!r}")
        raise UnauthorizedException("Could not validate credentials", code="INVALID_TOKEN")

    return UserPrincipal(user_id=user_id, role=role)


async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme_optional),
) -> UserPrincipal:
    """
    Dependency resolving the bearer token to a principal.

    Raises:
        HTTPException: 401 when the token is missing or invalid
    """
    if not token:
        raise UnauthorizedException("Not authenticated", code="NOT_AUTHENTICATED").to_http_exception()
    try:
        return principal_from_token(token)
    except UnauthorizedException as exc:
        raise exc.to_http_exception()
