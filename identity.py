"""
Bearer credential verification.

Tokens are HS256 JWTs minted with a one hour lifetime. Only the `email` claim
is trusted by the authorization layer.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from errors import Unauthenticated
from settings import get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class Claims(BaseModel):
    email: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def issue_token(payload: Dict[str, Any], ttl_seconds: int = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    ttl = ttl_seconds if ttl_seconds is not None else settings.TOKEN_TTL_SECONDS
    claims = {**payload, "iat": now, "exp": now + timedelta(seconds=ttl)}
    return jwt.encode(claims, settings.ACCESS_TOKEN_SECRET, algorithm=settings.TOKEN_ALGORITHM)


def validate_token(token: str) -> Claims:
    """
    Verify signature and expiry of a bearer token and return its claims.
    Raises Unauthenticated for anything that is not a valid, unexpired token
    carrying an email.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.ACCESS_TOKEN_SECRET,
            algorithms=[settings.TOKEN_ALGORITHM],
            options={"require_exp": True},
        )
    except JWTError as exc:
        logger.info(f"Rejected bearer token: {exc}")
        raise Unauthenticated()

    email = payload.get("email")
    if not isinstance(email, str) or not email:
        raise Unauthenticated()

    return Claims(email=email, issued_at=_timestamp(payload.get("iat")), expires_at=_timestamp(payload.get("exp")))


async def bearer_claims(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Claims:
    # HTTPBearer yields None for a missing header or a non-Bearer scheme
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return validate_token(credentials.credentials)
