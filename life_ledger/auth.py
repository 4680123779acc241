from datetime import datetime, timedelta
from typing import Optional

from fastapi import Request
from jose import JWTError, jwt

from life_ledger.config import Settings
from life_ledger.db.core import UnauthorizedError
from life_ledger.logging_config import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"


def create_access_token(user_id: str, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token shaped like the auth provider's session tokens (used by scripts and tests)."""
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))
    claims = {"sub": user_id, "exp": expire}
    if settings.auth_jwt_audience:
        claims["aud"] = settings.auth_jwt_audience
    return jwt.encode(claims, settings.auth_jwt_secret, algorithm=ALGORITHM)


def decode_user_id(token: str, settings: Settings) -> str:
    """Verify a session token and return the user id carried in its ``sub`` claim."""
    options = {"verify_aud": bool(settings.auth_jwt_audience)}
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.auth_jwt_audience or None,
            options=options,
        )
    except JWTError as e:
        logger.debug(f"Rejected session token: {e}")
        raise UnauthorizedError("Unauthorized") from e

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Unauthorized")
    return str(user_id)


def user_id_from_request(request: Request, settings: Settings) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Unauthorized")
    return decode_user_id(token.strip(), settings)
