from datetime import datetime, timedelta, UTC

from jose import JWTError, jwt
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher

from churchapp.config import settings
from churchapp.core.exceptions import UnauthorizedException
from churchapp.core.logging import get_logger

logger = get_logger(__name__)

password_hash = PasswordHash((BcryptHasher(),))

# bcrypt only looks at the first 72 bytes and rejects longer input
BCRYPT_MAX_BYTES = 72


def _bcrypt_input(password: str) -> str:
    """Truncate to 72 UTF-8 bytes without splitting a character"""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password
    return password_bytes[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt"""
    truncated = _bcrypt_input(password)
    if truncated != password:
        logger.warning("Password truncated to 72 bytes for bcrypt")
    return password_hash.hash(truncated)


def verify_password(password: str, hashed: str) -> bool:
    """Check a plain-text password against its stored hash"""
    return password_hash.verify(_bcrypt_input(password), hashed)


def create_access_token(claims: dict, expires_delta: timedelta | None = None) -> str:
    """
    Sign a JWT carrying the given claims.

    Args:
        claims: Token claims (sub, type, memberId, role, ...)
        expires_delta: Custom lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT token
    """
    now = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {**claims, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub', 'exp' and tenant claims

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        user_id: str = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")
