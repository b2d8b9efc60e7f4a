from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from carelink.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TEMP_PASSWORD_PREFIX = "temp"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    subject: str,
    claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a bearer token for a principal.

    ``subject`` is the user's uid; ``claims`` carries role and hospital so
    the realtime server can place a socket in its rooms without a lookup.
    """
    issued_at = datetime.utcnow()
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = dict(claims or {})
    payload.update({"sub": subject, "iat": issued_at, "exp": issued_at + lifetime})

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Verified payload of a token, or None if it is invalid, expired or has no subject."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

    if not payload.get("sub"):
        return None
    return payload


def generate_temp_password(patient_id: str) -> str:
    """Temporary password handed to a patient registered at the front desk."""
    return f"{TEMP_PASSWORD_PREFIX}{patient_id[-6:]}"
