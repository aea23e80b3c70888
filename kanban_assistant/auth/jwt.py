"""JWT token handling"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..config import settings
from ..dependencies import get_db
from ..errors import Unauthenticated
from ..services.database import Database

logger = logging.getLogger(__name__)

# Missing credentials are reported by us as 401, not by HTTPBearer as 403
security = HTTPBearer(auto_error=False)

# JWT Configuration
ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode JWT token"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Database = Depends(get_db)
) -> Optional[dict]:
    """Get current user profile if authenticated, None otherwise"""
    if not credentials:
        return None

    payload = verify_token(credentials.credentials)
    if payload is None:
        return None

    user_id: str = payload.get("sub")
    if user_id is None:
        return None

    return db.get_profile(user_id)


async def get_current_user(
    user: Optional[dict] = Depends(get_current_user_optional)
) -> dict:
    """Get current user profile, failing with 401 when absent"""
    if user is None:
        raise Unauthenticated()
    return user
