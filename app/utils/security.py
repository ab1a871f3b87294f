"""
Security utilities and authentication
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import time
from collections import defaultdict

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import AuthError, RateLimitError

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)

def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a bearer token whose ``sub`` claim carries the user id"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode({"sub": user_id, "exp": expire}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def decode_user_id(token: str) -> str:
    """Verify a bearer token and return the user id from its ``sub`` claim"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise AuthError("Invalid or expired token") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid token payload")
    return str(user_id)

def get_current_user_id(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> str:
    """Require a valid bearer token"""
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing bearer token")
    return decode_user_id(credentials.credentials)

def get_optional_user_id(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[str]:
    """User id when a bearer token is sent, None otherwise; a bad token still fails"""
    if credentials is None or not credentials.credentials:
        return None
    return decode_user_id(credentials.credentials)

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Clean old requests, dropping clients with nothing left in the window
    for ip in list(rate_limiter):
        recent = [req_time for req_time in rate_limiter[ip] if req_time > minute_ago]
        if recent:
            rate_limiter[ip] = recent
        else:
            del rate_limiter[ip]

    # Check limit
    if len(rate_limiter[client_ip]) >= limit:
        return False

    # Add current request
    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request: Request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"

def enforce_rate_limit(request: Request) -> None:
    """Dependency rejecting clients over the per-minute limit"""
    if not rate_limit_check(get_client_ip(request)):
        raise RateLimitError()
