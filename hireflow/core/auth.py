"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies that resolve the caller into an explicit
  CallerIdentity, passed on to services as a parameter
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hireflow.core.config import get_settings
from hireflow.services.mongo_service import UserService

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    email: str
    role: str
    name: str = ""


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_user_service() -> UserService:
    return UserService()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    users: UserService = Depends(get_user_service)
) -> CallerIdentity:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        def route(user: CallerIdentity = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    # Verify user exists
    user = users.get_by_id(user_id)
    if not user:
        raise credentials_exception

    if not user.get("isActive", True):
        raise HTTPException(status_code=403, detail="Account deactivated")

    return CallerIdentity(user_id=user["id"], email=user["email"], role=user["role"], name=user.get("name", ""))


def get_current_candidate(user: CallerIdentity = Depends(get_current_user)) -> CallerIdentity:
    """Dependency - Require candidate role."""
    if user.role != "candidate":
        raise HTTPException(status_code=403, detail="Candidates only")
    return user


def get_current_hr(user: CallerIdentity = Depends(get_current_user)) -> CallerIdentity:
    """Dependency - Require HR role."""
    if user.role != "HR":
        raise HTTPException(status_code=403, detail="HR recruiters only")
    return user
