"""
Authentication Utility - JWT, password handling and access gates.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (7 day validity)
- FastAPI dependencies for protected routes
- Role gate: require_roles("admin", "recruiter")
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext

from portal.core.config import get_settings
from portal.db.mongodb import get_collection, COLLECTIONS

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (cookie is the fallback, so don't auto-fail)
bearer_scheme = HTTPBearer(auto_error=False)

# One message for every credential failure: never reveal which check failed
INVALID_CREDENTIALS = "Not authorized, invalid or expired token"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, email: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying identity and role."""
    settings = get_settings()
    expire = datetime.utcnow() + (expires_delta or timedelta(days=settings.jwt_expire_days))
    to_encode = {"sub": str(user_id), "email": email, "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and verify JWT token.

    Malformed, expired and badly-signed tokens all return None.
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().auth_cookie_name)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Token comes from the Authorization header or the auth cookie.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _extract_token(request, credentials)
    if not token:
        raise credentials_exception

    payload = decode_token(token)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    try:
        oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        raise credentials_exception

    # Verify user still exists
    user = get_collection(COLLECTIONS["users"]).find_one(
        {"_id": oid}, {"email": 1, "role": 1, "is_active": 1}
    )
    if not user:
        raise credentials_exception

    if not user.get("is_active", False):
        raise HTTPException(status_code=403, detail="Your account is inactive. Please contact support.")

    return {"user_id": str(user["_id"]), "email": user["email"], "role": user["role"]}


def is_role_allowed(role: Optional[str], allowed_roles: Iterable[str]) -> bool:
    """Role gate decision. Pure: same inputs, same answer."""
    return role is not None and role in set(allowed_roles)


def require_roles(*allowed_roles: str):
    """
    Dependency factory - Require one of the given roles.

    Usage:
        @router.get("/stats")
        async def stats(user: dict = Depends(require_roles("admin"))):
            ...
    """
    roles = list(allowed_roles)

    async def role_gate(user: dict = Depends(get_current_user)) -> dict:
        if not is_role_allowed(user["role"], roles):
            logger.debug("Role %s denied, required %s", user["role"], roles)
            raise HTTPException(
                status_code=403,
                detail={
                    "error": f"Access denied. Required role: {' or '.join(roles)}",
                    "details": {"required_roles": roles, "current_role": user["role"]},
                },
            )
        return user

    return role_gate


async def get_current_student(user: dict = Depends(require_roles("student"))) -> dict:
    """Dependency - Require student role."""
    return user


async def get_current_admin(user: dict = Depends(require_roles("admin"))) -> dict:
    """Dependency - Require admin role."""
    return user
