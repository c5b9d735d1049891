"""
Authentication Routes

POST /auth/register - Register new user (student or recruiter)
POST /auth/login - Login and get JWT token (also set as cookie)
POST /auth/logout - Clear auth cookie
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, HTTPException, Depends, Response

from portal.core.auth import verify_password, create_access_token, get_current_user
from portal.core.config import get_settings
from portal.schemas.schemas import (
    RegisterRequest, LoginRequest, LoginResponse, MessageResponse, UserRole, ApprovalStatus
)
from portal.services.user_service import UserService, serialize_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Roles open to self-registration; faculty and admin are provisioned
SELF_REGISTER_ROLES = (UserRole.student, UserRole.recruiter)


def _set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.jwt_expire_days * 24 * 60 * 60,
    )


@router.post("/register", status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new account.

    Students can login right away. Recruiters wait for admin approval.
    """
    if request.role not in SELF_REGISTER_ROLES:
        raise HTTPException(status_code=403, detail="You cannot register with this role")

    is_recruiter = request.role == UserRole.recruiter
    user = UserService().create(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role.value,
        department=request.department,
        is_active=not is_recruiter,
        approval_status=(ApprovalStatus.pending if is_recruiter else ApprovalStatus.approved).value,
    )
    logger.info("Registered %s as %s", user["email"], user["role"])

    message = (
        "Registration successful. Your account is pending admin approval."
        if is_recruiter else "Registration successful. Please login."
    )
    return {"success": True, "message": message, "user": serialize_user(user)}


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, response: Response):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    users = UserService()
    user = users.get_by_email(request.email)

    if not user or not verify_password(request.password, user["password_hash"]):
        logger.info("Failed login for %s", request.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.get("is_active", False):
        if user.get("approval_status") == ApprovalStatus.pending.value:
            raise HTTPException(status_code=403, detail="Your account is pending admin approval")
        raise HTTPException(status_code=403, detail="Your account is inactive. Please contact support.")

    user["last_login"] = users.touch_login(user["_id"])
    token = create_access_token(str(user["_id"]), user["email"], user["role"])
    _set_auth_cookie(response, token)
    logger.info("Login %s", user["email"])

    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "token_type": "bearer",
        "user": serialize_user(user),
    }


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the auth cookie."""
    response.delete_cookie(get_settings().auth_cookie_name)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    doc = UserService().get(user["user_id"])
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "user": serialize_user(doc)}
