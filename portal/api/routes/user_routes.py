"""
User Routes

GET /users/me - Get current user
"""

from fastapi import APIRouter, HTTPException, Depends

from portal.core.auth import get_current_user
from portal.services.user_service import UserService, serialize_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me")
async def get_current_account(user: dict = Depends(get_current_user)):
    doc = UserService().get(user["user_id"])
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "user": serialize_user(doc)}
