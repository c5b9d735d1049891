"""
Student Routes

POST /student/profile - Create student profile
GET /student/profile/me - Get own profile
PUT /student/profile - Update profile
DELETE /student/profile - Delete profile
GET /student/profiles - Search profiles (recruiter/admin/faculty)
GET /student/profile/{profile_id} - Get one profile (recruiter/admin/faculty)
GET /student/stats - Dashboard statistics (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from portal.core.auth import get_current_student, get_current_admin, require_roles
from portal.schemas.schemas import ProfileCreate, ProfileUpdate, to_document
from portal.services.dashboard_service import get_dashboard_stats
from portal.services.mongo_service import page_meta, parse_sort
from portal.services.profile_service import StudentProfileService, SORTABLE_FIELDS

router = APIRouter(prefix="/student", tags=["Students"])

profile_viewers = require_roles("recruiter", "admin", "faculty")


@router.post("/profile", status_code=201)
async def create_profile(data: ProfileCreate, student: dict = Depends(get_current_student)):
    """Create student profile. One per account."""
    service = StudentProfileService()
    if service.get_raw(student["user_id"]):
        raise HTTPException(status_code=409, detail="Profile already exists. Use PUT to update.")

    profile = service.create(student["user_id"], to_document(data))
    return {"success": True, "message": "Profile created successfully", "profile": profile}


@router.get("/profile/me")
async def get_my_profile(student: dict = Depends(get_current_student)):
    """Get current student's profile with completion state."""
    profile = StudentProfileService().get_by_user(student["user_id"])
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found. Please create your profile.")
    return {"success": True, "profile": profile}


@router.put("/profile")
async def update_profile(data: ProfileUpdate, student: dict = Depends(get_current_student)):
    """Update student profile. Only provided fields are updated."""
    updates = to_document(data, exclude_unset=True)
    profile = StudentProfileService().update(student["user_id"], updates)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found. Please create your profile.")
    return {"success": True, "message": "Profile updated successfully", "profile": profile}


@router.delete("/profile")
async def delete_profile(student: dict = Depends(get_current_student)):
    if not StudentProfileService().delete(student["user_id"]):
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"success": True, "message": "Profile deleted successfully"}


@router.get("/profiles")
async def search_profiles(
    skills: Optional[str] = Query(None, description="Comma separated skills"),
    graduation_year: Optional[int] = None,
    min_cgpa: Optional[float] = Query(None, ge=0, le=10),
    max_cgpa: Optional[float] = Query(None, ge=0, le=10),
    program: Optional[str] = None,
    branch: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: Optional[str] = Query(None, description="e.g. -cgpa"),
    user: dict = Depends(profile_viewers),
):
    """Search student profiles."""
    skill_list: List[str] = [s.strip() for s in skills.split(",") if s.strip()] if skills else []
    profiles, total = StudentProfileService().search(
        skills=skill_list,
        graduation_year=graduation_year,
        min_cgpa=min_cgpa,
        max_cgpa=max_cgpa,
        program=program,
        branch=branch,
        page=page,
        limit=limit,
        sort=parse_sort(sort, SORTABLE_FIELDS),
    )
    return {"success": True, "count": len(profiles), "pagination": page_meta(total, page, limit), "profiles": profiles}


@router.get("/profile/{profile_id}")
async def get_profile(profile_id: str, user: dict = Depends(profile_viewers)):
    profile = StudentProfileService().get(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"success": True, "profile": profile}


@router.get("/stats")
async def dashboard_stats(admin: dict = Depends(get_current_admin)):
    return {"success": True, "stats": get_dashboard_stats()}
