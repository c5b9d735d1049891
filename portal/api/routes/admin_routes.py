"""
Admin Routes (admin only)

POST /admin/users/faculty - Create faculty account
GET /admin/users - List users
PATCH /admin/users/{user_id}/approve - Approve pending recruiter
GET /admin/stats - Dashboard statistics
GET /admin/students - Student accounts with profiles
GET /admin/students/{user_id} - One student with profile
PATCH /admin/students/{user_id}/verify - Toggle profile verification
PATCH /admin/students/{user_id}/verify-resume - Toggle resume verification
DELETE /admin/students/{user_id} - Delete student and their data
GET /admin/jobs - All jobs, any status
POST /admin/jobs - Create job
GET /admin/jobs/{job_id}/applications - Applications for any job
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from portal.core.auth import get_current_admin
from portal.schemas.schemas import FacultyCreate, VerifyToggle, JobCreate, UserRole, to_document
from portal.services.application_service import ApplicationService
from portal.services.dashboard_service import get_dashboard_stats
from portal.services.job_service import JobService, serialize_job
from portal.services.mongo_service import page_meta
from portal.services.profile_service import StudentProfileService
from portal.services.user_service import UserService, serialize_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_student_or_404(user_id: str) -> dict:
    user = UserService().get(user_id)
    if not user or user.get("role") != UserRole.student.value:
        raise HTTPException(status_code=404, detail="Student not found")
    return user


# ============================================================
# USERS
# ============================================================

@router.post("/users/faculty", status_code=201)
async def create_faculty(data: FacultyCreate, admin: dict = Depends(get_current_admin)):
    """Create a faculty account with a temporary password."""
    temp_password = secrets.token_urlsafe(9)
    user = UserService().create(
        name=data.name,
        email=data.email,
        password=temp_password,
        role=UserRole.faculty.value,
        department=data.department,
    )
    logger.info("Faculty %s created by %s", user["email"], admin["user_id"])
    return {
        "success": True,
        "message": "Faculty account created",
        "user": serialize_user(user),
        "temporary_password": temp_password,
    }


@router.get("/users")
async def list_users(
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    admin: dict = Depends(get_current_admin),
):
    users = UserService().list(role=role.value if role else None, is_active=is_active, search=search)
    return {"success": True, "count": len(users), "users": [serialize_user(u) for u in users]}


@router.patch("/users/{user_id}/approve")
async def approve_user(user_id: str, admin: dict = Depends(get_current_admin)):
    service = UserService()
    if not service.get(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    user = service.approve(user_id)
    logger.info("User %s approved by %s", user_id, admin["user_id"])
    return {"success": True, "message": "User approved", "user": serialize_user(user)}


@router.get("/stats")
async def admin_stats(admin: dict = Depends(get_current_admin)):
    return {"success": True, "stats": get_dashboard_stats()}


# ============================================================
# STUDENTS
# ============================================================

@router.get("/students")
async def list_students(
    search: Optional[str] = None,
    verified: Optional[bool] = None,
    admin: dict = Depends(get_current_admin),
):
    """Student accounts, each with its profile (or None)."""
    profiles = StudentProfileService()
    students = []
    for user in UserService().list(role=UserRole.student.value, search=search):
        profile = profiles.get_by_user(user["_id"])
        if verified is not None and bool(profile and profile["is_verified"]) != verified:
            continue
        students.append({**serialize_user(user), "profile": profile})
    return {"success": True, "count": len(students), "students": students}


@router.get("/students/{user_id}")
async def get_student(user_id: str, admin: dict = Depends(get_current_admin)):
    user = get_student_or_404(user_id)
    profile = StudentProfileService().get_by_user(user["_id"])
    return {"success": True, "student": {**serialize_user(user), "profile": profile}}


@router.patch("/students/{user_id}/verify")
async def verify_student(user_id: str, data: VerifyToggle, admin: dict = Depends(get_current_admin)):
    """Set or clear the profile's verified state."""
    get_student_or_404(user_id)
    profile = StudentProfileService().set_verified(user_id, data.verified)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    message = "Student verified" if data.verified else "Student verification removed"
    return {"success": True, "message": message, "profile": profile}


@router.patch("/students/{user_id}/verify-resume")
async def verify_resume(user_id: str, data: VerifyToggle, admin: dict = Depends(get_current_admin)):
    get_student_or_404(user_id)
    profile = StudentProfileService().set_flag(user_id, "resume_verified", data.verified)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"success": True, "message": "Resume verification updated", "profile": profile}


@router.delete("/students/{user_id}")
async def delete_student(user_id: str, admin: dict = Depends(get_current_admin)):
    """Delete a student with profile, applications and verifications."""
    get_student_or_404(user_id)
    deleted = UserService().delete_student(user_id)
    return {"success": True, "message": "Student deleted successfully", "deleted": deleted}


# ============================================================
# JOBS
# ============================================================

@router.get("/jobs")
async def list_all_jobs(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    admin: dict = Depends(get_current_admin),
):
    service = JobService()
    docs, total = service.list(status=status, search=search, page=page, limit=limit)
    jobs = [service.with_recruiter(d) for d in docs]
    return {"success": True, "count": len(jobs), "pagination": page_meta(total, page, limit), "jobs": jobs}


@router.post("/jobs", status_code=201)
async def admin_create_job(data: JobCreate, admin: dict = Depends(get_current_admin)):
    doc = JobService().create(admin["user_id"], to_document(data))
    return {"success": True, "message": "Job created successfully", "job": serialize_job(doc)}


@router.get("/jobs/{job_id}/applications")
async def admin_job_applications(
    job_id: str,
    stage: Optional[str] = None,
    admin: dict = Depends(get_current_admin),
):
    job = JobService().get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    items, total = ApplicationService().list_for_job(job["_id"], stage=stage, page=1, limit=1000)
    return {"success": True, "count": total, "job": serialize_job(job), "applications": items}
