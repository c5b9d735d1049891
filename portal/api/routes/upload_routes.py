"""
Upload Routes

POST /upload/profile-picture - Image, max 2MB; updates the user's picture
POST /upload/resume - PDF/DOC/DOCX, max 5MB; updates the profile resume (student)
POST /upload/verification - PDF/JPG/PNG, max 10MB; returns the stored URL
"""

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from fastapi.concurrency import run_in_threadpool

from portal.core.auth import get_current_user, get_current_student
from portal.services.profile_service import StudentProfileService
from portal.services.storage_service import StorageService
from portal.services.user_service import UserService
from portal.utils.file_upload import read_validated_upload

router = APIRouter(prefix="/upload", tags=["Uploads"])


async def _store(file: UploadFile, kind: str, owner_id: str) -> dict:
    content, rule = await read_validated_upload(file, kind)
    # The Cloudinary SDK is blocking
    return await run_in_threadpool(
        StorageService().upload,
        content, kind, owner_id,
        resource_type=rule.resource_type,
        filename=file.filename,
    )


@router.post("/profile-picture")
async def upload_profile_picture(
    file: UploadFile = File(..., description="Profile picture (JPG, PNG, GIF, WEBP)"),
    user: dict = Depends(get_current_user)
):
    stored = await _store(file, "profile-picture", user["user_id"])
    UserService().set_profile_picture(user["user_id"], stored["url"])
    return {"success": True, "message": "Profile picture uploaded", **stored}


@router.post("/resume")
async def upload_resume(
    file: UploadFile = File(..., description="Resume (PDF, DOC, DOCX)"),
    student: dict = Depends(get_current_student)
):
    """Upload resume. A profile must exist to attach it to."""
    profiles = StudentProfileService()
    if not profiles.get_raw(student["user_id"]):
        raise HTTPException(status_code=404, detail="Profile not found. Please create your profile first.")
    stored = await _store(file, "resume", student["user_id"])
    profiles.set_resume_url(student["user_id"], stored["url"])
    return {"success": True, "message": "Resume uploaded", **stored}


@router.post("/verification")
async def upload_verification_document(
    file: UploadFile = File(..., description="Verification document (PDF, JPG, PNG)"),
    student: dict = Depends(get_current_student)
):
    stored = await _store(file, "verification", student["user_id"])
    return {
        "success": True,
        "message": "Document uploaded",
        "file_name": file.filename,
        "file_type": file.content_type,
        **stored,
    }
