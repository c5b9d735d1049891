"""
Application Routes

POST /applications - Apply to a job (student)
GET /applications/me - Own applications (student)
GET /applications/job/{job_id} - Applications for a job (owner/admin)
GET /applications/{application_id} - Applicant, job owner or admin
PATCH /applications/{application_id}/stage - Move through the pipeline
POST /applications/{application_id}/note - Add reviewer note
PATCH /applications/{application_id}/interview - Schedule interview
PATCH /applications/{application_id}/scores - Set scores
DELETE /applications/{application_id} - Withdraw (student)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from portal.core.auth import get_current_user, get_current_student, require_roles
from portal.schemas.schemas import (
    ApplicationCreate, StageUpdate, NoteCreate, InterviewSchedule, ScoresUpdate,
    naive_utc, to_document
)
from portal.services.application_service import ApplicationService, serialize_application
from portal.services.job_service import JobService
from portal.services.mongo_service import page_meta
from portal.services.ownership import ensure_owner

router = APIRouter(prefix="/applications", tags=["Applications"])

reviewers = require_roles("recruiter", "admin")


def get_managed_application(application_id: str, user: dict) -> dict:
    """Load an application whose job the caller owns (admins own everything)."""
    app = ApplicationService().get(application_id)
    if not app:
        raise HTTPException(status_code=404, detail="Application not found")
    job = JobService().get(app["job_id"])
    ensure_owner(
        job.get("recruiter_id") if job else None, user,
        "You are not authorized to manage this application"
    )
    return app


@router.post("", status_code=201)
async def create_application(data: ApplicationCreate, student: dict = Depends(get_current_student)):
    doc = ApplicationService().apply(data.job_id, student["user_id"], data.cover_letter, data.resume_url)
    return {"success": True, "message": "Application submitted successfully", "application": serialize_application(doc)}


@router.get("/me")
async def my_applications(
    stage: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    student: dict = Depends(get_current_student),
):
    items, total = ApplicationService().list_for_student(student["user_id"], stage=stage, page=page, limit=limit)
    return {"success": True, "count": len(items), "pagination": page_meta(total, page, limit), "applications": items}


@router.get("/job/{job_id}")
async def applications_for_job(
    job_id: str,
    stage: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    user: dict = Depends(reviewers),
):
    job = JobService().get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_owner(job.get("recruiter_id"), user, "You are not authorized to view these applications")
    items, total = ApplicationService().list_for_job(job["_id"], stage=stage, page=page, limit=limit)
    return {"success": True, "count": len(items), "pagination": page_meta(total, page, limit), "applications": items}


@router.get("/{application_id}")
async def get_application(application_id: str, user: dict = Depends(get_current_user)):
    service = ApplicationService()
    app = service.get(application_id)
    if not app:
        raise HTTPException(status_code=404, detail="Application not found")
    job = service.jobs.get(app["job_id"])
    if not service.can_view(app, job, user):
        raise HTTPException(status_code=403, detail="You are not authorized to view this application")
    return {"success": True, "application": service.detail(app)}


@router.patch("/{application_id}/stage")
async def update_stage(application_id: str, data: StageUpdate, user: dict = Depends(reviewers)):
    app = get_managed_application(application_id, user)
    doc = ApplicationService().update_stage(app, data.stage.value)
    return {"success": True, "message": f"Application moved to {data.stage.value}", "application": serialize_application(doc)}


@router.post("/{application_id}/note", status_code=201)
async def add_note(application_id: str, data: NoteCreate, user: dict = Depends(reviewers)):
    app = get_managed_application(application_id, user)
    doc = ApplicationService().add_note(app, user["user_id"], data.note, data.rating)
    return {"success": True, "message": "Note added", "application": serialize_application(doc)}


@router.patch("/{application_id}/interview")
async def schedule_interview(application_id: str, data: InterviewSchedule, user: dict = Depends(reviewers)):
    app = get_managed_application(application_id, user)
    details = to_document(data)
    details["scheduled_date"] = naive_utc(details["scheduled_date"])
    doc = ApplicationService().schedule_interview(app, user["user_id"], details)
    return {"success": True, "message": "Interview scheduled", "application": serialize_application(doc)}


@router.patch("/{application_id}/scores")
async def set_scores(application_id: str, data: ScoresUpdate, user: dict = Depends(reviewers)):
    app = get_managed_application(application_id, user)
    doc = ApplicationService().set_scores(app, to_document(data, exclude_none=True))
    return {"success": True, "message": "Scores updated", "application": serialize_application(doc)}


@router.delete("/{application_id}")
async def withdraw_application(application_id: str, student: dict = Depends(get_current_student)):
    """Withdraw an application. The record stays, marked withdrawn."""
    doc = ApplicationService().withdraw(application_id, student["user_id"])
    return {"success": True, "message": "Application withdrawn", "application": serialize_application(doc)}
