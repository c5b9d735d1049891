"""
Job Routes

GET /jobs - List jobs with filters (public)
GET /jobs/recruiter/me - Jobs posted by the current recruiter
GET /jobs/{job_id} - Get job details (public)
POST /jobs - Create job posting (recruiter/admin)
PUT /jobs/{job_id} - Update job (owner/admin)
PATCH /jobs/{job_id}/status - Open or close a job (owner/admin)
DELETE /jobs/{job_id} - Delete job (owner/admin)
GET /jobs/{job_id}/applications - Applications for a job (owner/admin)
POST /jobs/{job_id}/apply - Apply to job (student only)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from portal.core.auth import get_current_student, require_roles
from portal.schemas.schemas import (
    JobCreate, JobUpdate, JobStatusUpdate, ApplyRequest, to_document
)
from portal.services.application_service import ApplicationService, serialize_application
from portal.services.job_service import JobService, SORTABLE_FIELDS, serialize_job
from portal.services.mongo_service import page_meta, parse_sort
from portal.services.ownership import ensure_owner

router = APIRouter(prefix="/jobs", tags=["Jobs"])

job_managers = require_roles("recruiter", "admin")


def get_owned_job(job_id: str, user: dict) -> dict:
    """Load a job the caller owns (admins own everything)."""
    job = JobService().get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_owner(job.get("recruiter_id"), user, "You are not authorized to manage this job")
    return job


@router.get("")
async def list_jobs(
    search: Optional[str] = None,
    skills: Optional[str] = Query(None, description="Comma separated skills"),
    location_type: Optional[str] = None,
    job_type: Optional[str] = Query(None, alias="type"),
    status: str = Query("active", description='Use "all" for every status'),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: Optional[str] = None,
):
    """List jobs. Only active ones unless a status is given."""
    skill_list = [s.strip() for s in skills.split(",") if s.strip()] if skills else None
    service = JobService()
    docs, total = service.list(
        status=None if status == "all" else status,
        search=search,
        skills=skill_list,
        location_type=location_type,
        job_type=job_type,
        page=page,
        limit=limit,
        sort=parse_sort(sort, SORTABLE_FIELDS),
    )
    jobs = [service.with_recruiter(d) for d in docs]
    return {"success": True, "count": len(jobs), "pagination": page_meta(total, page, limit), "jobs": jobs}


@router.get("/recruiter/me")
async def my_jobs(status: Optional[str] = None, user: dict = Depends(require_roles("recruiter"))):
    """Jobs posted by the current recruiter, with live application counts."""
    service = JobService()
    docs, total = service.list(status=status, recruiter_id=user["user_id"], page=1, limit=1000)
    jobs = []
    for doc in docs:
        job = serialize_job(doc)
        job["application_count"] = service.count_applications(doc["_id"])
        jobs.append(job)
    return {"success": True, "count": total, "jobs": jobs}


@router.get("/{job_id}")
async def get_job(job_id: str):
    service = JobService()
    doc = service.get(job_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Job not found")
    job = service.with_recruiter(doc)
    job["application_count"] = service.count_applications(doc["_id"])
    return {"success": True, "job": job}


@router.post("", status_code=201)
async def create_job(data: JobCreate, user: dict = Depends(job_managers)):
    """Create a new job posting."""
    doc = JobService().create(user["user_id"], to_document(data))
    return {"success": True, "message": "Job created successfully", "job": serialize_job(doc)}


@router.put("/{job_id}")
async def update_job(job_id: str, data: JobUpdate, user: dict = Depends(job_managers)):
    """Update job. Only provided fields are updated."""
    job = get_owned_job(job_id, user)
    updates = to_document(data, exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    doc = JobService().update(job["_id"], updates)
    return {"success": True, "message": "Job updated successfully", "job": serialize_job(doc)}


@router.patch("/{job_id}/status")
async def update_job_status(job_id: str, data: JobStatusUpdate, user: dict = Depends(job_managers)):
    job = get_owned_job(job_id, user)
    doc = JobService().set_status(job["_id"], data.status.value)
    return {"success": True, "message": f"Job status updated to {data.status.value}", "job": serialize_job(doc)}


@router.delete("/{job_id}")
async def delete_job(job_id: str, user: dict = Depends(job_managers)):
    """
    Delete job. Recruiters can only delete jobs nobody applied to;
    admins delete the applications along with the job.
    """
    job = get_owned_job(job_id, user)
    service = JobService()
    is_admin = user["role"] == "admin"
    if not is_admin and service.count_applications(job["_id"]) > 0:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a job with applications. Close it instead."
        )
    deleted_apps = service.delete(job["_id"], cascade=is_admin)
    return {"success": True, "message": "Job deleted successfully", "deleted_applications": deleted_apps}


@router.get("/{job_id}/applications")
async def job_applications(
    job_id: str,
    stage: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    user: dict = Depends(job_managers),
):
    job = get_owned_job(job_id, user)
    items, total = ApplicationService().list_for_job(job["_id"], stage=stage, page=page, limit=limit)
    return {"success": True, "count": len(items), "pagination": page_meta(total, page, limit), "applications": items}


@router.post("/{job_id}/apply", status_code=201)
async def apply_to_job(job_id: str, data: Optional[ApplyRequest] = None, student: dict = Depends(get_current_student)):
    """Apply to a job with the resume on the student's profile."""
    cover_letter = data.cover_letter if data else ""
    doc = ApplicationService().apply(job_id, student["user_id"], cover_letter)
    return {"success": True, "message": "Application submitted successfully", "application": serialize_application(doc)}
