"""
Application Service - job applications and their stage pipeline.

Stage pipeline (the only state machine in the portal):

    applied -> screening -> shortlisted -> interview-scheduled
            -> interview-completed -> selected

- rejected:  from any non-terminal stage (recruiter/admin)
- withdrawn: from any non-terminal stage, student action only
- selected, rejected, withdrawn are terminal

Recruiters may skip forward but never move backwards. Nothing moves
on its own: every transition is an explicit request.

Duplicate applications are stopped by the (job_id, student_id) unique
index, not by a lookup before the insert.
"""

import logging
import math
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError

from portal.db.mongodb import COLLECTIONS, get_collection
from portal.services.job_service import JobService, serialize_job
from portal.services.mongo_service import CollectionService, paginate, serialize_doc, to_object_id
from portal.services.ownership import is_owner
from portal.services.profile_service import serialize_profile
from portal.services.user_service import serialize_user

logger = logging.getLogger(__name__)

PIPELINE = (
    "applied",
    "screening",
    "shortlisted",
    "interview-scheduled",
    "interview-completed",
    "selected",
)
TERMINAL_STAGES = frozenset({"selected", "rejected", "withdrawn"})
ALL_STAGES = PIPELINE + ("rejected", "withdrawn")

# Stages from which an interview may be (re)scheduled
SCHEDULABLE_STAGES = frozenset({"applied", "screening", "shortlisted", "interview-scheduled"})

JOB_SUMMARY = {
    "title": 1, "company_name": 1, "location": 1, "job_type": 1, "stipend": 1,
    "application_deadline": 1, "status": 1, "recruiter_id": 1,
}
STUDENT_SUMMARY = {"name": 1, "email": 1, "department": 1}


def is_terminal(stage: str) -> bool:
    return stage in TERMINAL_STAGES


def can_transition(current: str, target: str) -> bool:
    """
    Recruiter/admin stage change rule.
    Withdrawal is not a recruiter transition; see can_withdraw.
    """
    if current not in ALL_STAGES or target not in ALL_STAGES:
        return False
    if is_terminal(current) or target == "withdrawn":
        return False
    if target == "rejected":
        return True
    return PIPELINE.index(target) > PIPELINE.index(current)


def can_withdraw(current: str) -> bool:
    return current in ALL_STAGES and not is_terminal(current)


def serialize_application(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    out = serialize_doc(doc)
    applied_at = doc.get("applied_at")
    if isinstance(applied_at, datetime):
        elapsed = (datetime.utcnow() - applied_at).total_seconds() / 86400
        out["days_since_applied"] = max(0, math.ceil(elapsed))
    return out


def check_eligibility(job: dict, profile: dict) -> Optional[str]:
    """Return the reason a profile fails the job's eligibility, or None."""
    eligibility = job.get("eligibility") or {}
    min_cgpa = eligibility.get("min_cgpa") or 0
    if min_cgpa and (profile.get("cgpa") is None or profile["cgpa"] < min_cgpa):
        return "You do not meet the minimum CGPA requirement"
    programs = eligibility.get("allowed_programs") or []
    if programs and profile.get("program") not in programs:
        return "Your program is not eligible for this job"
    years = eligibility.get("graduation_years") or []
    if years and profile.get("graduation_year") not in years:
        return "Your graduation year is not eligible for this job"
    return None


class ApplicationService(CollectionService):
    collection_name = "applications"

    def __init__(self):
        super().__init__()
        self.jobs = JobService()
        self.profiles = get_collection(COLLECTIONS["profiles"])
        self.users = get_collection(COLLECTIONS["users"])

    # ----------------------------------------------------------
    # Apply / withdraw
    # ----------------------------------------------------------

    def apply(self, job_id, student_id, cover_letter: str = "", resume_url: Optional[str] = None) -> dict:
        """
        Create an application for `student_id` on `job_id`.

        Raises:
            HTTPException 404 job missing, 400 job not open / no resume,
            403 not eligible, 409 already applied
        """
        job = self.jobs.get(job_id)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        if job.get("status") != "active":
            raise HTTPException(status_code=400, detail="This job is no longer accepting applications")
        deadline = job.get("application_deadline")
        if isinstance(deadline, datetime) and datetime.utcnow() > deadline:
            raise HTTPException(status_code=400, detail="The application deadline has passed")

        student_oid = to_object_id(student_id, "User")
        profile = self.profiles.find_one({"user": student_oid})
        resume = resume_url or (profile or {}).get("resume_url")
        if not profile or not resume:
            raise HTTPException(
                status_code=400,
                detail="Please upload your resume in your profile before applying"
            )

        reason = check_eligibility(job, profile)
        if reason:
            raise HTTPException(status_code=403, detail=reason)

        now = datetime.utcnow()
        doc = {
            "job_id": job["_id"],
            "student_id": student_oid,
            "cover_letter": cover_letter or "",
            "resume_url": resume,
            "stage": "applied",
            "scores": {
                "resume_score": None,
                "interview_score": None,
                "technical_score": None,
                "overall_score": None,
            },
            "reviewer_notes": [],
            "interview_details": None,
            "applied_at": now,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise HTTPException(status_code=409, detail="You have already applied to this job")
        doc["_id"] = result.inserted_id

        self.jobs.adjust_count(job["_id"], 1)
        logger.info("Student %s applied to job %s", student_id, job_id)
        return doc

    def withdraw(self, application_id, student_id) -> dict:
        app = self.collection.find_one({
            "_id": to_object_id(application_id, "Application"),
            "student_id": to_object_id(student_id, "User"),
        })
        if not app:
            raise HTTPException(status_code=404, detail="Application not found")
        if not can_withdraw(app["stage"]):
            raise HTTPException(status_code=400, detail=f"Cannot withdraw an application that is {app['stage']}")
        return self._set(app["_id"], {"stage": "withdrawn"})

    # ----------------------------------------------------------
    # Reads
    # ----------------------------------------------------------

    def get(self, application_id) -> Optional[dict]:
        return self.find_by_id(application_id, "Application")

    def can_view(self, app: dict, job: Optional[dict], user: dict) -> bool:
        """Applying student, the job's recruiter, or admin."""
        if user["role"] == "admin":
            return True
        if user["role"] == "student":
            return is_owner(app["student_id"], user)
        if user["role"] == "recruiter" and job is not None:
            return is_owner(job.get("recruiter_id"), user)
        return False

    def detail(self, app: dict) -> dict:
        """Application with populated job and student summary."""
        out = serialize_application(app)
        job = self.jobs.get(app["job_id"])
        out["job"] = serialize_job(job)
        out["student"] = serialize_user(self.users.find_one({"_id": app["student_id"]}, STUDENT_SUMMARY))
        return out

    def list_for_student(self, student_id, stage: Optional[str] = None, page: int = 1, limit: int = 10) -> Tuple[List[dict], int]:
        query = {"student_id": to_object_id(student_id, "User")}
        if stage:
            query["stage"] = stage
        docs, total = paginate(self.collection, query, page, limit, [("created_at", -1)])
        jobs_coll = get_collection(COLLECTIONS["jobs"])
        items = []
        for doc in docs:
            out = serialize_application(doc)
            out["job"] = serialize_doc(jobs_coll.find_one({"_id": doc["job_id"]}, JOB_SUMMARY))
            items.append(out)
        return items, total

    def list_for_job(self, job_id, stage: Optional[str] = None, page: int = 1, limit: int = 100) -> Tuple[List[dict], int]:
        query = {"job_id": to_object_id(job_id, "Job")}
        if stage:
            query["stage"] = stage
        docs, total = paginate(self.collection, query, page, limit, [("created_at", -1)])
        items = []
        for doc in docs:
            out = serialize_application(doc)
            out["student"] = serialize_user(self.users.find_one({"_id": doc["student_id"]}, STUDENT_SUMMARY))
            out["profile"] = serialize_profile(self.profiles.find_one({"user": doc["student_id"]}))
            items.append(out)
        return items, total

    # ----------------------------------------------------------
    # Recruiter actions
    # ----------------------------------------------------------

    def _set(self, oid, fields: dict, push: Optional[dict] = None) -> dict:
        update = {"$set": {**fields, "updated_at": datetime.utcnow()}}
        if push:
            update["$push"] = push
        self.collection.update_one({"_id": oid}, update)
        return self.collection.find_one({"_id": oid})

    def update_stage(self, app: dict, stage: str) -> dict:
        if not can_transition(app["stage"], stage):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid stage transition: {app['stage']} -> {stage}"
            )
        return self._set(app["_id"], {"stage": stage})

    def add_note(self, app: dict, reviewer_id, note: str, rating: Optional[int] = None) -> dict:
        entry = {
            "reviewer_id": to_object_id(reviewer_id, "User"),
            "note": note,
            "rating": rating,
            "created_at": datetime.utcnow(),
        }
        return self._set(app["_id"], {}, push={"reviewer_notes": entry})

    def schedule_interview(self, app: dict, interviewer_id, details: dict) -> dict:
        if app["stage"] not in SCHEDULABLE_STAGES:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot schedule an interview for an application that is {app['stage']}"
            )
        interview = {
            **details,
            "interviewers": [to_object_id(interviewer_id, "User")],
            "feedback": (app.get("interview_details") or {}).get("feedback"),
        }
        return self._set(app["_id"], {"interview_details": interview, "stage": "interview-scheduled"})

    def set_scores(self, app: dict, scores: dict) -> dict:
        fields = {f"scores.{k}": v for k, v in scores.items()}
        if not fields:
            raise HTTPException(status_code=400, detail="No scores to update")
        return self._set(app["_id"], fields)
