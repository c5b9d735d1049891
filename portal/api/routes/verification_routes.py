"""
Verification Routes

POST /verifications - Submit a document (student)
GET /verifications/me - Own submissions (student)
GET /verifications/queue - Review queue, oldest first (faculty/admin)
PATCH /verifications/{verification_id} - Review a submission (faculty/admin)
GET /verifications/{verification_id} - Owning student, faculty or admin
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends

from portal.core.auth import get_current_user, get_current_student, require_roles
from portal.schemas.schemas import VerificationCreate, VerificationReview, to_document
from portal.services.ownership import is_owner
from portal.services.verification_service import VerificationService, serialize_verification

router = APIRouter(prefix="/verifications", tags=["Verifications"])

reviewers = require_roles("faculty", "admin")


@router.post("", status_code=201)
async def submit_document(data: VerificationCreate, student: dict = Depends(get_current_student)):
    doc = VerificationService().create(student["user_id"], to_document(data))
    return {"success": True, "message": "Document submitted for verification", "verification": serialize_verification(doc)}


@router.get("/me")
async def my_verifications(student: dict = Depends(get_current_student)):
    items = VerificationService().list_for_student(student["user_id"])
    return {"success": True, "count": len(items), "verifications": items}


@router.get("/queue")
async def review_queue(
    status: Optional[str] = "pending",
    document_type: Optional[str] = None,
    user: dict = Depends(reviewers),
):
    items = VerificationService().queue(status=status or None, document_type=document_type)
    return {"success": True, "count": len(items), "verifications": items}


@router.patch("/{verification_id}")
async def review_document(verification_id: str, data: VerificationReview, user: dict = Depends(reviewers)):
    doc = VerificationService().review(verification_id, user["user_id"], data.status.value, data.remarks)
    return {"success": True, "message": f"Document {data.status.value}", "verification": serialize_verification(doc)}


@router.get("/{verification_id}")
async def get_verification(verification_id: str, user: dict = Depends(get_current_user)):
    doc = VerificationService().get(verification_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Verification not found")
    if user["role"] != "faculty" and not is_owner(doc["student_id"], user):
        raise HTTPException(status_code=403, detail="You are not authorized to view this document")
    return {"success": True, "verification": serialize_verification(doc)}
