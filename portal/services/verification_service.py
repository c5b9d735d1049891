"""
Verification Service - student document submissions reviewed by faculty.

A document starts `pending`; a reviewer moves it to approved, rejected
or resubmit-required. Approving a resume, transcript or id-proof
vouches for the matching flag on the student's profile.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException

from portal.db.mongodb import COLLECTIONS, get_collection
from portal.services.mongo_service import CollectionService, serialize_doc, to_object_id
from portal.services.profile_service import DOCUMENT_FLAGS, StudentProfileService
from portal.services.user_service import serialize_user

logger = logging.getLogger(__name__)

STUDENT_SUMMARY = {"name": 1, "email": 1, "department": 1}


def serialize_verification(doc: Optional[dict], student: Optional[dict] = None) -> Optional[dict]:
    if doc is None:
        return None
    out = serialize_doc(doc)
    if student is not None:
        out["student"] = serialize_user(student)
    return out


class VerificationService(CollectionService):
    collection_name = "verifications"

    def __init__(self):
        super().__init__()
        self.users = get_collection(COLLECTIONS["users"])

    def create(self, student_id, data: dict) -> dict:
        now = datetime.utcnow()
        doc = self.timestamps({
            **data,
            "student_id": to_object_id(student_id, "User"),
            "status": "pending",
            "remarks": "",
            "reviewed_by": None,
            "reviewed_at": None,
            "submitted_at": now,
        })
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Verification %s (%s) submitted by %s", doc["_id"], doc["document_type"], student_id)
        return doc

    def get(self, verification_id) -> Optional[dict]:
        return self.find_by_id(verification_id, "Verification")

    def list_for_student(self, student_id) -> List[dict]:
        cursor = self.collection.find({"student_id": to_object_id(student_id, "User")}).sort("created_at", -1)
        return [serialize_verification(d) for d in cursor]

    def queue(self, status: Optional[str] = "pending", document_type: Optional[str] = None) -> List[dict]:
        """Review queue, oldest submission first."""
        query = {}
        if status:
            query["status"] = status
        if document_type:
            query["document_type"] = document_type
        items = []
        for doc in self.collection.find(query).sort("created_at", 1):
            student = self.users.find_one({"_id": doc["student_id"]}, STUDENT_SUMMARY)
            items.append(serialize_verification(doc, student))
        return items

    def review(self, verification_id, reviewer_id, status: str, remarks: str = "") -> dict:
        doc = self.get(verification_id)
        if not doc:
            raise HTTPException(status_code=404, detail="Verification not found")

        now = datetime.utcnow()
        self.collection.update_one(
            {"_id": doc["_id"]},
            {"$set": {
                "status": status,
                "remarks": remarks,
                "reviewed_by": to_object_id(reviewer_id, "User"),
                "reviewed_at": now,
                "updated_at": now,
            }}
        )

        flag = DOCUMENT_FLAGS.get(doc["document_type"])
        if status == "approved" and flag:
            StudentProfileService().set_flag(doc["student_id"], flag, True)

        logger.info("Verification %s marked %s by %s", doc["_id"], status, reviewer_id)
        return self.collection.find_one({"_id": doc["_id"]})
