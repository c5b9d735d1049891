"""
Job Service - postings in the `jobs` collection.

Jobs belong to the recruiter (or admin) who posted them via
`recruiter_id`. `application_count` is a running counter kept in step
with the applications collection.
"""

import logging
import math
import re
from datetime import datetime
from typing import List, Optional, Tuple

from portal.db.mongodb import COLLECTIONS, get_collection
from portal.services.mongo_service import CollectionService, paginate, serialize_doc, to_object_id
from portal.services.user_service import serialize_user

logger = logging.getLogger(__name__)

RECRUITER_SUMMARY = {"name": 1, "email": 1, "department": 1}

SORTABLE_FIELDS = ("created_at", "updated_at", "application_deadline", "title", "application_count")


def serialize_job(doc: Optional[dict], recruiter: Optional[dict] = None) -> Optional[dict]:
    """Job for API responses, with deadline-derived fields."""
    if doc is None:
        return None
    out = serialize_doc(doc)
    deadline = doc.get("application_deadline")
    if isinstance(deadline, datetime):
        now = datetime.utcnow()
        out["is_expired"] = now > deadline
        remaining = (deadline - now).total_seconds() / 86400
        out["days_remaining"] = max(0, math.ceil(remaining))
    if recruiter is not None:
        out["recruiter"] = serialize_user(recruiter)
    return out


class JobService(CollectionService):
    collection_name = "jobs"

    def __init__(self):
        super().__init__()
        self.applications = get_collection(COLLECTIONS["applications"])
        self.users = get_collection(COLLECTIONS["users"])

    def with_recruiter(self, doc: Optional[dict]) -> Optional[dict]:
        if doc is None:
            return None
        recruiter = self.users.find_one({"_id": doc.get("recruiter_id")}, RECRUITER_SUMMARY)
        return serialize_job(doc, recruiter)

    def create(self, recruiter_id, data: dict) -> dict:
        data = {k: v for k, v in data.items() if k != "requirements"}
        doc = self.timestamps({
            **data,
            "recruiter_id": to_object_id(recruiter_id, "User"),
            "application_count": 0,
        })
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Job %s created by %s", doc["_id"], recruiter_id)
        return doc

    def get(self, job_id) -> Optional[dict]:
        return self.find_by_id(job_id, "Job")

    def list(
        self,
        status: Optional[str] = "active",
        search: Optional[str] = None,
        skills: Optional[List[str]] = None,
        location_type: Optional[str] = None,
        job_type: Optional[str] = None,
        recruiter_id=None,
        page: int = 1,
        limit: int = 10,
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> Tuple[List[dict], int]:
        query = {}
        if status:
            query["status"] = status
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"title": pattern}, {"company_name": pattern}, {"description": pattern}]
        if skills:
            query["skills"] = {"$in": skills}
        if location_type:
            query["location_type"] = location_type
        if job_type:
            query["job_type"] = job_type
        if recruiter_id is not None:
            query["recruiter_id"] = to_object_id(recruiter_id, "User")
        return paginate(self.collection, query, page, limit, sort or [("created_at", -1)])

    def count_applications(self, job_id) -> int:
        return self.applications.count_documents({"job_id": to_object_id(job_id, "Job")})

    def update(self, job_id, updates: dict) -> Optional[dict]:
        oid = to_object_id(job_id, "Job")
        self.collection.update_one(
            {"_id": oid},
            {"$set": {**updates, "updated_at": datetime.utcnow()}}
        )
        return self.collection.find_one({"_id": oid})

    def set_status(self, job_id, status: str) -> Optional[dict]:
        return self.update(job_id, {"status": status})

    def adjust_count(self, job_id, delta: int) -> None:
        self.collection.update_one(
            {"_id": to_object_id(job_id, "Job")},
            {"$inc": {"application_count": delta}}
        )

    def delete(self, job_id, cascade: bool = False) -> int:
        """
        Delete a job. With cascade, its applications go too.
        Returns the number of applications deleted.
        """
        oid = to_object_id(job_id, "Job")
        deleted_apps = 0
        if cascade:
            deleted_apps = self.applications.delete_many({"job_id": oid}).deleted_count
            logger.info("Deleted %d applications with job %s", deleted_apps, job_id)
        self.collection.delete_one({"_id": oid})
        return deleted_apps
