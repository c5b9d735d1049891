"""
User Service - accounts in the `users` collection.

Passwords are stored only as bcrypt hashes and never leave this module
unless explicitly requested (login).
"""

import logging
import re
from datetime import datetime
from typing import List, Optional

from portal.db.mongodb import COLLECTIONS, get_collection
from portal.core.auth import hash_password
from portal.services.mongo_service import CollectionService, serialize_doc, to_object_id

logger = logging.getLogger(__name__)

PUBLIC_PROJECTION = {"password_hash": 0}


def serialize_user(doc: Optional[dict]) -> Optional[dict]:
    """User document without the password hash."""
    if doc is None:
        return None
    doc = {k: v for k, v in doc.items() if k != "password_hash"}
    return serialize_doc(doc)


class UserService(CollectionService):
    collection_name = "users"

    def create(
        self,
        name: str,
        email: str,
        password: str,
        role: str = "student",
        department: str = "",
        is_active: bool = True,
        approval_status: str = "approved",
    ) -> dict:
        """
        Insert a new account.
        A duplicate email raises DuplicateKeyError from the unique index.
        """
        doc = self.timestamps({
            "name": name,
            "email": email.strip().lower(),
            "password_hash": hash_password(password),
            "role": role,
            "department": department,
            "is_active": is_active,
            "approval_status": approval_status,
            "last_login": None,
            "profile_picture": "",
        })
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def get_by_email(self, email: str) -> Optional[dict]:
        """Fetch user by email, password hash included."""
        return self.collection.find_one({"email": email.strip().lower()})

    def get(self, user_id) -> Optional[dict]:
        return self.collection.find_one({"_id": to_object_id(user_id, "User")}, PUBLIC_PROJECTION)

    def list(self, role: Optional[str] = None, is_active: Optional[bool] = None, search: Optional[str] = None) -> List[dict]:
        query = {}
        if role:
            query["role"] = role
        if is_active is not None:
            query["is_active"] = is_active
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"name": pattern}, {"email": pattern}]
        return list(self.collection.find(query, PUBLIC_PROJECTION).sort("created_at", -1))

    def touch_login(self, user_id) -> datetime:
        now = datetime.utcnow()
        self.collection.update_one(
            {"_id": to_object_id(user_id, "User")},
            {"$set": {"last_login": now}}
        )
        return now

    def set_profile_picture(self, user_id, url: str) -> bool:
        result = self.collection.update_one(
            {"_id": to_object_id(user_id, "User")},
            {"$set": {"profile_picture": url, "updated_at": datetime.utcnow()}}
        )
        return result.matched_count > 0

    def approve(self, user_id) -> Optional[dict]:
        oid = to_object_id(user_id, "User")
        self.collection.update_one(
            {"_id": oid},
            {"$set": {"is_active": True, "approval_status": "approved", "updated_at": datetime.utcnow()}}
        )
        return self.collection.find_one({"_id": oid}, PUBLIC_PROJECTION)

    def delete_student(self, user_id) -> dict:
        """
        Remove a student and everything that hangs off the account:
        profile, applications (job counters adjusted) and verifications.

        Returns per-collection delete counts.
        """
        oid = to_object_id(user_id, "User")
        applications = get_collection(COLLECTIONS["applications"])
        jobs = get_collection(COLLECTIONS["jobs"])

        # Give the jobs back their application slots first
        per_job = applications.aggregate([
            {"$match": {"student_id": oid}},
            {"$group": {"_id": "$job_id", "count": {"$sum": 1}}},
        ])
        for row in per_job:
            jobs.update_one({"_id": row["_id"]}, {"$inc": {"application_count": -row["count"]}})

        counts = {
            "applications": applications.delete_many({"student_id": oid}).deleted_count,
            "verifications": get_collection(COLLECTIONS["verifications"]).delete_many(
                {"student_id": oid}
            ).deleted_count,
            "profiles": get_collection(COLLECTIONS["profiles"]).delete_many({"user": oid}).deleted_count,
            "users": self.collection.delete_one({"_id": oid}).deleted_count,
        }
        logger.info("Deleted student %s: %s", user_id, counts)
        return counts
