"""
Student Profile Service - the `student_profiles` collection.

One profile per user, enforced by the unique index on `user`.
Every profile leaving this module goes through `serialize_profile`,
which attaches the freshly computed completion state.
"""

import re
from datetime import datetime
from typing import List, Optional, Tuple

from portal.db.mongodb import COLLECTIONS, get_collection
from portal.services.catalog_service import SkillService
from portal.services.mongo_service import CollectionService, paginate, serialize_doc, to_object_id
from portal.services.profile_completion import profile_state
from portal.services.user_service import serialize_user

# Which profile flag an approved document type vouches for
DOCUMENT_FLAGS = {
    "resume": "resume_verified",
    "transcript": "academic_verified",
    "id-proof": "identity_verified",
}

SORTABLE_FIELDS = ("created_at", "updated_at", "cgpa", "graduation_year", "program")

USER_SUMMARY = {"name": 1, "email": 1, "department": 1, "profile_picture": 1}


def default_flags() -> dict:
    return {"resume_verified": False, "academic_verified": False, "identity_verified": False}


def serialize_profile(doc: Optional[dict], user: Optional[dict] = None) -> Optional[dict]:
    """
    Profile for API responses.

    Adds completion_percentage/is_complete and, when given, the populated
    user summary in place of the raw `user` id.
    """
    if doc is None:
        return None
    out = serialize_doc(doc)
    out.update(profile_state(doc))
    out.setdefault("is_verified", False)
    out.setdefault("verified_at", None)
    out.setdefault("verified_flags", default_flags())
    if user is not None:
        out["user"] = serialize_user(user)
    return out


class StudentProfileService(CollectionService):
    collection_name = "profiles"

    def __init__(self):
        super().__init__()
        self.users = get_collection(COLLECTIONS["users"])

    def _with_user(self, doc: Optional[dict]) -> Optional[dict]:
        if doc is None:
            return None
        user = self.users.find_one({"_id": doc["user"]}, USER_SUMMARY)
        return serialize_profile(doc, user)

    def create(self, user_id, data: dict) -> dict:
        """
        Create a profile for `user_id`.
        A second profile for the same user raises DuplicateKeyError.
        """
        doc = self.timestamps({
            **data,
            "user": to_object_id(user_id, "User"),
            "verified_flags": default_flags(),
            "is_verified": False,
            "verified_at": None,
        })
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        SkillService().record_usage(doc.get("skills", []))
        return self._with_user(doc)

    def get_raw(self, user_id) -> Optional[dict]:
        return self.collection.find_one({"user": to_object_id(user_id, "User")})

    def get_by_user(self, user_id) -> Optional[dict]:
        return self._with_user(self.get_raw(user_id))

    def get(self, profile_id) -> Optional[dict]:
        return self._with_user(self.find_by_id(profile_id, "Profile"))

    def update(self, user_id, updates: dict) -> Optional[dict]:
        """Partial update. Returns None when the user has no profile."""
        existing = self.get_raw(user_id)
        if existing is None:
            return None
        if updates:
            self.collection.update_one(
                {"_id": existing["_id"]},
                {"$set": {**updates, "updated_at": datetime.utcnow()}}
            )
            if "skills" in updates:
                before = {s.lower() for s in existing.get("skills") or []}
                added = [s for s in updates["skills"] or [] if s.lower() not in before]
                SkillService().record_usage(added)
        return self.get_by_user(user_id)

    def delete(self, user_id) -> bool:
        result = self.collection.delete_one({"user": to_object_id(user_id, "User")})
        return result.deleted_count > 0

    def search(
        self,
        skills: Optional[List[str]] = None,
        graduation_year: Optional[int] = None,
        min_cgpa: Optional[float] = None,
        max_cgpa: Optional[float] = None,
        program: Optional[str] = None,
        branch: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> Tuple[List[dict], int]:
        query = {}
        if skills:
            query["skills"] = {"$in": skills}
        if graduation_year:
            query["graduation_year"] = graduation_year
        if min_cgpa is not None or max_cgpa is not None:
            query["cgpa"] = {}
            if min_cgpa is not None:
                query["cgpa"]["$gte"] = min_cgpa
            if max_cgpa is not None:
                query["cgpa"]["$lte"] = max_cgpa
        if program:
            query["program"] = {"$regex": re.escape(program), "$options": "i"}
        if branch:
            query["branch"] = {"$regex": re.escape(branch), "$options": "i"}

        docs, total = paginate(self.collection, query, page, limit, sort or [("created_at", -1)])
        return [self._with_user(d) for d in docs], total

    def set_verified(self, user_id, verified: bool) -> Optional[dict]:
        """Admin verification toggle: sets or clears is_verified and verified_at."""
        result = self.collection.update_one(
            {"user": to_object_id(user_id, "User")},
            {"$set": {
                "is_verified": verified,
                "verified_at": datetime.utcnow() if verified else None,
                "updated_at": datetime.utcnow(),
            }}
        )
        if result.matched_count == 0:
            return None
        return self.get_by_user(user_id)

    def set_flag(self, user_id, flag: str, value: bool) -> Optional[dict]:
        """Set one of the verified_flags booleans."""
        if flag not in default_flags():
            raise ValueError(f"Unknown verification flag: {flag}")
        result = self.collection.update_one(
            {"user": to_object_id(user_id, "User")},
            {"$set": {f"verified_flags.{flag}": value, "updated_at": datetime.utcnow()}}
        )
        if result.matched_count == 0:
            return None
        return self.get_by_user(user_id)

    def set_resume_url(self, user_id, url: str) -> bool:
        result = self.collection.update_one(
            {"user": to_object_id(user_id, "User")},
            {"$set": {"resume_url": url, "updated_at": datetime.utcnow()}}
        )
        return result.matched_count > 0
