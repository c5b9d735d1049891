"""
Reference data services - departments and the skill catalog.

Both collections are admin-managed. Skills also carry a usage counter
that grows as students add catalogued skills to their profiles.
"""

import re
from datetime import datetime
from typing import Iterable, List, Optional

from portal.services.mongo_service import CollectionService, to_object_id


class DepartmentService(CollectionService):
    collection_name = "departments"

    def create(self, data: dict) -> dict:
        doc = dict(data)
        doc["head_of_department"] = (
            to_object_id(doc["head_of_department"], "User") if doc.get("head_of_department") else None
        )
        doc["faculty"] = [to_object_id(f, "User") for f in doc.get("faculty", [])]
        self.timestamps(doc)
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def list(self, is_active: Optional[bool] = None) -> List[dict]:
        query = {}
        if is_active is not None:
            query["is_active"] = is_active
        return list(self.collection.find(query).sort("name", 1))

    def update(self, department_id: str, updates: dict) -> Optional[dict]:
        updates = dict(updates)
        if "head_of_department" in updates and updates["head_of_department"]:
            updates["head_of_department"] = to_object_id(updates["head_of_department"], "User")
        if "faculty" in updates:
            updates["faculty"] = [to_object_id(f, "User") for f in updates["faculty"] or []]
        updates["updated_at"] = datetime.utcnow()
        oid = to_object_id(department_id, "Department")
        self.collection.update_one({"_id": oid}, {"$set": updates})
        return self.collection.find_one({"_id": oid})

    def delete(self, department_id: str) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(department_id, "Department")})
        return result.deleted_count > 0


class SkillService(CollectionService):
    collection_name = "skills"

    def create(self, data: dict) -> dict:
        doc = self.timestamps({**data, "usage_count": 0})
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def list(self, category: Optional[str] = None, search: Optional[str] = None, is_active: bool = True) -> List[dict]:
        query = {"is_active": is_active}
        if category:
            query["category"] = category
        if search:
            query["name"] = {"$regex": re.escape(search), "$options": "i"}
        return list(self.collection.find(query).sort([("usage_count", -1), ("name", 1)]))

    def categories(self) -> List[str]:
        return sorted(self.collection.distinct("category"))

    def update(self, skill_id: str, updates: dict) -> Optional[dict]:
        oid = to_object_id(skill_id, "Skill")
        self.collection.update_one(
            {"_id": oid},
            {"$set": {**updates, "updated_at": datetime.utcnow()}}
        )
        return self.collection.find_one({"_id": oid})

    def delete(self, skill_id: str) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(skill_id, "Skill")})
        return result.deleted_count > 0

    def record_usage(self, skill_names: Iterable[str]) -> int:
        """
        Bump usage_count for catalogued skills.
        Names not in the catalog are ignored. Returns how many were bumped.
        """
        names = sorted({s.strip().lower() for s in skill_names if s and s.strip()})
        if not names:
            return 0
        result = self.collection.update_many(
            {"name": {"$in": names}},
            {"$inc": {"usage_count": 1}}
        )
        return result.modified_count
