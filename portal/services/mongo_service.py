"""
MongoDB Service - shared helpers for the collection services.

- ObjectId <-> string conversion for JSON responses
- id parsing for path parameters
- pagination over a filtered collection
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pymongo.collection import Collection

from portal.db.mongodb import COLLECTIONS, get_collection


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_value(value: Any) -> Any:
    """Recursively convert ObjectIds to strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict, exposing _id as id."""
    if doc is None:
        return None
    out = serialize_value(doc)
    if "_id" in out:
        out["id"] = out.pop("_id")
    return out


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: Any, label: str = "Resource") -> ObjectId:
    """
    Parse an id coming from a path or body.

    Malformed ids can't match any document, so they are reported as 404.
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise HTTPException(status_code=404, detail=f"{label} not found")


def parse_sort(sort: Optional[str], allowed: Sequence[str], default: Tuple[str, int] = ("created_at", -1)) -> List[Tuple[str, int]]:
    """
    Turn "-created_at" / "cgpa" into a pymongo sort spec.
    Unknown fields fall back to the default.
    """
    spec = (sort or "").strip()
    field = spec.lstrip("-+")
    if field not in allowed:
        return [default]
    return [(field, -1 if spec.startswith("-") else 1)]


def paginate(
    collection: Collection,
    query: Dict[str, Any],
    page: int,
    limit: int,
    sort: List[Tuple[str, int]],
    projection: Optional[dict] = None,
) -> Tuple[List[dict], int]:
    """Fetch one page of documents plus the total match count."""
    total = collection.count_documents(query)
    cursor = (
        collection.find(query, projection)
        .sort(sort)
        .skip((page - 1) * limit)
        .limit(limit)
    )
    return list(cursor), total


def page_meta(total: int, page: int, limit: int) -> dict:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": (total + limit - 1) // limit if limit else 0,
    }


class CollectionService:
    """
    Base for the per-collection services.
    Subclasses set `collection_name` (a key of COLLECTIONS).
    """

    collection_name: str = ""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS[self.collection_name])

    @staticmethod
    def timestamps(doc: dict) -> dict:
        now = datetime.utcnow()
        doc.setdefault("created_at", now)
        doc["updated_at"] = now
        return doc

    def find_by_id(self, doc_id: Any, label: str = "Resource") -> Optional[dict]:
        return self.collection.find_one({"_id": to_object_id(doc_id, label)})

    def get_or_404(self, doc_id: Any, label: str = "Resource") -> dict:
        doc = self.find_by_id(doc_id, label)
        if not doc:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return doc
