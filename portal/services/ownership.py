"""
Ownership Resolver

Decides whether the caller owns a resource.

Owner references reach this module in three shapes:
- a populated document:  {"_id": ObjectId(...), "name": ...}
- a raw identifier:      ObjectId(...)
- a string:              "65f1c0..."

All three are normalized to the 24-hex string form before comparison,
so the same owner always yields the same decision. Admins bypass the
check entirely.
"""

import logging
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def normalize_id(value: Any) -> Optional[str]:
    """
    Reduce an owner reference to its canonical string form.

    Returns None when the value carries no identifier.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        # Populated document: serialized docs use "id", raw ones use "_id"
        inner = value.get("_id", value.get("id"))
        return normalize_id(inner)
    if isinstance(value, ObjectId):
        return str(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return str(ObjectId(text))
    except (InvalidId, TypeError):
        return text


def is_owner(owner: Any, user: dict) -> bool:
    """
    Check if `user` may act on a resource owned by `owner`.

    Args:
        owner: owner reference in any supported shape
        user: authenticated caller ({"user_id", "role", ...})
    """
    if user.get("role") == ADMIN_ROLE:
        return True
    owner_id = normalize_id(owner)
    caller_id = normalize_id(user.get("user_id"))
    if owner_id is None or caller_id is None:
        return False
    return owner_id == caller_id


def ensure_owner(owner: Any, user: dict, message: str = "Access denied. You do not own this resource.") -> None:
    """Raise 403 unless the caller owns the resource (or is admin)."""
    if not is_owner(owner, user):
        logger.debug("Ownership denied for user %s", user.get("user_id"))
        raise HTTPException(status_code=403, detail=message)
