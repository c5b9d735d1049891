"""
MongoDB Connection Utility

MongoDB stores every portal entity:
- users, student_profiles
- jobs, applications
- departments, skills (reference data)
- verifications (document review workflow)

Uniqueness rules live in indexes, not in application code:
- one account per email
- one profile per user
- one application per (job, student) pair
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def set_mongo_db(db: Database) -> None:
    """Swap the active database (used by tests and scripts)."""
    global _db
    _db = db


def get_collection(name: str) -> Collection:
    """Get a specific collection by its name."""
    db = get_mongo_db()
    return db[name]


def check_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        get_mongo_db().command("ping")
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "profiles": "student_profiles",
    "jobs": "jobs",
    "applications": "applications",
    "departments": "departments",
    "skills": "skills",
    "verifications": "verifications",
}


# Uniqueness rules, per collection key
UNIQUE_INDEXES = {
    "users": [[("email", ASCENDING)]],
    "profiles": [[("user", ASCENDING)]],
    # a student applies to a job at most once
    "applications": [[("job_id", ASCENDING), ("student_id", ASCENDING)]],
    "departments": [[("name", ASCENDING)], [("code", ASCENDING)]],
    "skills": [[("name", ASCENDING)]],
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness rules and common queries.
    Call this once during app startup.
    """
    db = get_mongo_db()

    for key, indexes in UNIQUE_INDEXES.items():
        for fields in indexes:
            db[COLLECTIONS[key]].create_index(fields, unique=True)

    users = db[COLLECTIONS["users"]]
    users.create_index([("role", ASCENDING), ("email", ASCENDING)])

    profiles = db[COLLECTIONS["profiles"]]
    profiles.create_index([("graduation_year", ASCENDING), ("skills", ASCENDING)])

    jobs = db[COLLECTIONS["jobs"]]
    jobs.create_index([("status", ASCENDING), ("created_at", DESCENDING)])
    jobs.create_index([("recruiter_id", ASCENDING), ("status", ASCENDING)])

    applications = db[COLLECTIONS["applications"]]
    applications.create_index([("student_id", ASCENDING), ("stage", ASCENDING)])
    applications.create_index([("job_id", ASCENDING), ("stage", ASCENDING)])

    skills = db[COLLECTIONS["skills"]]
    skills.create_index([("category", ASCENDING), ("usage_count", DESCENDING)])

    verifications = db[COLLECTIONS["verifications"]]
    verifications.create_index([("status", ASCENDING), ("created_at", DESCENDING)])
    verifications.create_index([
        ("student_id", ASCENDING),
        ("document_type", ASCENDING),
        ("status", ASCENDING)
    ])

    logger.info("MongoDB indexes created successfully")


def missing_unique_indexes() -> list:
    """
    List the uniqueness rules that have no matching unique index,
    as "collection(field, ...)" strings. Empty when all are in place.
    """
    db = get_mongo_db()
    missing = []
    for key, indexes in UNIQUE_INDEXES.items():
        name = COLLECTIONS[key]
        present = [
            [tuple(part) for part in info["key"]]
            for info in db[name].index_information().values()
            if info.get("unique")
        ]
        for fields in indexes:
            if [tuple(part) for part in fields] not in present:
                missing.append(f"{name}({', '.join(f for f, _ in fields)})")
    return missing
