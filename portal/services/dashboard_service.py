"""
Dashboard Service - admin statistics snapshot.

Everything is computed on demand with count/aggregate queries;
nothing here is cached.
"""

from portal.db.mongodb import COLLECTIONS, get_collection
from portal.services.application_service import ALL_STAGES


def _average_cgpa(profiles) -> float:
    rows = list(profiles.aggregate([
        {"$match": {"cgpa": {"$ne": None}}},
        {"$group": {"_id": None, "avg": {"$avg": "$cgpa"}}},
    ]))
    if not rows or rows[0].get("avg") is None:
        return 0.0
    return round(float(rows[0]["avg"]), 2)


def get_dashboard_stats() -> dict:
    users = get_collection(COLLECTIONS["users"])
    profiles = get_collection(COLLECTIONS["profiles"])
    jobs = get_collection(COLLECTIONS["jobs"])
    applications = get_collection(COLLECTIONS["applications"])
    verifications = get_collection(COLLECTIONS["verifications"])

    by_year = profiles.aggregate([
        {"$match": {"graduation_year": {"$ne": None}}},
        {"$group": {"_id": "$graduation_year", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ])
    by_branch = profiles.aggregate([
        {"$match": {"branch": {"$nin": [None, ""]}}},
        {"$group": {"_id": "$branch", "count": {"$sum": 1}}},
        {"$sort": {"count": -1, "_id": 1}},
        {"$limit": 10},
    ])
    by_stage = {stage: 0 for stage in ALL_STAGES}
    for row in applications.aggregate([{"$group": {"_id": "$stage", "count": {"$sum": 1}}}]):
        by_stage[row["_id"]] = row["count"]

    return {
        "total_students": profiles.count_documents({}),
        "total_student_users": users.count_documents({"role": "student"}),
        "verified_students": profiles.count_documents({"is_verified": True}),
        "avg_cgpa": _average_cgpa(profiles),
        "active_jobs": jobs.count_documents({"status": "active"}),
        "total_jobs": jobs.count_documents({}),
        "total_applications": applications.count_documents({}),
        "students_by_year": [{"year": r["_id"], "count": r["count"]} for r in by_year],
        "students_by_branch": [{"branch": r["_id"], "count": r["count"]} for r in by_branch],
        "applications_by_stage": by_stage,
        "pending_verifications": verifications.count_documents({"status": "pending"}),
    }
