from datetime import datetime

from conftest import assert_error
from portal.services.application_service import ALL_STAGES
from portal.services.dashboard_service import get_dashboard_stats


def test_empty_portal_has_zero_average():
    stats = get_dashboard_stats()
    assert stats["avg_cgpa"] == 0.0
    assert stats["total_students"] == 0
    assert stats["students_by_year"] == []
    assert stats["students_by_branch"] == []
    assert stats["applications_by_stage"] == {stage: 0 for stage in ALL_STAGES}


def test_average_skips_missing_cgpa(make_user, make_profile):
    make_profile(make_user("student"), cgpa=9.0)
    make_profile(make_user("student"), cgpa=8.0)
    make_profile(make_user("student"), cgpa=8.0)
    make_profile(make_user("student"), cgpa=None)
    assert get_dashboard_stats()["avg_cgpa"] == 8.33


def test_breakdowns(make_user, make_profile, recruiter, make_job, db):
    make_profile(make_user("student"), graduation_year=2027, branch="ECE")
    make_profile(make_user("student"), graduation_year=2025, branch="CSE")
    make_profile(make_user("student"), graduation_year=2027, branch="CSE")
    make_user("student")

    make_job(recruiter)
    make_job(recruiter, status="closed")
    db["verifications"].insert_one({"status": "pending", "created_at": datetime.utcnow()})

    stats = get_dashboard_stats()
    assert stats["total_students"] == 3
    assert stats["total_student_users"] == 4
    assert stats["students_by_year"] == [{"year": 2025, "count": 1}, {"year": 2027, "count": 2}]
    assert stats["students_by_branch"] == [{"branch": "CSE", "count": 2}, {"branch": "ECE", "count": 1}]
    assert stats["active_jobs"] == 1
    assert stats["total_jobs"] == 2
    assert stats["pending_verifications"] == 1


def test_branch_breakdown_is_capped_at_ten(make_user, make_profile):
    for i in range(12):
        make_profile(make_user("student"), branch=f"Branch {i:02d}")
    assert len(get_dashboard_stats()["students_by_branch"]) == 10


def test_verified_and_stage_counts(client, admin, student, make_profile, recruiter, make_job):
    make_profile(student)
    job = make_job(recruiter)
    client.post(f"/api/jobs/{job['_id']}/apply", headers=student["headers"])
    client.patch(f"/api/admin/students/{student['id']}/verify", json={"verified": True}, headers=admin["headers"])

    res = client.get("/api/admin/stats", headers=admin["headers"])
    stats = res.json()["stats"]
    assert stats["verified_students"] == 1
    assert stats["total_applications"] == 1
    assert stats["applications_by_stage"]["applied"] == 1
    assert stats["applications_by_stage"]["selected"] == 0

    assert client.get("/api/student/stats", headers=admin["headers"]).json()["stats"] == stats


def test_stats_are_admin_only(client, recruiter):
    assert_error(client.get("/api/admin/stats", headers=recruiter["headers"]), 403)
