from datetime import datetime, timedelta

import pytest

from conftest import assert_error

JOB_FORM = {
    "title": "Data Intern",
    "company": "Globex",
    "description": "Crunch numbers",
    "location": "Remote",
    "location_type": "remote",
    "application_deadline": (datetime.utcnow() + timedelta(days=10)).isoformat(),
    "type": "fulltime",
    "duration": "6",
    "stipend": "15000",
    "requirements": "python, pandas , ,sql",
}


def test_create_job_from_client_form(client, recruiter, db):
    res = client.post("/api/jobs", json=JOB_FORM, headers=recruiter["headers"])
    assert res.status_code == 201, res.text
    job = res.json()["job"]
    assert job["company_name"] == "Globex"
    assert job["job_type"] == "full-time"
    assert job["skills"] == ["python", "pandas", "sql"]
    assert job["stipend"] == {"min": 15000, "max": 15000, "currency": "INR"}
    assert job["duration"] == {"value": 6, "unit": "months"}
    assert job["recruiter_id"] == recruiter["id"]
    assert job["application_count"] == 0
    assert job["is_expired"] is False

    stored = db["jobs"].find_one({"title": "Data Intern"})
    assert stored["job_type"] == "full-time"
    assert "requirements" not in stored


@pytest.mark.parametrize("given, stored", [
    ("parttime", "part-time"),
    ("internship", "internship"),
    ("contract", "contract"),
    ("volunteer", "internship"),
])
def test_job_type_normalization(client, recruiter, given, stored):
    res = client.post("/api/jobs", json={**JOB_FORM, "type": given}, headers=recruiter["headers"])
    assert res.json()["job"]["job_type"] == stored


def test_create_job_requires_skills(client, recruiter):
    form = {k: v for k, v in JOB_FORM.items() if k != "requirements"}
    assert_error(client.post("/api/jobs", json=form, headers=recruiter["headers"]), 400)


def test_students_cannot_post_jobs(client, student):
    assert_error(client.post("/api/jobs", json=JOB_FORM, headers=student["headers"]), 403)


def test_public_list_shows_active_jobs_only(client, recruiter, make_job):
    make_job(recruiter, title="Open role")
    make_job(recruiter, title="Closed role", status="closed")

    res = client.get("/api/jobs")
    assert res.status_code == 200
    titles = [j["title"] for j in res.json()["jobs"]]
    assert titles == ["Open role"]
    assert res.json()["jobs"][0]["recruiter"]["email"] == recruiter["email"]

    all_titles = {j["title"] for j in client.get("/api/jobs?status=all").json()["jobs"]}
    assert all_titles == {"Open role", "Closed role"}


def test_list_filters(client, recruiter, make_job):
    make_job(recruiter, title="Go developer", skills=["go"], location_type="remote")
    make_job(recruiter, title="Python developer", skills=["python"], job_type="full-time")

    assert [j["title"] for j in client.get("/api/jobs?skills=go").json()["jobs"]] == ["Go developer"]
    assert [j["title"] for j in client.get("/api/jobs?location_type=remote").json()["jobs"]] == ["Go developer"]
    assert [j["title"] for j in client.get("/api/jobs?type=full-time").json()["jobs"]] == ["Python developer"]
    assert [j["title"] for j in client.get("/api/jobs?search=python").json()["jobs"]] == ["Python developer"]

    page = client.get("/api/jobs?limit=1&page=2").json()
    assert page["count"] == 1
    assert page["pagination"] == {"total": 2, "page": 2, "limit": 1, "pages": 2}


def test_get_job_includes_live_application_count(client, recruiter, student, make_job, make_profile):
    job = make_job(recruiter)
    make_profile(student)
    client.post(f"/api/jobs/{job['_id']}/apply", headers=student["headers"])

    res = client.get(f"/api/jobs/{job['_id']}")
    assert res.status_code == 200
    assert res.json()["job"]["application_count"] == 1


@pytest.mark.parametrize("job_id", ["nope", "65f1c0000000000000000000"])
def test_get_unknown_or_malformed_job_is_404(client, job_id):
    assert_error(client.get(f"/api/jobs/{job_id}"), 404)


def test_non_owner_recruiter_cannot_update(client, recruiter, make_user, make_job, db):
    job = make_job(recruiter, title="Original")
    other = make_user("recruiter")

    assert_error(client.put(f"/api/jobs/{job['_id']}", json={"title": "Hijacked"}, headers=other["headers"]), 403)
    assert db["jobs"].find_one({"_id": job["_id"]})["title"] == "Original"


def test_owner_and_admin_can_update(client, recruiter, admin, make_job, db):
    job = make_job(recruiter)

    res = client.put(f"/api/jobs/{job['_id']}", json={"title": "Renamed", "type": "parttime"}, headers=recruiter["headers"])
    assert res.status_code == 200
    assert res.json()["job"]["job_type"] == "part-time"

    res = client.put(f"/api/jobs/{job['_id']}", json={"openings": 5}, headers=admin["headers"])
    assert res.status_code == 200
    stored = db["jobs"].find_one({"_id": job["_id"]})
    assert stored["title"] == "Renamed"
    assert stored["openings"] == 5


def test_status_update_only_active_or_closed(client, recruiter, make_job):
    job = make_job(recruiter)
    res = client.patch(f"/api/jobs/{job['_id']}/status", json={"status": "closed"}, headers=recruiter["headers"])
    assert res.json()["job"]["status"] == "closed"
    assert_error(client.patch(f"/api/jobs/{job['_id']}/status", json={"status": "draft"}, headers=recruiter["headers"]), 400)


def test_recruiter_cannot_delete_job_with_applications(client, recruiter, student, make_job, make_profile, db):
    job = make_job(recruiter)
    make_profile(student)
    client.post(f"/api/jobs/{job['_id']}/apply", headers=student["headers"])

    assert_error(client.delete(f"/api/jobs/{job['_id']}", headers=recruiter["headers"]), 400)
    assert db["jobs"].count_documents({"_id": job["_id"]}) == 1


def test_admin_delete_cascades_applications(client, recruiter, admin, student, make_job, make_profile, db):
    job = make_job(recruiter)
    make_profile(student)
    client.post(f"/api/jobs/{job['_id']}/apply", headers=student["headers"])

    res = client.delete(f"/api/jobs/{job['_id']}", headers=admin["headers"])
    assert res.status_code == 200
    assert res.json()["deleted_applications"] == 1
    assert db["jobs"].count_documents({}) == 0
    assert db["applications"].count_documents({}) == 0


def test_recruiter_deletes_job_without_applications(client, recruiter, make_job, db):
    job = make_job(recruiter)
    assert client.delete(f"/api/jobs/{job['_id']}", headers=recruiter["headers"]).status_code == 200
    assert db["jobs"].count_documents({}) == 0


def test_my_jobs_lists_only_own(client, recruiter, make_user, make_job):
    make_job(recruiter, title="Mine")
    make_job(make_user("recruiter"), title="Theirs")
    res = client.get("/api/jobs/recruiter/me", headers=recruiter["headers"])
    assert [j["title"] for j in res.json()["jobs"]] == ["Mine"]


def test_job_applications_visible_to_owner_only(client, recruiter, make_user, make_job):
    job = make_job(recruiter)
    assert client.get(f"/api/jobs/{job['_id']}/applications", headers=recruiter["headers"]).status_code == 200
    other = make_user("recruiter")
    assert_error(client.get(f"/api/jobs/{job['_id']}/applications", headers=other["headers"]), 403)


@pytest.mark.parametrize("field", ["title", "location", "skills", "application_deadline", "status"])
def test_null_update_of_required_job_field_is_400(client, recruiter, make_job, db, field):
    job = make_job(recruiter, title="Kept")
    body = assert_error(client.put(f"/api/jobs/{job['_id']}", json={field: None}, headers=recruiter["headers"]), 400)
    assert "cannot be null" in body["error"]
    stored = db["jobs"].find_one({"_id": job["_id"]})
    assert stored["title"] == "Kept"
    assert stored[field] is not None


def test_company_logo_can_be_cleared(client, recruiter, make_job):
    job = make_job(recruiter)
    res = client.put(f"/api/jobs/{job['_id']}", json={"company_logo": None}, headers=recruiter["headers"])
    assert res.status_code == 200, res.text
