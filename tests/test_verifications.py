import pytest

from conftest import assert_error


def submit(client, user, document_type="resume", name="cv.pdf"):
    return client.post("/api/verifications", json={
        "document_type": document_type,
        "document_name": name,
        "document_url": f"https://files.example.com/{name}",
        "metadata": {"file_size": 1024, "file_type": "application/pdf"},
    }, headers=user["headers"])


def test_submit_and_list_own(client, student):
    res = submit(client, student)
    assert res.status_code == 201
    doc = res.json()["verification"]
    assert doc["status"] == "pending"
    assert doc["student_id"] == student["id"]

    mine = client.get("/api/verifications/me", headers=student["headers"]).json()
    assert mine["count"] == 1


def test_queue_is_oldest_first(client, faculty, make_user):
    first, second = make_user("student"), make_user("student")
    submit(client, first, name="first.pdf")
    submit(client, second, name="second.pdf")

    queue = client.get("/api/verifications/queue", headers=faculty["headers"]).json()["verifications"]
    assert [v["document_name"] for v in queue] == ["first.pdf", "second.pdf"]
    assert queue[0]["student"]["email"] == first["email"]


def test_students_cannot_see_queue(client, student):
    assert_error(client.get("/api/verifications/queue", headers=student["headers"]), 403)


@pytest.mark.parametrize("document_type, flag", [
    ("resume", "resume_verified"),
    ("transcript", "academic_verified"),
    ("id-proof", "identity_verified"),
])
def test_approval_sets_matching_profile_flag(client, faculty, student, make_profile, db, document_type, flag):
    make_profile(student)
    doc = submit(client, student, document_type=document_type).json()["verification"]

    res = client.patch(f"/api/verifications/{doc['id']}", json={"status": "approved", "remarks": "ok"}, headers=faculty["headers"])
    assert res.status_code == 200
    reviewed = res.json()["verification"]
    assert reviewed["status"] == "approved"
    assert reviewed["reviewed_by"] == faculty["id"]
    assert reviewed["reviewed_at"] is not None

    flags = db["student_profiles"].find_one({"user": student["oid"]})["verified_flags"]
    assert flags[flag] is True
    assert sum(flags.values()) == 1


def test_rejection_leaves_flags_alone(client, admin, student, make_profile, db):
    make_profile(student)
    doc = submit(client, student).json()["verification"]
    client.patch(f"/api/verifications/{doc['id']}", json={"status": "rejected"}, headers=admin["headers"])
    assert db["student_profiles"].find_one({"user": student["oid"]})["verified_flags"]["resume_verified"] is False


def test_review_cannot_reset_to_pending(client, faculty, student):
    doc = submit(client, student).json()["verification"]
    assert_error(client.patch(f"/api/verifications/{doc['id']}", json={"status": "pending"}, headers=faculty["headers"]), 400)


def test_verification_visibility(client, student, faculty, admin, make_user):
    doc = submit(client, student).json()["verification"]
    url = f"/api/verifications/{doc['id']}"
    for user in (student, faculty, admin):
        assert client.get(url, headers=user["headers"]).status_code == 200
    assert_error(client.get(url, headers=make_user("student")["headers"]), 403)
    assert_error(client.get(url, headers=make_user("recruiter")["headers"]), 403)
