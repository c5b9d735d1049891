from conftest import assert_error

PROFILE = {
    "program": "B.Tech",
    "branch": "Computer Science",
    "graduation_year": 2026,
    "cgpa": 8.4,
    "skills": ["python", " ", "fastapi"],
    "github_url": "https://github.com/asha",
}


def test_create_and_read_own_profile(client, student):
    res = client.post("/api/student/profile", json=PROFILE, headers=student["headers"])
    assert res.status_code == 201, res.text
    profile = res.json()["profile"]
    assert profile["skills"] == ["python", "fastapi"]
    assert profile["is_complete"] is True
    assert profile["completion_percentage"] == 50
    assert profile["is_verified"] is False
    assert profile["user"]["email"] == student["email"]

    mine = client.get("/api/student/profile/me", headers=student["headers"]).json()["profile"]
    assert mine["id"] == profile["id"]


def test_second_profile_is_409(client, student, db):
    client.post("/api/student/profile", json=PROFILE, headers=student["headers"])
    assert_error(client.post("/api/student/profile", json=PROFILE, headers=student["headers"]), 409)
    assert db["student_profiles"].count_documents({}) == 1


def test_missing_profile_is_404(client, student):
    assert_error(client.get("/api/student/profile/me", headers=student["headers"]), 404)
    assert_error(client.put("/api/student/profile", json={"bio": "hi"}, headers=student["headers"]), 404)


def test_is_complete_can_be_sent_explicitly(client, student):
    res = client.post("/api/student/profile", json={**PROFILE, "is_complete": False}, headers=student["headers"])
    assert res.json()["profile"]["is_complete"] is False
    res = client.put("/api/student/profile", json={"bio": "Backend dev"}, headers=student["headers"])
    assert res.json()["profile"]["is_complete"] is False
    res = client.put("/api/student/profile", json={"is_complete": True}, headers=student["headers"])
    assert res.json()["profile"]["is_complete"] is True


def test_update_recomputes_completion(client, student):
    client.post("/api/student/profile", json=PROFILE, headers=student["headers"])
    res = client.put("/api/student/profile", json={
        "bio": "Backend dev", "linkedin_url": "https://linkedin.com/in/asha",
    }, headers=student["headers"])
    profile = res.json()["profile"]
    assert profile["completion_percentage"] == 70
    assert profile["cgpa"] == 8.4


def test_profile_validation(client, student):
    for bad in (
        {**PROFILE, "cgpa": 11},
        {**PROFILE, "graduation_year": 2019},
        {**PROFILE, "github_url": "https://gitlab.com/asha"},
        {**PROFILE, "skills": [f"s{i}" for i in range(21)]},
        {**PROFILE, "bio": "x" * 501},
    ):
        assert_error(client.post("/api/student/profile", json=bad, headers=student["headers"]), 400)


def test_delete_profile(client, student, db):
    client.post("/api/student/profile", json=PROFILE, headers=student["headers"])
    assert client.delete("/api/student/profile", headers=student["headers"]).status_code == 200
    assert db["student_profiles"].count_documents({}) == 0


def test_search_profiles(client, recruiter, make_user, make_profile):
    make_profile(make_user("student"), cgpa=9.1, skills=["go"], graduation_year=2025)
    make_profile(make_user("student"), cgpa=7.0, skills=["python"], branch="Mechanical")
    make_profile(make_user("student"), cgpa=8.0, skills=["python", "sql"])

    def search(query):
        return client.get(f"/api/student/profiles?{query}", headers=recruiter["headers"]).json()

    assert search("skills=python")["count"] == 2
    assert search("min_cgpa=8")["count"] == 2
    assert search("min_cgpa=7.5&max_cgpa=8.5")["count"] == 1
    assert search("graduation_year=2025")["count"] == 1
    assert search("branch=mech")["count"] == 1
    assert [p["cgpa"] for p in search("sort=-cgpa")["profiles"]] == [9.1, 8.0, 7.0]
    assert [p["cgpa"] for p in search("sort=cgpa&limit=2")["profiles"]] == [7.0, 8.0]


def test_profile_by_id_for_faculty(client, faculty, student, make_profile):
    profile = make_profile(student)
    res = client.get(f"/api/student/profile/{profile['id']}", headers=faculty["headers"])
    assert res.json()["profile"]["program"] == "B.Tech"
    assert_error(client.get(f"/api/student/profile/{profile['id']}", headers=student["headers"]), 403)


def test_null_skills_update_is_rejected_and_state_kept(client, student, db):
    client.post("/api/student/profile", json=PROFILE, headers=student["headers"])
    assert_error(client.put("/api/student/profile", json={"skills": None}, headers=student["headers"]), 400)
    assert db["student_profiles"].find_one({"user": student["oid"]})["skills"] == ["python", "fastapi"]

    res = client.put("/api/student/profile", json={"skills": ["go"]}, headers=student["headers"])
    assert res.status_code == 200
    assert res.json()["profile"]["skills"] == ["go"]


def test_optional_profile_fields_can_be_cleared(client, student):
    client.post("/api/student/profile", json=PROFILE, headers=student["headers"])
    res = client.put("/api/student/profile", json={"cgpa": None, "github_url": None}, headers=student["headers"])
    assert res.status_code == 200
    assert res.json()["profile"]["cgpa"] is None


def test_skills_update_survives_legacy_null_skills(client, student, make_profile, db):
    make_profile(student)
    db["student_profiles"].update_one({"user": student["oid"]}, {"$set": {"skills": None}})
    res = client.put("/api/student/profile", json={"skills": ["go"]}, headers=student["headers"])
    assert res.status_code == 200
    assert res.json()["profile"]["skills"] == ["go"]
