"""
Shared fixtures: an in-memory MongoDB (mongomock), an API client and
factories for users, profiles and jobs.
"""

import itertools
from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from portal.core.auth import create_access_token
from portal.core.config import get_settings
from portal.db import mongodb
from portal.main import app
from portal.services.job_service import JobService
from portal.services.profile_service import StudentProfileService
from portal.services.user_service import UserService

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def db():
    database = mongomock.MongoClient()["portal_test"]
    mongodb.set_mongo_db(database)
    mongodb.init_mongo_indexes()
    yield database
    mongodb.set_mongo_db(None)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def settings(monkeypatch):
    """Settings with storage unconfigured unless a test sets it up."""
    s = get_settings()
    monkeypatch.setattr(s, "cloudinary_cloud_name", "")
    monkeypatch.setattr(s, "cloudinary_api_key", "")
    monkeypatch.setattr(s, "cloudinary_api_secret", "")
    return s


@pytest.fixture
def make_user():
    def _make(role="student", is_active=True, approval_status="approved", password="password123", **extra):
        n = next(_counter)
        doc = UserService().create(
            name=extra.get("name", f"{role.title()} {n}"),
            email=extra.get("email", f"{role}{n}@example.com"),
            password=password,
            role=role,
            department=extra.get("department", "CSE"),
            is_active=is_active,
            approval_status=approval_status,
        )
        token = create_access_token(str(doc["_id"]), doc["email"], role)
        return {
            "id": str(doc["_id"]),
            "oid": doc["_id"],
            "email": doc["email"],
            "role": role,
            "password": password,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }
    return _make


@pytest.fixture
def student(make_user):
    return make_user("student")


@pytest.fixture
def recruiter(make_user):
    return make_user("recruiter")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def faculty(make_user):
    return make_user("faculty")


@pytest.fixture
def make_profile():
    def _make(user, **fields):
        data = {
            "program": "B.Tech",
            "branch": "Computer Science",
            "graduation_year": 2026,
            "cgpa": 8.2,
            "skills": ["python", "mongodb"],
            "projects": [],
            "resume_url": "https://files.example.com/resume.pdf",
            "is_complete": True,
        }
        data.update(fields)
        return StudentProfileService().create(user["id"], data)
    return _make


@pytest.fixture
def make_job():
    def _make(owner, **fields):
        data = {
            "title": "Backend Intern",
            "description": "Build APIs",
            "company_name": "Acme",
            "company_logo": "",
            "location": "Pune",
            "location_type": "onsite",
            "job_type": "internship",
            "application_deadline": datetime.utcnow() + timedelta(days=30),
            "skills": ["python"],
            "eligibility": {"min_cgpa": 0, "allowed_programs": [], "graduation_years": []},
            "stipend": {"min": 10000, "max": 20000, "currency": "INR"},
            "duration": {"value": 3, "unit": "months"},
            "openings": 2,
            "status": "active",
            "tags": [],
        }
        data.update(fields)
        return JobService().create(owner["id"], data)
    return _make


def assert_error(response, status_code):
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["error"]
    return body
