"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, EmailStr, Field,
    field_validator, model_validator
)
from typing import ClassVar, Optional, List, Tuple
from datetime import datetime, timezone
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    recruiter = "recruiter"
    faculty = "faculty"
    admin = "admin"


class ApprovalStatus(str, Enum):
    approved = "approved"
    pending = "pending"


class JobType(str, Enum):
    internship = "internship"
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"


class LocationType(str, Enum):
    remote = "remote"
    onsite = "onsite"
    hybrid = "hybrid"


class JobStatus(str, Enum):
    draft = "draft"
    active = "active"
    closed = "closed"
    cancelled = "cancelled"


class DurationUnit(str, Enum):
    weeks = "weeks"
    months = "months"


class ApplicationStage(str, Enum):
    applied = "applied"
    screening = "screening"
    shortlisted = "shortlisted"
    interview_scheduled = "interview-scheduled"
    interview_completed = "interview-completed"
    selected = "selected"
    rejected = "rejected"
    withdrawn = "withdrawn"


class DocumentType(str, Enum):
    resume = "resume"
    transcript = "transcript"
    id_proof = "id-proof"
    certificate = "certificate"
    enrollment = "enrollment"
    other = "other"


class VerificationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    resubmit_required = "resubmit-required"


class SkillCategory(str, Enum):
    programming = "programming"
    framework = "framework"
    database = "database"
    devops = "devops"
    cloud = "cloud"
    design = "design"
    testing = "testing"
    soft_skill = "soft-skill"
    other = "other"


# Client forms send "fulltime"/"parttime"; the store only knows the enum values
JOB_TYPE_ALIASES = {
    "internship": JobType.internship,
    "fulltime": JobType.full_time,
    "full-time": JobType.full_time,
    "full_time": JobType.full_time,
    "parttime": JobType.part_time,
    "part-time": JobType.part_time,
    "part_time": JobType.part_time,
    "contract": JobType.contract,
}


def normalize_job_type(value) -> JobType:
    """Map a client job type onto JobType; unknown values fall back to internship."""
    if isinstance(value, JobType):
        return value
    key = str(value or "").strip().lower()
    return JOB_TYPE_ALIASES.get(key, JobType.internship)


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store datetimes as naive UTC, the way pymongo hands them back."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def to_document(model: BaseModel, **kwargs) -> dict:
    """Dump a request model for storage: enums become their values, datetimes stay datetimes."""
    return _plain(model.model_dump(**kwargs))


class PartialUpdate(BaseModel):
    """
    Base for PUT/PATCH bodies dumped with exclude_unset.

    Fields listed in `non_nullable` may be left out but not sent as null,
    since the stored document requires them.
    """
    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        nulls = [
            name for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.student
    department: str = ""

    @field_validator("name", "department")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

class LoginRequest(BaseModel):
    # Only email and password are accepted
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    department: str = ""
    is_active: bool
    approval_status: str = ApprovalStatus.approved.value
    last_login: Optional[datetime] = None
    profile_picture: str = ""
    created_at: Optional[datetime] = None

class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: UserResponse


# ============================================================
# STUDENT PROFILE SCHEMAS
# ============================================================

URL_PATTERN = r"^(https?://.+|)$"
GITHUB_PATTERN = r"^(https?://(www\.)?github\.com/.+|)$"
LINKEDIN_PATTERN = r"^(https?://(www\.)?linkedin\.com/.+|)$"


class Project(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    technologies: List[str] = []
    url: Optional[str] = Field(None, pattern=r"^https?://.+")
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProfileBase(BaseModel):
    branch: Optional[str] = Field(None, max_length=100)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    projects: Optional[List[Project]] = None
    resume_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    github_url: Optional[str] = Field(None, pattern=GITHUB_PATTERN)
    linkedin_url: Optional[str] = Field(None, pattern=LINKEDIN_PATTERN)
    portfolio_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    bio: Optional[str] = Field(None, max_length=500)

    @field_validator("skills", check_fields=False)
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = [s.strip() for s in v if s and s.strip()]
        if len(cleaned) > 20:
            raise ValueError("Cannot add more than 20 skills")
        return cleaned


class ProfileCreate(ProfileBase):
    program: str = Field(..., min_length=1, max_length=100)
    graduation_year: int = Field(..., ge=2020, le=2030)
    skills: List[str] = []
    projects: List[Project] = []
    # Submitting the profile form marks it complete unless told otherwise
    is_complete: bool = True


class ProfileUpdate(ProfileBase, PartialUpdate):
    non_nullable = ("program", "graduation_year", "skills", "projects", "is_complete")

    program: Optional[str] = Field(None, min_length=1, max_length=100)
    graduation_year: Optional[int] = Field(None, ge=2020, le=2030)
    skills: Optional[List[str]] = None
    is_complete: Optional[bool] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class Stipend(BaseModel):
    min: float = Field(0, ge=0)
    max: float = Field(0, ge=0)
    currency: str = "INR"


class Duration(BaseModel):
    value: int = Field(0, ge=0)
    unit: DurationUnit = DurationUnit.months


class Eligibility(BaseModel):
    min_cgpa: float = Field(0, ge=0, le=10)
    allowed_programs: List[str] = []
    graduation_years: List[int] = []


def _stipend(value) -> Optional[dict]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = float(value)
    if isinstance(value, (int, float)):
        return {"min": value, "max": value, "currency": "INR"}
    return value


def _duration(value) -> Optional[dict]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = float(value)
    if isinstance(value, (int, float)):
        return {"value": int(value), "unit": DurationUnit.months.value}
    return value


class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    company_name: str = Field(
        ..., min_length=1, max_length=100,
        validation_alias=AliasChoices("company_name", "company")
    )
    company_logo: str = ""
    location: str = Field(..., min_length=1)
    location_type: LocationType = LocationType.onsite
    job_type: JobType = Field(
        JobType.internship, validation_alias=AliasChoices("job_type", "type")
    )
    application_deadline: datetime
    skills: List[str] = []
    # Free-text requirements from the simple job form, comma separated
    requirements: Optional[str] = None
    eligibility: Eligibility = Eligibility()
    stipend: Stipend = Stipend()
    duration: Duration = Duration(value=1)
    openings: int = Field(1, ge=1)
    status: JobStatus = JobStatus.active
    tags: List[str] = []

    @field_validator("job_type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return normalize_job_type(v)

    @field_validator("stipend", mode="before")
    @classmethod
    def coerce_stipend(cls, v):
        return _stipend(v) or Stipend()

    @field_validator("duration", mode="before")
    @classmethod
    def coerce_duration(cls, v):
        return _duration(v) or Duration(value=1)

    @field_validator("application_deadline")
    @classmethod
    def deadline_utc(cls, v: datetime) -> datetime:
        return naive_utc(v)

    @model_validator(mode="after")
    def merge_requirements(self):
        skills = [s.strip() for s in self.skills if s and s.strip()]
        if not skills and self.requirements:
            skills = [s.strip() for s in self.requirements.split(",") if s.strip()]
        if not skills:
            raise ValueError("Please provide required skills")
        if len(skills) > 20:
            raise ValueError("Skills must have 1-20 items")
        self.skills = skills
        return self


class JobUpdate(PartialUpdate):
    non_nullable = (
        "title", "description", "company_name", "location", "location_type", "job_type",
        "application_deadline", "skills", "eligibility", "stipend", "duration",
        "openings", "status", "tags",
    )

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    company_name: Optional[str] = Field(
        None, min_length=1, max_length=100,
        validation_alias=AliasChoices("company_name", "company")
    )
    company_logo: Optional[str] = None
    location: Optional[str] = None
    location_type: Optional[LocationType] = None
    job_type: Optional[JobType] = Field(
        None, validation_alias=AliasChoices("job_type", "type")
    )
    application_deadline: Optional[datetime] = None
    skills: Optional[List[str]] = Field(None, min_length=1, max_length=20)
    eligibility: Optional[Eligibility] = None
    stipend: Optional[Stipend] = None
    duration: Optional[Duration] = None
    openings: Optional[int] = Field(None, ge=1)
    status: Optional[JobStatus] = None
    tags: Optional[List[str]] = None

    @field_validator("job_type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return None if v is None else normalize_job_type(v)

    @field_validator("stipend", mode="before")
    @classmethod
    def coerce_stipend(cls, v):
        return _stipend(v)

    @field_validator("duration", mode="before")
    @classmethod
    def coerce_duration(cls, v):
        return _duration(v)

    @field_validator("application_deadline")
    @classmethod
    def deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


class JobStatusUpdate(BaseModel):
    status: JobStatus

    @field_validator("status")
    @classmethod
    def only_open_or_closed(cls, v: JobStatus) -> JobStatus:
        if v not in (JobStatus.active, JobStatus.closed):
            raise ValueError('Invalid status. Must be either "active" or "closed"')
        return v


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    job_id: str = Field(..., validation_alias=AliasChoices("job_id", "jobId"))
    cover_letter: str = Field("", max_length=1000)
    resume_url: Optional[str] = Field(None, pattern=r"^https?://.+")

class ApplyRequest(BaseModel):
    cover_letter: str = Field("", max_length=1000)

class StageUpdate(BaseModel):
    stage: ApplicationStage

class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1, max_length=500)
    rating: Optional[int] = Field(None, ge=1, le=5)

class InterviewSchedule(BaseModel):
    scheduled_date: datetime
    scheduled_time: Optional[str] = None
    location: Optional[str] = None
    meeting_link: Optional[str] = None

class ScoresUpdate(BaseModel):
    resume_score: Optional[float] = Field(None, ge=0, le=100)
    interview_score: Optional[float] = Field(None, ge=0, le=100)
    technical_score: Optional[float] = Field(None, ge=0, le=100)
    overall_score: Optional[float] = Field(None, ge=0, le=100)


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class FacultyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    email: EmailStr
    department: str = Field(..., min_length=1)

class VerifyToggle(BaseModel):
    verified: bool


# ============================================================
# VERIFICATION SCHEMAS
# ============================================================

class VerificationMetadata(BaseModel):
    file_size: Optional[int] = Field(None, ge=0)
    file_type: Optional[str] = None
    uploaded_from: Optional[str] = None

class VerificationCreate(BaseModel):
    document_type: DocumentType
    document_name: str = Field(..., min_length=1)
    document_url: str = Field(..., pattern=r"^https?://.+")
    metadata: VerificationMetadata = VerificationMetadata()

class VerificationReview(BaseModel):
    status: VerificationStatus
    remarks: str = Field("", max_length=500)

    @field_validator("status")
    @classmethod
    def not_pending(cls, v: VerificationStatus) -> VerificationStatus:
        if v == VerificationStatus.pending:
            raise ValueError("Invalid status")
        return v


# ============================================================
# DEPARTMENT & SKILL SCHEMAS
# ============================================================

class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=10)
    description: str = Field("", max_length=500)
    head_of_department: Optional[str] = None
    faculty: List[str] = []
    programs: List[str] = []
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.strip().upper()

class DepartmentUpdate(PartialUpdate):
    non_nullable = ("name", "code", "faculty", "programs", "is_active")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=10)
    description: Optional[str] = Field(None, max_length=500)
    head_of_department: Optional[str] = None
    faculty: Optional[List[str]] = None
    programs: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v

class SkillCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    category: SkillCategory = SkillCategory.other
    description: str = Field("", max_length=200)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def lower_name(cls, v: str) -> str:
        return v.strip().lower()

class SkillUpdate(PartialUpdate):
    non_nullable = ("name", "category", "is_active")

    name: Optional[str] = Field(None, min_length=1, max_length=50)
    category: Optional[SkillCategory] = None
    description: Optional[str] = Field(None, max_length=200)
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def lower_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
