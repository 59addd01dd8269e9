"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Every response carries the {success, message?, ...data} envelope.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    applicant = "applicant"
    recruiter = "recruiter"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


def _split_csv(value):
    """Accept either a list or a comma separated string."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


# ============================================================
# USER SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    fullname: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone_number: str = Field(..., min_length=5, max_length=20)
    password: str = Field(..., min_length=8)
    role: UserRole

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: UserRole

class ProfileUpdate(BaseModel):
    # no role field: role is fixed at registration
    fullname: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, min_length=5, max_length=20)
    bio: Optional[str] = None
    skills: Optional[List[str]] = None

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, value):
        return _split_csv(value)

class ProfileResponse(BaseModel):
    bio: Optional[str] = None
    skills: List[str] = []

class UserResponse(BaseModel):
    id: str
    fullname: str
    email: str
    phone_number: str
    role: UserRole
    profile: ProfileResponse = ProfileResponse()
    created_at: Optional[datetime] = None


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None

class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None

class CompanyResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str
    requirements: List[str] = []
    salary: float = Field(..., ge=0)
    location: str
    job_type: JobType = JobType.full_time
    experience_level: int = Field(0, ge=0)
    position: int = Field(1, ge=1)
    company_id: str

    @field_validator("requirements", mode="before")
    @classmethod
    def split_requirements(cls, value):
        return _split_csv(value)

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    salary: Optional[float] = Field(None, ge=0)
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    experience_level: Optional[int] = Field(None, ge=0)
    position: Optional[int] = Field(None, ge=1)

    @field_validator("requirements", mode="before")
    @classmethod
    def split_requirements(cls, value):
        return _split_csv(value)

class JobResponse(BaseModel):
    id: str
    title: str
    description: str
    requirements: List[str] = []
    salary: float
    location: str
    job_type: str
    experience_level: int
    position: int
    company: Optional[CompanyResponse] = None
    created_by: str
    created_at: Optional[datetime] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

    @field_validator("status", mode="before")
    @classmethod
    def lowercase_status(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

class ApplicationResponse(BaseModel):
    id: str
    job: Optional[JobResponse] = None
    applicant: Optional[UserResponse] = None
    status: ApplicationStatus
    orphaned: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class JobWithApplications(JobResponse):
    applications: List[ApplicationResponse] = []


# ============================================================
# ENVELOPES
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class UserEnvelope(MessageResponse):
    user: UserResponse

class CompanyEnvelope(MessageResponse):
    company: CompanyResponse

class CompanyListEnvelope(BaseModel):
    success: bool = True
    companies: List[CompanyResponse]

class JobEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    job: JobResponse

class JobListEnvelope(BaseModel):
    success: bool = True
    jobs: List[JobResponse]

class ApplicantsEnvelope(BaseModel):
    success: bool = True
    job: JobWithApplications

class ApplicationListEnvelope(BaseModel):
    success: bool = True
    applications: List[ApplicationResponse]

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
