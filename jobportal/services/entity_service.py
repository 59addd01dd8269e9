"""
Entity Services - CRUD operations for the job portal collections.

Collections:
1. users        - accounts; role fixed at registration
2. companies    - owned by the recruiter who registered them (created_by)
3. jobs         - owned by one company and its recruiter (company, created_by)
4. applications - one per (job, applicant); status pending/accepted/rejected

Services never decide authorization. Routes ask the access gate first and
then call in here. References between collections are plain id strings;
when a referenced document is gone, reads flag or skip it instead of failing.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from jobportal.core.auth import hash_password
from jobportal.db.repository import EntityRepository
from jobportal.schemas.schemas import (
    ApplicationStatus, CompanyCreate, CompanyUpdate, JobCreate, JobUpdate,
    ProfileUpdate, RegisterRequest,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def newest_first(docs: List[dict]) -> List[dict]:
    return sorted(docs, key=lambda doc: doc["created_at"], reverse=True)


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """Handles user accounts. Password hashes never leave this service."""

    def __init__(self, repo: EntityRepository):
        self.repo = repo

    @staticmethod
    def public(user: Optional[dict]) -> Optional[dict]:
        """Strip the password hash before a user goes into a response."""
        if user is None:
            return None
        return {k: v for k, v in user.items() if k != "password"}

    def create(self, data: RegisterRequest) -> dict:
        """Insert a user. Raises DuplicateEntityError if the email is taken."""
        doc = {
            "fullname": data.fullname,
            "email": data.email,
            "phone_number": data.phone_number,
            "password": hash_password(data.password),
            "role": data.role.value,
            "profile": {"bio": None, "skills": []},
            "created_at": utcnow(),
        }
        return self.repo.insert("users", doc)

    def get(self, user_id: str) -> Optional[dict]:
        return self.repo.get("users", user_id)

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.repo.find_one("users", {"email": email})

    def update_profile(self, user: dict, data: ProfileUpdate) -> Optional[dict]:
        """Update contact fields and profile. Never touches role."""
        fields = data.model_dump(exclude_none=True, include={"fullname", "email", "phone_number"})

        profile = dict(user.get("profile") or {})
        if data.bio is not None:
            profile["bio"] = data.bio
        if data.skills is not None:
            profile["skills"] = data.skills
        fields["profile"] = profile

        return self.repo.update("users", user["id"], fields)


# ============================================================
# COMPANIES COLLECTION
# ============================================================

class CompanyService:
    """Handles companies. created_by is the owning recruiter."""

    def __init__(self, repo: EntityRepository):
        self.repo = repo

    def create(self, data: CompanyCreate, owner_id: str) -> dict:
        """Insert a company. Raises DuplicateEntityError if the name is taken."""
        doc = data.model_dump()
        doc.update({"created_by": owner_id, "created_at": utcnow()})
        return self.repo.insert("companies", doc)

    def get(self, company_id: str) -> Optional[dict]:
        return self.repo.get("companies", company_id)

    def list_by_owner(self, owner_id: str) -> List[dict]:
        return newest_first(self.repo.find("companies", {"created_by": owner_id}))

    def update(self, company_id: str, data: CompanyUpdate) -> Optional[dict]:
        fields = data.model_dump(exclude_none=True)
        if not fields:
            return self.get(company_id)
        return self.repo.update("companies", company_id, fields)


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService:
    """
    Handles job postings.

    Jobs are returned "populated": the company id is swapped for the
    company document, the way the frontend cards expect it.
    """

    def __init__(self, repo: EntityRepository):
        self.repo = repo

    def populate(self, job: dict) -> dict:
        job = dict(job)
        job["company"] = self.repo.get("companies", job["company"])
        return job

    def create(self, data: JobCreate, company: dict, owner_id: str) -> dict:
        doc = data.model_dump(mode="json", exclude={"company_id"})
        doc.update({
            "company": company["id"],
            "created_by": owner_id,
            "created_at": utcnow(),
        })
        return self.populate(self.repo.insert("jobs", doc))

    def get(self, job_id: str) -> Optional[dict]:
        return self.repo.get("jobs", job_id)

    def list_public(self, keyword: Optional[str] = None) -> List[dict]:
        """
        All jobs, newest first, optionally filtered by keyword.

        The keyword matches title or description, case-insensitive.
        Jobs whose company has been deleted are skipped.
        """
        jobs = self.repo.find("jobs")
        if keyword:
            needle = keyword.lower()
            jobs = [
                job for job in jobs
                if needle in job["title"].lower() or needle in job["description"].lower()
            ]

        populated = [self.populate(job) for job in newest_first(jobs)]
        return [job for job in populated if job["company"] is not None]

    def list_by_owner(self, owner_id: str) -> List[dict]:
        """Jobs created by one recruiter, newest first."""
        jobs = self.repo.find("jobs", {"created_by": owner_id})
        return [self.populate(job) for job in newest_first(jobs)]

    def update(self, job_id: str, data: JobUpdate) -> Optional[dict]:
        fields = data.model_dump(mode="json", exclude_none=True)
        job = self.repo.update("jobs", job_id, fields) if fields else self.get(job_id)
        return self.populate(job) if job else None

    def delete(self, job_id: str) -> bool:
        """Delete a job. Its applications stay behind as orphans."""
        return self.repo.delete("jobs", job_id)


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

# pending -> accepted | rejected; both outcomes are terminal
TRANSITIONS: Dict[ApplicationStatus, frozenset] = {
    ApplicationStatus.pending: frozenset({ApplicationStatus.accepted, ApplicationStatus.rejected}),
    ApplicationStatus.accepted: frozenset(),
    ApplicationStatus.rejected: frozenset(),
}


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return target in TRANSITIONS[ApplicationStatus(current)]


class ApplicationService:
    """Handles applications and their status lifecycle."""

    def __init__(self, repo: EntityRepository):
        self.repo = repo

    def exists(self, job_id: str, applicant_id: str) -> bool:
        return self.repo.find_one("applications", {"job": job_id, "applicant": applicant_id}) is not None

    def create(self, job_id: str, applicant_id: str) -> dict:
        """
        Insert a pending application.

        Raises DuplicateEntityError when (job, applicant) already exists;
        the unique index catches applies that race past exists().
        """
        now = utcnow()
        doc = {
            "job": job_id,
            "applicant": applicant_id,
            "status": ApplicationStatus.pending.value,
            "created_at": now,
            "updated_at": now,
        }
        return self.repo.insert("applications", doc)

    def get(self, application_id: str) -> Optional[dict]:
        return self.repo.get("applications", application_id)

    def list_for_job(self, job_id: str) -> List[dict]:
        """Applications for one job with applicant users embedded."""
        applications = []
        for application in newest_first(self.repo.find("applications", {"job": job_id})):
            applicant = UserService.public(self.repo.get("users", application["applicant"]))
            applications.append({
                **application,
                "job": None,
                "applicant": applicant,
                "orphaned": applicant is None,
            })
        return applications

    def list_for_applicant(self, applicant_id: str, jobs: JobService) -> List[dict]:
        """An applicant's own applications with jobs embedded and orphans flagged."""
        applications = []
        for application in newest_first(self.repo.find("applications", {"applicant": applicant_id})):
            job = jobs.get(application["job"])
            applications.append({
                **application,
                "job": jobs.populate(job) if job else None,
                "applicant": None,
                "orphaned": job is None,
            })
        return applications

    def update_status(self, application: dict, target: ApplicationStatus) -> Optional[dict]:
        """
        Move a pending application to target.

        The write only lands while the stored status is still pending, so
        two racing recruiter clicks cannot both succeed. Returns None when
        it lost that race.
        """
        return self.repo.update(
            "applications",
            application["id"],
            {"status": target.value, "updated_at": utcnow()},
            expect={"status": ApplicationStatus.pending.value},
        )
