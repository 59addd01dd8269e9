"""
Job Routes

GET /job - List all jobs, optional ?keyword= search (public)
POST /job - Create job posting (recruiter, must own the company)
GET /job/getadminjobs - Jobs created by the current recruiter
GET /job/{job_id} - Get job details (public)
PUT /job/{job_id} - Update job (owning recruiter only)
DELETE /job/{job_id} - Delete job (owning recruiter only; applications are left orphaned)
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from jobportal.core.access import Action, Resource, Session, authorize, ensure_allowed
from jobportal.core.auth import get_optional_session
from jobportal.db.repository import EntityRepository, get_repository
from jobportal.services.entity_service import CompanyService, JobService
from jobportal.schemas.schemas import (
    JobCreate, JobEnvelope, JobListEnvelope, JobResponse, JobUpdate, MessageResponse,
)

router = APIRouter(prefix="/job", tags=["Jobs"])


def _owned_job(jobs: JobService, job_id: str, session: Optional[Session]) -> dict:
    job = jobs.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_allowed(authorize(session, Action.update_job, Resource(owner_id=job["created_by"])))
    return job


@router.get("", response_model=JobListEnvelope)
async def list_jobs(
    keyword: Optional[str] = Query(None, description="Search in title and description"),
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """List all job postings, newest first."""
    ensure_allowed(authorize(session, Action.read_public))
    jobs = JobService(repo).list_public(keyword)
    return JobListEnvelope(jobs=[JobResponse(**job) for job in jobs])


@router.post("", response_model=JobEnvelope, status_code=201)
async def create_job(
    job: JobCreate,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Create a new job posting under a company the recruiter owns."""
    company = CompanyService(repo).get(job.company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    ensure_allowed(authorize(session, Action.create_job, Resource(owner_id=company["created_by"])))

    created = JobService(repo).create(job, company, session.user_id)
    return JobEnvelope(message="New job created successfully", job=JobResponse(**created))


@router.get("/getadminjobs", response_model=JobListEnvelope)
async def get_admin_jobs(
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Jobs created by the current recruiter."""
    ensure_allowed(authorize(session, Action.read_admin_jobs))
    jobs = JobService(repo).list_by_owner(session.user_id)
    return JobListEnvelope(jobs=[JobResponse(**job) for job in jobs])


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: str,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Get details of a specific job."""
    ensure_allowed(authorize(session, Action.read_public))
    jobs = JobService(repo)
    job = jobs.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobEnvelope(job=JobResponse(**jobs.populate(job)))


@router.put("/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: str,
    update: JobUpdate,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Update a job posting. Only the owning recruiter can update."""
    jobs = JobService(repo)
    _owned_job(jobs, job_id, session)

    job = jobs.update(job_id, update)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobEnvelope(message="Job updated successfully", job=JobResponse(**job))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Delete a job posting. Its applications are kept but become orphaned."""
    jobs = JobService(repo)
    _owned_job(jobs, job_id, session)

    if not jobs.delete(job_id):
        raise HTTPException(status_code=404, detail="Job not found")
    return MessageResponse(message="Job deleted successfully")
