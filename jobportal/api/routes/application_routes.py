"""
Application Routes

POST /application/apply/{job_id} - Apply to a job (applicant only, once per job)
GET /application/get - Current applicant's applications
GET /application/{job_id}/applicants - Applicants for a job (owning recruiter only)
PUT /application/status/{application_id} - Accept or reject (owning recruiter only)
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends

from jobportal.core.access import Action, Resource, Session, authorize, ensure_allowed
from jobportal.core.auth import get_optional_session
from jobportal.db.repository import DuplicateEntityError, EntityRepository, get_repository
from jobportal.services.entity_service import ApplicationService, JobService, can_transition
from jobportal.schemas.schemas import (
    ApplicantsEnvelope, ApplicationListEnvelope, ApplicationResponse, ApplicationStatusUpdate,
    JobWithApplications, MessageResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/application", tags=["Applications"])


@router.post("/apply/{job_id}", response_model=MessageResponse, status_code=201)
async def apply_to_job(
    job_id: str,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Apply to a job. Applicants only. Cannot apply twice to same job."""
    if not JobService(repo).get(job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    applications = ApplicationService(repo)
    already_applied = session is not None and applications.exists(job_id, session.user_id)
    ensure_allowed(authorize(session, Action.create_application, Resource(already_applied=already_applied)))

    try:
        applications.create(job_id, session.user_id)
    except DuplicateEntityError:
        raise HTTPException(status_code=409, detail="You have already applied for this job")

    return MessageResponse(message="Job applied successfully")


@router.get("/get", response_model=ApplicationListEnvelope)
async def get_applied_jobs(
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Applicant's applications. Ones whose job was deleted come back flagged orphaned."""
    ensure_allowed(authorize(session, Action.read_applied_jobs))
    applications = ApplicationService(repo).list_for_applicant(session.user_id, JobService(repo))
    return ApplicationListEnvelope(applications=[ApplicationResponse(**a) for a in applications])


@router.get("/{job_id}/applicants", response_model=ApplicantsEnvelope)
async def get_applicants(
    job_id: str,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """The job with its applications, each carrying the applicant user."""
    jobs = JobService(repo)
    job = jobs.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    ensure_allowed(authorize(session, Action.read_applicants, Resource(owner_id=job["created_by"])))

    applications = ApplicationService(repo).list_for_job(job_id)
    return ApplicantsEnvelope(job=JobWithApplications(**jobs.populate(job), applications=applications))


@router.put("/status/{application_id}", response_model=MessageResponse)
async def update_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """
    Accept or reject a pending application.

    Only the recruiter who owns the job may do this. Accepted and rejected
    are final, and applications of a deleted job can no longer change.
    """
    applications = ApplicationService(repo)
    application = applications.get(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    job = JobService(repo).get(application["job"])
    if not job:
        raise HTTPException(status_code=404, detail="Job for this application no longer exists")
    ensure_allowed(authorize(session, Action.update_application_status, Resource(owner_id=job["created_by"])))

    if not can_transition(application["status"], update.status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change status from '{application['status']}' to '{update.status.value}'",
        )

    if applications.update_status(application, update.status) is None:
        log.warning(f"Application {application_id} changed status while being updated")
        raise HTTPException(status_code=400, detail="Application status was already decided")

    return MessageResponse(message="Status updated successfully")
