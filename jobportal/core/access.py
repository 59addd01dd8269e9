"""
Access Control Gate - the one place that decides who may do what.

authorize() is a pure function: it never raises and never touches storage.
Routes look up the ownership metadata, ask the gate, and turn a denial into
an HTTP error with ensure_allowed(). The client route guard asks the same
gate before rendering recruiter views.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import HTTPException

from jobportal.schemas.schemas import UserRole

log = logging.getLogger(__name__)


class Action(str, Enum):
    read_public = "read-public"
    read_account = "read-account"
    access_admin = "access-admin"
    create_company = "create-company"
    update_company = "update-company"
    read_companies = "read-companies"
    read_company = "read-company"
    create_job = "create-job"
    update_job = "update-job"
    read_admin_jobs = "read-admin-jobs"
    read_applicants = "read-applicants"
    update_application_status = "update-application-status"
    create_application = "create-application"
    read_applied_jobs = "read-applied-jobs"


RECRUITER_ACTIONS = frozenset({
    Action.access_admin,
    Action.create_company,
    Action.update_company,
    Action.read_companies,
    Action.read_company,
    Action.create_job,
    Action.update_job,
    Action.read_admin_jobs,
    Action.read_applicants,
    Action.update_application_status,
})

# Recruiter actions that also need session.user_id == resource.owner_id
OWNED_ACTIONS = frozenset({
    Action.update_company,
    Action.read_company,
    Action.create_job,
    Action.update_job,
    Action.read_applicants,
    Action.update_application_status,
})

APPLICANT_ACTIONS = frozenset({
    Action.create_application,
    Action.read_applied_jobs,
})


class Denial(str, Enum):
    unauthenticated = "unauthenticated"
    forbidden = "forbidden"
    conflict = "conflict"

    @property
    def status_code(self) -> int:
        return {"unauthenticated": 401, "forbidden": 403, "conflict": 409}[self.value]


@dataclass(frozen=True)
class Session:
    """Authenticated identity carried by the session cookie."""
    user_id: str
    role: UserRole


@dataclass(frozen=True)
class Resource:
    """Ownership metadata of the target, looked up by the caller."""
    owner_id: Optional[str] = None
    already_applied: bool = False


@dataclass(frozen=True)
class Decision:
    allowed: bool
    denial: Optional[Denial] = None
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, denial: Denial, reason: str) -> "Decision":
        return cls(allowed=False, denial=denial, reason=reason)


def _decide(session: Optional[Session], action: Action, resource: Resource) -> Decision:
    if action == Action.read_public:
        return Decision.allow()

    if session is None:
        return Decision.deny(Denial.unauthenticated, "User not authenticated")

    if action in RECRUITER_ACTIONS and session.role != UserRole.recruiter:
        return Decision.deny(Denial.forbidden, "Recruiter access required")

    if action in APPLICANT_ACTIONS and session.role != UserRole.applicant:
        return Decision.deny(Denial.forbidden, "Only applicants can do this")

    if action in OWNED_ACTIONS and resource.owner_id != session.user_id:
        return Decision.deny(Denial.forbidden, "You do not own this resource")

    if action == Action.create_application and resource.already_applied:
        return Decision.deny(Denial.conflict, "You have already applied for this job")

    return Decision.allow()


def authorize(
    session: Optional[Session],
    action: Action,
    resource: Optional[Resource] = None,
) -> Decision:
    """
    Decide whether session may perform action on resource.

    A missing session is anonymous and may only read-public. Denials are
    logged and returned, never raised.
    """
    decision = _decide(session, action, resource or Resource())
    if not decision.allowed:
        log.warning(
            f"Denied {action.value} for "
            f"{session.user_id if session else 'anonymous'}: {decision.reason}"
        )
    return decision


def ensure_allowed(decision: Decision) -> None:
    """Render a denial as the matching HTTP error (401 / 403 / 409)."""
    if not decision.allowed:
        raise HTTPException(status_code=decision.denial.status_code, detail=decision.reason)
