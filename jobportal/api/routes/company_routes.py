"""
Company Routes

POST /company/register - Register a company (recruiter only)
GET /company/get - Companies owned by the current recruiter
GET /company/get/{company_id} - One owned company
PUT /company/update/{company_id} - Update an owned company
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends

from jobportal.core.access import Action, Resource, Session, authorize, ensure_allowed
from jobportal.core.auth import get_optional_session
from jobportal.db.repository import DuplicateEntityError, EntityRepository, get_repository
from jobportal.services.entity_service import CompanyService
from jobportal.schemas.schemas import (
    CompanyCreate, CompanyEnvelope, CompanyListEnvelope, CompanyResponse, CompanyUpdate,
)

router = APIRouter(prefix="/company", tags=["Companies"])


def _owned_company(companies: CompanyService, company_id: str, session: Optional[Session], action: Action) -> dict:
    company = companies.get(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    ensure_allowed(authorize(session, action, Resource(owner_id=company["created_by"])))
    return company


@router.post("/register", response_model=CompanyEnvelope, status_code=201)
async def register_company(
    data: CompanyCreate,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Register a company owned by the current recruiter."""
    ensure_allowed(authorize(session, Action.create_company))

    try:
        company = CompanyService(repo).create(data, session.user_id)
    except DuplicateEntityError:
        raise HTTPException(status_code=400, detail="You can't register same company")

    return CompanyEnvelope(message="Company registered successfully", company=CompanyResponse(**company))


@router.get("/get", response_model=CompanyListEnvelope)
async def get_companies(
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    ensure_allowed(authorize(session, Action.read_companies))
    companies = CompanyService(repo).list_by_owner(session.user_id)
    return CompanyListEnvelope(companies=[CompanyResponse(**c) for c in companies])


@router.get("/get/{company_id}", response_model=CompanyEnvelope)
async def get_company(
    company_id: str,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    company = _owned_company(CompanyService(repo), company_id, session, Action.read_company)
    return CompanyEnvelope(message="Company found", company=CompanyResponse(**company))


@router.put("/update/{company_id}", response_model=CompanyEnvelope)
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    session: Optional[Session] = Depends(get_optional_session),
    repo: EntityRepository = Depends(get_repository),
):
    """Update company info. Only the owning recruiter can update."""
    companies = CompanyService(repo)
    _owned_company(companies, company_id, session, Action.update_company)

    try:
        company = companies.update(company_id, data)
    except DuplicateEntityError:
        raise HTTPException(status_code=400, detail="Company name already taken")
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    return CompanyEnvelope(message="Company information updated", company=CompanyResponse(**company))
